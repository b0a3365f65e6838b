"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify


def ok(data: dict, status: int = 200) -> tuple[Response, int] | Response:
    """成功响应"""
    if status == 200:
        return jsonify(data)
    return jsonify(data), status


def bad_request(message: str) -> tuple[Response, int]:
    """请求参数错误"""
    return jsonify(error=message), 400


def action_result(rc: int, output: str, messages: list[str]) -> tuple[Response, int] | Response:
    """委托操作结果: 0 为成功，非零退出码以 500 返回，输出原样附带"""
    body = {"status": rc, "output": output, "messages": messages}
    if rc == 0:
        return jsonify(body)
    return jsonify(error="包管理操作失败", **body), 500
