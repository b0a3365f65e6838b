"""扩展包管理 API Blueprint

每个请求新建一个 PackageManager（请求级上下文），离线时返回 503。
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request

from extend.web.responses import action_result, bad_request, ok

extend_bp = Blueprint("extend", __name__, url_prefix="/api/extend")


def _pm() -> Any:
    from extend.services.container import get_container
    return get_container().package_manager()


def _online_pm() -> Any:
    from extend.core.exceptions import PackageManagerUnavailableError
    pm = _pm()
    if not pm.online:
        raise PackageManagerUnavailableError(
            "包管理器离线: " + "; ".join(pm.get_messages())
        )
    return pm


def _names(body: dict[str, Any]) -> list[str]:
    names = body.get("packages") or []
    if isinstance(names, str):
        names = [names]
    return [str(n) for n in names]


@extend_bp.route("/status", methods=["GET"])
def status() -> Response:
    pm = _pm()
    return jsonify(
        writable=pm.context.writable,
        online=pm.online,
        messages=pm.get_messages(),
    )


@extend_bp.route("/packages", methods=["GET"])
def packages() -> Response:
    pm = _online_pm()
    return jsonify(packages=pm.get_all_packages(), messages=pm.get_messages())


@extend_bp.route("/check", methods=["GET"])
def check() -> Response:
    return jsonify(_online_pm().check_package())


@extend_bp.route("/install", methods=["POST"])
def install() -> tuple[Response, int] | Response:
    pm = _online_pm()
    rc = pm.install_packages()
    return action_result(rc, pm.get_output(), pm.get_messages())


@extend_bp.route("/update", methods=["POST"])
def update() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    pm = _online_pm()
    rc = pm.update_package(_names(body))
    return action_result(rc, pm.get_output(), pm.get_messages())


@extend_bp.route("/remove", methods=["POST"])
def remove() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    names = _names(body)
    if not names:
        return bad_request("需要提供 packages")
    pm = _online_pm()
    rc = pm.remove_package(names)
    return action_result(rc, pm.get_output(), pm.get_messages())


@extend_bp.route("/require", methods=["POST"])
def require() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    name = body.get("name", "")
    if not name:
        return bad_request("需要提供 name")
    pm = _online_pm()
    rc = pm.require_package([{"name": name, "version": body.get("version", "")}])
    return action_result(rc, pm.get_output(), pm.get_messages())


@extend_bp.route("/search", methods=["GET"])
def search() -> tuple[Response, int] | Response:
    terms = request.args.getlist("q")
    if not terms:
        return bad_request("需要提供查询参数 q")
    pm = _online_pm()
    result = pm.search_package(terms)
    if isinstance(result, int):
        return action_result(result, pm.get_output(), pm.get_messages())
    return ok({"packages": result})


@extend_bp.route("/show", methods=["GET"])
def show() -> tuple[Response, int] | Response:
    target = request.args.get("target", "installed")
    pm = _online_pm()
    result = pm.show_package(
        target,
        request.args.get("package", ""),
        request.args.get("version", ""),
        request.args.get("root", "") in ("1", "true"),
    )
    if isinstance(result, int):
        return action_result(result, pm.get_output(), pm.get_messages())
    if target == "installed":
        return ok({"packages": pm.format_package_response(result)})
    return ok({"package": result})


@extend_bp.route("/dump-autoload", methods=["POST"])
def dump_autoload() -> tuple[Response, int] | Response:
    pm = _online_pm()
    rc = pm.dump_autoload()
    return action_result(rc, pm.get_output(), pm.get_messages())
