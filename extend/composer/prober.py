"""扩展服务器连通性探测

向扩展服务器发送 HEAD 请求，判断在线 / 离线。连通性仅作参考：
传输层失败记录为诊断消息并视为不可达，从不向调用方抛出网络异常。
"""

from __future__ import annotations

import logging
import os
import platform
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from typing import Any

from extend.core.exceptions import ValidationError
from extend.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)

# 视为"可达"的状态码，见 RFC 2616 13.4
REACHABLE_STATUSES = frozenset({200, 203, 206, 300, 301, 302, 307, 410})


def is_reachable(status: int | None) -> bool:
    return status in REACHABLE_STATUSES


class _NoRedirect(urllib.request.HTTPRedirectHandler):
    """不跟随重定向，3xx 本身即为探测结果"""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[no-untyped-def]
        return None


def _default_opener() -> Callable[..., Any]:
    return urllib.request.build_opener(_NoRedirect).open


class ConnectivityProber:
    """扩展服务器探测器

    参数:
        site: 扩展服务器根地址，末尾带 "/"
        app_version / app_name: 随诊断参数上报的宿主应用信息
        timeout: 请求超时（秒）
        opener: 形如 urllib OpenerDirector.open 的可调用对象，测试时注入
    """

    def __init__(
        self,
        site: str,
        *,
        app_version: str = "",
        app_name: str = "",
        timeout: int = 10,
        opener: Callable[..., Any] | None = None,
    ) -> None:
        self.site = site
        self.app_version = app_version
        self.app_name = app_name
        self.timeout = timeout
        self._open = opener or _default_opener()
        self.messages: list[str] = []

    def query(self) -> dict[str, str]:
        """诊断查询参数"""
        return {
            "bolt_ver": self.app_version,
            "bolt_name": self.app_name,
            "php": platform.python_version(),
            "www": os.environ.get("SERVER_SOFTWARE", "unknown"),
        }

    def build_url(self, include_query: bool = False) -> str:
        uri = self.site + "ping"
        if include_query:
            uri += "?" + urllib.parse.urlencode(self.query())
        return uri

    def probe(self, include_query: bool = False) -> int | None:
        """探测扩展服务器，返回 HTTP 状态码，传输失败或地址无效返回 None"""
        uri = self.build_url(include_query)
        try:
            validate_url_scheme(uri, context="extension site ping")
        except ValidationError as e:
            self.messages.append(f"连接扩展服务器测试失败: {e}")
            logger.warning("扩展服务器地址无效: %s", uri)
            return None
        req = urllib.request.Request(uri, method="HEAD")
        try:
            with self._open(req, timeout=self.timeout) as resp:  # nosec B310
                status = resp.status
        except urllib.error.HTTPError as e:
            # 4xx/5xx 及未跟随的 3xx 也是有效应答
            status = e.code
            e.close()
        except (urllib.error.URLError, OSError, ValueError) as e:
            reason = getattr(e, "reason", e)
            self.messages.append(f"连接扩展服务器测试失败: {reason}")
            logger.warning("扩展服务器探测失败: %s (%s)", uri, reason)
            return None
        logger.info("扩展服务器应答: %s -> %d", self.site, status)
        return status
