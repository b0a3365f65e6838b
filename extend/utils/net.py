"""网络工具 — 扩展服务器地址校验"""

from __future__ import annotations

from urllib.parse import urlparse

from extend.core.exceptions import ValidationError

# 扩展服务器 ping 与 satis 仓库均走 HTTP(S)
_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验扩展服务器地址仅使用 http/https

    配置中的 site 会直接拼接为 ping 地址交给 urllib，file:// 等协议
    会被 urllib 当作本地文件打开，因此在发请求前拦截。

    参数:
        url: 待请求的完整地址，如 https://extensions.bolt.cm/ping
        context: 出错时附带的用途说明，如 "extension site ping"

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    scheme = urlparse(url).scheme
    if scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{scheme}'{label}，扩展服务器地址仅支持 http/https: {url}",
            details=[f"scheme={scheme or '(空)'}"],
        )
