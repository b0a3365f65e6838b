"""资源定位 — 逻辑路径键到文件系统路径 / URL 的映射

路径键形如 "extensionspath/vendor/acme/blog"：首段为基准目录名，
其余部分拼接在基准目录之后。
"""

from __future__ import annotations

import logging
from pathlib import Path

from extend.core.config import Config
from extend.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class ResourceLocator:
    """基于 Config 的资源定位者（满足 ResourceProvider 协议）"""

    def __init__(self, config: Config) -> None:
        self._config = config
        root = Path(config.root_dir)
        extensions = root / config.extensions_dir
        web = root / config.web_dir
        self._paths: dict[str, Path] = {
            "root": root,
            "extensions": extensions,
            "extensionspath": extensions,
            "extensionsconfig": root / config.config_dir / "extensions",
            "cache": root / config.cache_dir,
            "config": root / config.config_dir,
            "web": web,
            "extensionsweb": web / "extensions",
        }
        self._urls: dict[str, str] = {
            "root": "/",
            "async": config.async_url,
            "extensions": "/extensions/",
        }
        self._routes: dict[str, str] = {
            "fileedit": config.fileedit_route,
        }
        self._routes.update(config.extra.get("routes") or {})

    def get_path(self, key: str) -> str:
        base, _, rest = key.strip("/").partition("/")
        if base not in self._paths:
            raise ConfigError(f"未知的路径键: {key}")
        path = self._paths[base]
        return str(path / rest) if rest else str(path)

    def get_url(self, key: str) -> str:
        if key not in self._urls:
            raise ConfigError(f"未知的 URL 键: {key}")
        return self._urls[key]

    def generate_path(self, route: str, **params: str) -> str:
        template = self._routes.get(route)
        if template is None:
            raise ConfigError(f"未知的路由: {route}")
        try:
            return template.format(**params)
        except KeyError as e:
            raise ConfigError(f"路由 {route} 缺少参数: {e}") from e
