"""已启用扩展注册表

从 YAML 文件加载宿主应用已启用的扩展，满足 ExtensionProvider 协议。

文件格式:
    extensions:
      BlogTools:
        install_type: local          # local | composer
        path: extensions/local/acme/blog-tools
        package: acme/blog-tools
        enabled: true
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from extend.utils.json_io import load_json
from extend.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class ExtensionEntry:
    """单个已注册扩展"""

    name: str
    install_type: str = "composer"
    path: str = ""
    package: str = ""
    enabled: bool = True

    def get_composer_json(self) -> dict[str, Any] | None:
        """读取扩展目录下的 composer.json，不存在或无效返回 None"""
        if not self.path:
            return None
        try:
            data = load_json(Path(self.path) / "composer.json")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("扩展清单不可读: %s (%s)", self.name, e)
            return None
        return data if isinstance(data, dict) else None


class ExtensionRegistry:
    """扩展注册表"""

    section_key = "extensions"

    def __init__(self, registry_file: str, root_dir: str = ".") -> None:
        self.registry_file = Path(registry_file)
        self.root_dir = Path(root_dir)
        self._entries = self._load()

    def _load(self) -> list[ExtensionEntry]:
        data = load_yaml(self.registry_file)
        entries: list[ExtensionEntry] = []
        for name, info in (data.get(self.section_key) or {}).items():
            info = info or {}
            path = info.get("path", "")
            if path and not Path(path).is_absolute():
                path = str(self.root_dir / path)
            entries.append(ExtensionEntry(
                name=name,
                install_type=info.get("install_type", "composer"),
                path=path,
                package=info.get("package", ""),
                enabled=bool(info.get("enabled", True)),
            ))
        logger.debug("已加载 %d 个扩展定义", len(entries))
        return entries

    def get_enabled(self) -> list[ExtensionEntry]:
        return [e for e in self._entries if e.enabled]

    def get(self, name: str) -> ExtensionEntry | None:
        return next((e for e in self._entries if e.name == name), None)

    def get_composer_config(self, name: str) -> dict[str, Any]:
        """按包名查找扩展，返回 {"name": 扩展标题, "package": 包名, ...}"""
        for e in self._entries:
            if e.package == name:
                return {
                    "name": e.name,
                    "package": e.package,
                    "install_type": e.install_type,
                    "path": e.path,
                }
        return {}
