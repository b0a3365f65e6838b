"""包信息格式化 — 将已安装包对象整理为供 UI 展示的扁平记录"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from extend.core.protocols import ExtensionProvider, ResourceProvider

logger = logging.getLogger(__name__)

README_NAMES = ("README.md", "readme.md")


def _is_readable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def config_filename(name: str) -> str:
    """包名转配置文件名: 命名空间段倒序以 "." 连接，如 acme/blog -> blog.acme.yml"""
    return ".".join(reversed(name.split("/"))) + ".yml"


class PackageFormatter:
    """包记录格式化器"""

    def __init__(
        self, resources: ResourceProvider, extensions: ExtensionProvider,
    ) -> None:
        self.resources = resources
        self.extensions = extensions

    def format_packages(
        self, packages: Mapping[str, Any] | Iterable[Any],
    ) -> list[dict[str, Any]]:
        """格式化 show('installed') 的结果

        参数:
            packages: {name: {"package": pkg}} 映射或 [{"package": pkg}] 列表
        """
        items = packages.values() if isinstance(packages, Mapping) else packages
        records = []
        for item in items:
            pkg = item["package"]
            name = pkg.name
            conf = self.extensions.get_composer_config(name) or {}
            records.append({
                "name": name,
                "title": conf.get("name", name),
                "version": pkg.version,
                "authors": pkg.authors,
                "type": pkg.type,
                "descrip": pkg.description,
                "keywords": pkg.keywords,
                "readme": self.link_readme(name),
                "config": self.link_config(name),
            })
        return records

    def link_readme(self, name: str) -> str | None:
        """包 README 的链接，README.md 优先于 readme.md"""
        base = Path(self.resources.get_path(f"extensionspath/vendor/{name}"))
        for filename in README_NAMES:
            if _is_readable(base / filename):
                return f"{self.resources.get_url('async')}readme/{name}/{filename}"
        return None

    def link_config(self, name: str) -> str | None:
        """包配置文件编辑页的链接，配置文件存在且可读时才生成"""
        filename = config_filename(name)
        path = Path(self.resources.get_path(f"extensionsconfig/{filename}"))
        if not _is_readable(path):
            return None
        return self.resources.generate_path(
            "fileedit", namespace="config", file=f"extensions/{filename}",
        )
