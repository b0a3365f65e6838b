"""包管理数据模型

数据类:
- InstalledPackage: 已安装包的元信息（来自包管理器的已安装仓库文件）
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class InstalledPackage:
    """已安装包"""

    name: str
    version: str = ""
    type: str = "library"
    description: str = ""
    authors: list[dict[str, Any]] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    install_path: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], vendor_dir: Path) -> InstalledPackage:
        """从 installed.json 单条记录构造

        v2 格式的 install-path 相对于 vendor/composer/，v1 格式没有该字段。
        """
        name = data.get("name", "")
        rel = data.get("install-path")
        if rel:
            install_path = (vendor_dir / "composer" / rel).resolve()
        else:
            install_path = vendor_dir / name
        return cls(
            name=name,
            version=data.get("version", ""),
            type=data.get("type", "library"),
            description=data.get("description", ""),
            authors=list(data.get("authors") or []),
            keywords=list(data.get("keywords") or []),
            install_path=str(install_path),
        )
