"""领域协议定义

集中定义包管理编排层与宿主应用协作者之间的接口契约（Protocol）。
使用 typing.Protocol 而非 ABC，宿主应用的现有类无需修改继承关系即可满足协议。
"""

from __future__ import annotations

from typing import Any, Protocol


# =========================================================================
# 资源定位协议
# =========================================================================

class ResourceProvider(Protocol):
    """资源定位者协议

    将逻辑路径键（extensions、cache/composer、extensionspath/vendor/...、
    extensionsconfig/...）解析为文件系统路径或 URL。
    """

    def get_path(self, key: str) -> str:
        """解析逻辑路径键为文件系统路径"""
        ...

    def get_url(self, key: str) -> str:
        """解析逻辑 URL 键"""
        ...

    def generate_path(self, route: str, **params: str) -> str:
        """按命名路由生成站内链接"""
        ...


# =========================================================================
# 扩展协议
# =========================================================================

class Extension(Protocol):
    """已启用扩展"""

    name: str
    install_type: str

    def get_composer_json(self) -> dict[str, Any] | None:
        """扩展自带的清单片段，不存在返回 None"""
        ...


class ExtensionProvider(Protocol):
    """扩展提供者协议"""

    def get_enabled(self) -> list[Extension]:
        """列出已启用的扩展"""
        ...

    def get_composer_config(self, name: str) -> dict[str, Any]:
        """按包名查询扩展的包配置（至少含 name 标题字段）"""
        ...


# =========================================================================
# 包操作协议
# =========================================================================

class PackageAction(Protocol):
    """委托包管理器的单个操作

    每种操作（install/update/remove/require/search/show/json/autoload/check）
    各有一个实现，构造 PackageManager 时显式注入。
    """

    def execute(self, *args: Any) -> Any:
        ...
