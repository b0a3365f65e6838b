"""服务容器 — 统一依赖注入

配置、资源定位、扩展注册表在容器内共享；PackageManager 是请求级对象，
每次调用 package_manager() 都新建一个，不在请求之间共享在线状态。

用法:
    container = ServiceContainer()
    pm = container.package_manager()

    # 全局单例（Web / CLI 共享）
    from extend.services.container import get_container
    pm = get_container().package_manager()
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from extend.composer.manager import PackageManager
    from extend.core.config import Config
    from extend.core.extensions import ExtensionRegistry
    from extend.core.resources import ResourceLocator

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from extend.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def resources(self) -> ResourceLocator:
        if "resources" not in self._instances:
            from extend.core.resources import ResourceLocator
            self._instances["resources"] = ResourceLocator(self._config)
        return self._instances["resources"]  # type: ignore[return-value]

    @property
    def extensions(self) -> ExtensionRegistry:
        if "extensions" not in self._instances:
            from pathlib import Path

            from extend.core.extensions import ExtensionRegistry
            root = Path(self._config.root_dir)
            self._instances["extensions"] = ExtensionRegistry(
                registry_file=str(root / self._config.extensions_file),
                root_dir=str(root),
            )
        return self._instances["extensions"]  # type: ignore[return-value]

    def package_manager(self, **kwargs: Any) -> PackageManager:
        """新建请求级 PackageManager，kwargs 透传（context / prober / actions 等）"""
        from extend.composer.manager import PackageManager
        return PackageManager(self._config, self.resources, self.extensions, **kwargs)


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
