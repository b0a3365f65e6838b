"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from extend.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """扩展管理全局配置"""

    # 扩展服务器（末尾保留 "/"，ping 与 satis 地址直接拼接）
    site: str = "https://extensions.bolt.cm/"

    # 目录（相对 root_dir）
    root_dir: str = "."
    extensions_dir: str = "extensions"
    cache_dir: str = "app/cache"
    config_dir: str = "app/config"
    web_dir: str = "public"
    extensions_file: str = "app/config/extensions.yml"

    # 宿主应用信息（随 ping 上报）
    app_name: str = "bolt"
    app_version: str = "2.2.0"

    # 委托的包管理器
    composer_bin: str = "composer"
    stability: str = "stable"
    probe_timeout: int = 10
    command_timeout: int = 600

    # 链接生成
    async_url: str = "/async/"
    fileedit_route: str = "/bolt/file/edit/{namespace}/{file}"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/extend.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/extend.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
