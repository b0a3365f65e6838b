"""包管理器选项组装

选项集在每个请求开始时构造一次，之后只读，传递给所有委托操作。
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from extend.core.protocols import ResourceProvider

# 选项名 → composer 命令行参数
CLI_FLAGS: dict[str, str] = {
    "dryrun": "--dry-run",
    "verbose": "-v",
    "nodev": "--no-dev",
    "noautoloader": "--no-autoloader",
    "noscripts": "--no-scripts",
    "withdependencies": "--with-dependencies",
    "ignoreplatformreqs": "--ignore-platform-reqs",
    "preferstable": "--prefer-stable",
    "preferlowest": "--prefer-lowest",
    "sortpackages": "--sort-packages",
    "prefersource": "--prefer-source",
    "preferdist": "--prefer-dist",
    "noupdate": "--no-update",
    "updatenodev": "--update-no-dev",
    "updatewithdependencies": "--update-with-dependencies",
    "dev": "--dev",
    "onlyname": "--only-name",
    "optimizeautoloader": "--optimize-autoloader",
}


def build_options(resources: ResourceProvider) -> Mapping[str, Any]:
    """组装默认选项（None 表示未设置）

    prefer-dist 与 prefer-source 互斥，始终优先使用归档分发。
    """
    options: dict[str, Any] = {
        "basedir": resources.get_path("extensions"),
        "composerjson": resources.get_path("extensions/composer.json"),

        "dryrun": None,              # 只输出将执行的操作，不实际执行
        "verbose": True,             # 输出更多细节
        "nodev": None,               # 不安装 require-dev 包
        "noautoloader": None,        # 跳过自动加载生成
        "noscripts": None,           # 跳过清单中定义的脚本
        "withdependencies": True,    # 白名单包的依赖一并加入白名单
        "ignoreplatformreqs": None,  # 忽略平台依赖
        "preferstable": None,
        "preferlowest": None,

        "sortpackages": True,        # 增改依赖时排序
        "prefersource": False,
        "preferdist": True,
        "update": True,              # 修改清单后同时执行更新
        "noupdate": None,
        "updatenodev": True,
        "updatewithdependencies": True,

        "dev": None,                 # 作用于 require-dev 段

        "onlyname": True,            # 搜索仅匹配包名

        "optimizeautoloader": True,
    }
    return MappingProxyType(options)


def to_cli_flags(options: Mapping[str, Any], *names: str) -> list[str]:
    """将指定选项转为命令行参数，仅真值选项生效"""
    flags = []
    for name in names:
        if options.get(name) and name in CLI_FLAGS:
            flags.append(CLI_FLAGS[name])
    return flags
