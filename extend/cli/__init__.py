"""extend 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os
from typing import Any

import click

from extend import __version__
from extend.services.container import get_container
from extend.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def _parse_requirements(specs: tuple[str, ...]) -> list[dict[str, str]]:
    """解析 name[:version] 参数"""
    result = []
    for spec in specs:
        name, _, version = spec.partition(":")
        result.append({"name": name.strip(), "version": version.strip()})
    return result


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="配置文件路径")
def main(config_path: str | None) -> None:
    """extend - CMS 扩展包管理"""
    setup_logging(
        level=os.getenv("EXTEND_LOG_LEVEL", "INFO"),
        json_output=os.getenv("EXTEND_LOG_JSON", "") == "1",
    )
    if config_path:
        from extend.core.config import init_config
        from extend.services.container import reset_container
        init_config(config_path)
        reset_container()


# 注册各领域子命令
from extend.cli.cmd_packages import register as _reg_packages  # noqa: E402
from extend.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_packages(main)
_reg_misc(main)
