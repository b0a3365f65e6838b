"""CLI — 扩展包管理命令"""

from __future__ import annotations

import json
from typing import Any

import click

from extend.cli import _parse_requirements, _svc


def register(group: click.Group) -> None:
    group.add_command(status)
    group.add_command(packages)
    group.add_command(check)
    group.add_command(install)
    group.add_command(update)
    group.add_command(remove)
    group.add_command(require)
    group.add_command(search)
    group.add_command(show)
    group.add_command(dump_autoload)


def _echo_messages(pm: Any) -> None:
    for msg in pm.get_messages():
        click.echo(f"  ! {msg}", err=True)


def _manager() -> Any:
    """构造请求级 PackageManager，离线时直接退出"""
    pm = _svc().package_manager()
    if not pm.online:
        _echo_messages(pm)
        raise click.ClickException("包管理器离线，无法执行该操作")
    return pm


def _finish(pm: Any, rc: int) -> None:
    """输出命令结果，非零退出码原样返回"""
    output = pm.get_output()
    if output:
        click.echo(output)
    if rc != 0:
        raise click.exceptions.Exit(rc)
    click.echo("完成。")


@click.command()
def status() -> None:
    """显示扩展目录与扩展服务器状态"""
    pm = _svc().package_manager()
    click.echo(f"扩展目录: {pm.get_option('basedir')}")
    click.echo(f"可写: {'是' if pm.context.writable else '否'}")
    click.echo(f"在线: {'是' if pm.online else '否'}")
    _echo_messages(pm)


@click.command()
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出")
def packages(as_json: bool) -> None:
    """列出已安装、待安装与本地扩展包"""
    pm = _manager()
    data = pm.get_all_packages()
    if as_json:
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return
    for section, label in (("installed", "已安装"), ("pending", "待安装"), ("local", "本地")):
        click.echo(f"{label}:")
        if not data[section]:
            click.echo("  (无)")
        for p in data[section]:
            name = p.get("name") or p.get("title", "")
            click.echo(f"  {name:30s} {p.get('version', ''):12s} {p.get('descrip', '')}")


@click.command()
def check() -> None:
    """检查需要安装或可更新的包"""
    result = _manager().check_package()
    for name in result["installs"]:
        click.echo(f"  待安装: {name}")
    for name in result["updates"]:
        click.echo(f"  可更新: {name}")
    if not result["installs"] and not result["updates"]:
        click.echo("所有包均为最新。")


@click.command()
def install() -> None:
    """按清单安装全部包"""
    pm = _manager()
    _finish(pm, pm.install_packages())


@click.command()
@click.argument("names", nargs=-1)
def update(names: tuple[str, ...]) -> None:
    """更新包（不指定则更新全部）"""
    pm = _manager()
    _finish(pm, pm.update_package(list(names)))


@click.command()
@click.argument("names", nargs=-1, required=True)
def remove(names: tuple[str, ...]) -> None:
    """移除包"""
    pm = _manager()
    _finish(pm, pm.remove_package(list(names)))


@click.command()
@click.argument("specs", nargs=-1, required=True)
def require(specs: tuple[str, ...]) -> None:
    """安装包，格式: name[:version]"""
    pm = _manager()
    _finish(pm, pm.require_package(_parse_requirements(specs)))


@click.command()
@click.argument("terms", nargs=-1, required=True)
def search(terms: tuple[str, ...]) -> None:
    """在扩展仓库中搜索包"""
    pm = _manager()
    result = pm.search_package(list(terms))
    if isinstance(result, int):
        _finish(pm, result)
        return
    if not result:
        click.echo("没有匹配的包。")
    for m in result:
        click.echo(f"  {m['name']:30s} {m['description']}")


@click.command()
@click.argument("target", type=click.Choice(["installed", "available", "self", "platform"]))
@click.argument("name", required=False, default="")
@click.argument("version", required=False, default="")
@click.option("--root", is_flag=True, help="包含根清单")
def show(target: str, name: str, version: str, root: bool) -> None:
    """查看包信息"""
    pm = _manager()
    result = pm.show_package(target, name, version, root)
    if isinstance(result, int):
        _finish(pm, result)
        return
    if target == "installed":
        result = pm.format_package_response(result)
    click.echo(json.dumps(result, ensure_ascii=False, indent=2, default=str))


@click.command(name="dump-autoload")
def dump_autoload() -> None:
    """重新生成自动加载映射"""
    pm = _manager()
    _finish(pm, pm.dump_autoload())
