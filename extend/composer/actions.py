"""委托包管理器的操作实现

每种操作一个类，统一 execute() 入口，由 default_actions() 组装为操作集，
构造 PackageManager 时显式注入。失败时返回 composer 的非零退出码，
不在本层重试或重新解释。
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from extend.composer.models import InstalledPackage
from extend.composer.options import to_cli_flags
from extend.composer.session import ComposerSession
from extend.core.exceptions import ValidationError
from extend.core.protocols import PackageAction
from extend.utils.json_io import save_json

logger = logging.getLogger(__name__)

# composer 包名规则: vendor/name
_PACKAGE_NAME_RE = re.compile(
    r"^[a-z0-9]([_.-]?[a-z0-9]+)*/[a-z0-9](([_.]?|-{0,2})[a-z0-9]+)*$"
)

_UPDATE_STATUSES = frozenset({"semver-safe-update", "update-possible"})


def validate_package_name(name: str) -> str:
    name = str(name).strip().lower()
    if not _PACKAGE_NAME_RE.match(name):
        raise ValidationError(f"包名不合法: {name!r}")
    return name


def _validate_arg(value: str, field: str) -> str:
    """自由文本参数（搜索词、版本约束）不能以 "-" 开头，防止被当作命令行选项"""
    value = str(value).strip()
    if not value or value.startswith("-"):
        raise ValidationError(f"参数 '{field}' 不合法: {value!r}")
    return value


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


class _SessionAction:
    def __init__(self, session: ComposerSession) -> None:
        self.session = session

    @property
    def options(self) -> Any:
        return self.session.options


class InstallPackage(_SessionAction):
    """按清单安装全部包"""

    def execute(self) -> int:
        flags = to_cli_flags(
            self.options, "dryrun", "verbose", "nodev", "noautoloader",
            "noscripts", "preferdist", "prefersource", "ignoreplatformreqs",
            "optimizeautoloader",
        )
        return self.session.run("install", *flags).returncode


class UpdatePackage(_SessionAction):
    """更新指定包（为空则更新全部）"""

    def execute(self, packages: Iterable[str] = ()) -> int:
        names = [validate_package_name(p) for p in packages]
        flags = to_cli_flags(
            self.options, "dryrun", "verbose", "nodev", "noautoloader",
            "noscripts", "preferdist", "prefersource", "ignoreplatformreqs",
            "preferstable", "preferlowest", "optimizeautoloader",
        )
        if names:
            flags += to_cli_flags(self.options, "withdependencies")
        return self.session.run("update", *flags, *names).returncode


class RemovePackage(_SessionAction):
    """从清单移除包并更新"""

    def execute(self, packages: Iterable[str]) -> int:
        names = [validate_package_name(p) for p in packages]
        if not names:
            raise ValidationError("需要提供要移除的包名")
        flags = to_cli_flags(
            self.options, "dryrun", "verbose", "dev", "noupdate",
            "updatenodev", "updatewithdependencies", "ignoreplatformreqs",
            "optimizeautoloader",
        )
        return self.session.run("remove", *flags, *names).returncode


class RequirePackage(_SessionAction):
    """向清单添加包（name + 可选版本约束）并安装

    packages 格式: [{"name": "acme/blog", "version": "^1.0"}, ...]
    """

    def execute(self, packages: Iterable[dict[str, str]]) -> int:
        specs = []
        for pkg in packages:
            name = validate_package_name(pkg.get("name", ""))
            version = str(pkg.get("version") or "").strip()
            if version:
                specs.append(f"{name}:{_validate_arg(version, 'version')}")
            else:
                specs.append(name)
        if not specs:
            raise ValidationError("需要提供要安装的包")
        flags = to_cli_flags(
            self.options, "dryrun", "verbose", "dev", "preferdist",
            "prefersource", "noupdate", "updatenodev",
            "updatewithdependencies", "ignoreplatformreqs", "sortpackages",
            "optimizeautoloader",
        )
        return self.session.run("require", *flags, *specs).returncode


class SearchPackage(_SessionAction):
    """在扩展仓库中搜索包"""

    def execute(self, packages: Iterable[str]) -> list[dict[str, str]] | int:
        terms = [_validate_arg(p, "search") for p in packages]
        if not terms:
            raise ValidationError("需要提供搜索关键字")
        flags = to_cli_flags(self.options, "onlyname")
        result = self.session.run("search", *flags, "--format=json", *terms)
        if not result.success:
            return result.returncode

        data = _parse_json(result.stdout)
        if isinstance(data, list):
            return [
                {
                    "name": item.get("name", ""),
                    "description": item.get("description", ""),
                    "url": item.get("url", ""),
                }
                for item in data if isinstance(item, dict)
            ]

        # 旧版 composer 不支持 --format，按 "name description" 文本行解析
        matches = []
        for line in result.stdout.splitlines():
            name, _, descrip = line.strip().partition(" ")
            if "/" in name:
                matches.append({"name": name, "description": descrip.strip(), "url": ""})
        return matches


class ShowPackage(_SessionAction):
    """查看包信息

    target:
        installed: 读取已安装仓库，返回 {name: {"package": InstalledPackage}}
        available / self / platform: 调用 composer show 并返回解析后的 JSON
    """

    def execute(
        self, target: str, package: str = "", version: str = "", root: bool = False,
    ) -> dict[str, Any] | int:
        if target == "installed":
            return self._installed(package, root)

        args = ["--format=json"]
        if target in ("available", "self", "platform"):
            args.insert(0, f"--{target}")
        if package:
            args.append(validate_package_name(package))
            if version:
                args.append(_validate_arg(version, "version"))
        result = self.session.run("show", *args)
        if not result.success:
            return result.returncode
        data = _parse_json(result.stdout)
        return data if isinstance(data, dict) else {}

    def _installed(self, package: str, root: bool) -> dict[str, Any]:
        installed: dict[str, Any] = {}
        for pkg in self.session.load_installed():
            if package and pkg.name != package:
                continue
            installed[pkg.name] = {"package": pkg}
        if root:
            manifest = self.session.read_manifest()
            if manifest.get("name"):
                installed[manifest["name"]] = {"package": InstalledPackage(
                    name=manifest["name"],
                    type="project",
                    description=manifest.get("description", ""),
                    install_path=str(self.session.basedir),
                )}
        return installed


class CheckPackage(_SessionAction):
    """检查需要安装（清单中有但未安装）或可更新的包"""

    def __init__(self, session: ComposerSession, show: ShowPackage) -> None:
        super().__init__(session)
        self.show = show

    def execute(self) -> dict[str, list[str]]:
        packages: dict[str, list[str]] = {"updates": [], "installs": []}
        installed = self.show.execute("installed")
        required = self.session.read_manifest().get("require") or {}

        for name in required:
            if name not in installed:
                packages["installs"].append(name)

        if not installed:
            return packages

        result = self.session.run("outdated", "--direct", "--format=json")
        data = _parse_json(result.stdout) if result.success else None
        if not isinstance(data, dict):
            logger.warning("无法获取可更新包列表")
            return packages
        for item in data.get("installed") or []:
            name = item.get("name", "")
            if name in installed and item.get("latest-status") in _UPDATE_STATUSES:
                packages["updates"].append(name)
        return packages


class DumpAutoload(_SessionAction):
    """重新生成自动加载映射"""

    def execute(self) -> int:
        flags = to_cli_flags(self.options, "verbose", "nodev", "optimizeautoloader")
        return self.session.run("dump-autoload", *flags).returncode


class InitJson:
    """初始化新的 JSON 清单文件"""

    def execute(self, file: str, data: dict[str, Any] | None = None) -> None:
        if Path(file).exists():
            logger.info("JSON 文件已存在，覆盖: %s", file)
        save_json(file, data or {})


def default_actions(session: ComposerSession) -> dict[str, PackageAction]:
    """按会话组装默认操作集"""
    show = ShowPackage(session)
    return {
        "check": CheckPackage(session, show),
        "install": InstallPackage(session),
        "update": UpdatePackage(session),
        "remove": RemovePackage(session),
        "require": RequirePackage(session),
        "search": SearchPackage(session),
        "show": show,
        "json": InitJson(),
        "autoload": DumpAutoload(session),
    }
