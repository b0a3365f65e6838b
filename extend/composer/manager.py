"""扩展包管理器 — 请求级编排入口

构造流程:
  1. 设置 COMPOSER_HOME
  2. 组装默认选项
  3. 扩展目录可写时: 复制安装助手、初始化清单、探测扩展服务器
  4. 在线时构造委托会话与操作集

每个管理请求构造一个实例，用完即弃。离线时调用任何操作均抛出
PackageManagerUnavailableError，调用方应先检查 online。

用法:
    pm = PackageManager(config, resources, extensions)
    if pm.online:
        pm.require_package([{"name": "acme/blog", "version": "^1.0"}])
        packages = pm.get_all_packages()
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import sys
from collections.abc import Callable, Mapping
from typing import Any

from extend.composer import installer
from extend.composer.actions import default_actions
from extend.composer.formatter import PackageFormatter
from extend.composer.manifest import ManifestBootstrapper
from extend.composer.options import build_options
from extend.composer.prober import ConnectivityProber, is_reachable
from extend.composer.session import ComposerSession
from extend.core.config import Config
from extend.core.context import RequestContext
from extend.core.exceptions import ManifestError, PackageManagerUnavailableError
from extend.core.protocols import ExtensionProvider, PackageAction, ResourceProvider
from extend.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)

NOT_INSTALLED = "尚未安装。"

ActionFactory = Callable[[ComposerSession], Mapping[str, PackageAction]]


class PackageManager:
    """扩展包管理器

    参数:
        config: 全局配置
        resources: 资源定位者
        extensions: 已启用扩展提供者
        context: 请求上下文，不提供则按扩展目录是否可写新建
        prober: 连通性探测器，不提供则按 config.site 新建
        actions: 显式注入的操作集；不提供则在线时由 action_factory 按会话构建
        executor: 委托会话使用的命令执行器，测试时注入
    """

    def __init__(
        self,
        config: Config,
        resources: ResourceProvider,
        extensions: ExtensionProvider,
        *,
        context: RequestContext | None = None,
        prober: ConnectivityProber | None = None,
        actions: Mapping[str, PackageAction] | None = None,
        action_factory: ActionFactory = default_actions,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config
        self.resources = resources
        self.extensions = extensions
        self.formatter = PackageFormatter(resources, extensions)
        self.json: dict[str, Any] | None = None
        self._session: ComposerSession | None = None
        self._actions: Mapping[str, PackageAction] = {}

        # 包管理器缓存目录，进程级环境变量，每次构造幂等设置
        self.composer_home = resources.get_path("cache/composer")
        os.environ["COMPOSER_HOME"] = self.composer_home

        self._options = build_options(resources)
        self.context = context or RequestContext.for_directory(self._options["basedir"])
        self.prober = prober or ConnectivityProber(
            config.site,
            app_version=config.app_version,
            app_name=config.app_name,
            timeout=config.probe_timeout,
        )

        self._setup(actions, action_factory, executor)

    # ------------------------------------------------------------------
    # 初始化
    # ------------------------------------------------------------------

    def _setup(
        self,
        actions: Mapping[str, PackageAction] | None,
        action_factory: ActionFactory,
        executor: CommandExecutor | None,
    ) -> None:
        """扩展目录可写时初始化清单并探测服务器，全部就绪才进入在线模式"""
        if self.context.writable:
            self._copy_installer()
            self._update_json()

        # 清单初始化失败也会将 writable 置为 False
        if self.context.writable:
            self._ping()
        else:
            logger.info("扩展目录不可写，进入离线模式: %s", self._options["basedir"])

        if not self.context.online:
            return

        self._session = ComposerSession(
            self._options,
            composer_bin=self.config.composer_bin,
            composer_home=self.composer_home,
            executor=executor,
            timeout=self.config.command_timeout,
        )
        self._actions = actions if actions is not None else action_factory(self._session)

    def _ping(self) -> None:
        status = self.prober.probe(True)
        for msg in self.prober.messages:
            self.context.add_message(msg)
        if is_reachable(status):
            self.context.online = True
        else:
            self.context.add_message(f"{self.config.site} 无法访问。")

    def _copy_installer(self) -> None:
        """复制 / 更新安装助手到扩展根目录"""
        dest = os.path.join(self._options["basedir"], installer.INSTALLER_FILENAME)
        shutil.copyfile(installer.__file__, dest)

    def installer_command(self) -> str:
        return f"{shlex.quote(sys.executable)} {installer.INSTALLER_FILENAME}"

    def _update_json(self) -> None:
        """初始化 / 规范化扩展清单"""
        basedir = self._options["basedir"]
        web_path = os.path.relpath(self.resources.get_path("extensionsweb"), basedir)
        bootstrapper = ManifestBootstrapper(
            self._options,
            site=self.config.site,
            app_version=self.config.app_version,
            stability=self.config.stability,
            web_path=web_path,
            installer_cmd=self.installer_command(),
        )
        try:
            self.json = bootstrapper.ensure_manifest()
        except ManifestError as e:
            # 清单损坏时不碰它，按不可写处理
            logger.error("%s", e)
            self.context.add_message(str(e))
            self.context.writable = False
            return
        for msg in bootstrapper.messages:
            self.context.add_message(msg)

    # ------------------------------------------------------------------
    # 访问器
    # ------------------------------------------------------------------

    @property
    def online(self) -> bool:
        return self.context.online

    def get_messages(self) -> list[str]:
        return list(self.context.messages)

    def get_options(self) -> Mapping[str, Any]:
        return self._options

    def get_option(self, key: str) -> Any:
        return self._options[key]

    def get_session(self) -> ComposerSession:
        return self._require_session()

    def get_output(self) -> str:
        """最近执行的命令输出"""
        return self._require_session().get_output()

    def get_minimum_stability(self) -> str:
        return self._require_session().get_minimum_stability()

    def _require_session(self) -> ComposerSession:
        if self._session is None:
            raise PackageManagerUnavailableError(
                "包管理器不可用: 扩展目录不可写或扩展服务器无法访问"
            )
        return self._session

    def _action(self, name: str) -> PackageAction:
        self._require_session()
        action = self._actions.get(name)
        if action is None:
            raise PackageManagerUnavailableError(f"未注册的包管理操作: {name}")
        return action

    # ------------------------------------------------------------------
    # 操作分发
    # ------------------------------------------------------------------

    def check_package(self) -> dict[str, list[str]]:
        """检查需要安装或更新的包"""
        return self._action("check").execute()

    def dump_autoload(self) -> int:
        return self._action("autoload").execute()

    def install_packages(self) -> int:
        """安装清单中的全部包，成功返回 0，失败返回正数错误码"""
        return self._action("install").execute()

    def remove_package(self, packages: list[str]) -> int:
        return self._action("remove").execute(packages)

    def require_package(self, packages: list[dict[str, str]]) -> int:
        """安装包，packages 格式: [{"name": "", "version": ""}]"""
        return self._action("require").execute(packages)

    def search_package(self, packages: list[str]) -> list[dict[str, str]] | int:
        return self._action("search").execute(packages)

    def show_package(
        self, target: str, package: str = "", version: str = "", root: bool = False,
    ) -> dict[str, Any] | int:
        return self._action("show").execute(target, package, version, root)

    def update_package(self, packages: list[str]) -> int:
        return self._action("update").execute(packages)

    def init_json(self, file: str, data: dict[str, Any] | None = None) -> None:
        self._action("json").execute(file, data or {})

    # ------------------------------------------------------------------
    # 展示
    # ------------------------------------------------------------------

    def format_package_response(self, packages: Any) -> list[dict[str, Any]]:
        return self.formatter.format_packages(packages)

    def get_all_packages(self) -> dict[str, list[dict[str, Any]]]:
        """已安装、待安装、本地安装三类包"""
        packages: dict[str, list[dict[str, Any]]] = {
            "installed": [],
            "pending": [],
            "local": [],
        }

        installed = self.show_package("installed")
        packages["installed"] = self.format_package_response(installed)

        if self.json and self.json.get("require"):
            for name, version in self.json["require"].items():
                if name not in installed:
                    packages["pending"].append({
                        "name": name,
                        "version": version,
                        "type": "unknown",
                        "descrip": NOT_INSTALLED,
                        "authors": [],
                        "keywords": [],
                    })

        for ext in self.extensions.get_enabled():
            if ext.install_type != "local":
                continue
            manifest = ext.get_composer_json()
            if manifest:
                packages["local"].append({
                    "name": manifest.get("name", ""),
                    "title": ext.name,
                    "type": manifest.get("type", ""),
                    "descrip": manifest.get("description", ""),
                    "authors": manifest.get("authors", []),
                    "keywords": manifest.get("keywords") or "",
                })
            else:
                packages["local"].append({"title": ext.name})

        return packages
