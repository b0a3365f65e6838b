"""扩展清单（composer.json）初始化与规范化

清单不存在时按默认值创建；存在时补齐默认字段，仅在内容变化时回写。
清单中的 require 段是"待安装"包的权威来源。
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any

from extend.core.exceptions import ManifestError
from extend.utils.json_io import load_json, save_json

logger = logging.getLogger(__name__)

MANIFEST_NAME = "bolt/extensions"
INSTALLER_HOOKS = ("post-package-install", "post-package-update")


class ManifestBootstrapper:
    """清单初始化器

    参数:
        options: 包管理器选项（使用 composerjson 路径）
        site: 扩展服务器根地址，用于 satis 仓库地址
        app_version: 宿主版本，写入 provide 段
        stability: 最低稳定性
        web_path: 扩展静态资源的 Web 目录，写入 extra 段供安装助手使用
        installer_cmd: 安装助手命令，挂到包安装/更新后的脚本钩子
    """

    def __init__(
        self,
        options: Mapping[str, Any],
        *,
        site: str,
        app_version: str,
        stability: str = "stable",
        web_path: str = "",
        installer_cmd: str = "",
    ) -> None:
        self.path = options["composerjson"]
        self.site = site
        self.app_version = app_version
        self.stability = stability
        self.web_path = web_path
        self.installer_cmd = installer_cmd
        self.messages: list[str] = []

    def read(self) -> dict[str, Any] | None:
        try:
            data = load_json(self.path)
        except (json.JSONDecodeError, OSError) as e:
            raise ManifestError(f"扩展清单不可读: {self.path} ({e})") from e
        if data is not None and not isinstance(data, dict):
            raise ManifestError(f"扩展清单格式无效: {self.path}")
        if data and data.get("require") and not isinstance(data["require"], dict):
            raise ManifestError(f"扩展清单格式无效: {self.path} (require 必须是对象)")
        return data

    def ensure_manifest(self) -> dict[str, Any]:
        """确保清单存在且为最新，返回解析后的内容"""
        original = self.read()
        if original is None:
            logger.info("扩展清单不存在，创建: %s", self.path)
            data: dict[str, Any] = {}
        else:
            data = copy.deepcopy(original)
            # 空 require（[] 或 {}）会被包管理器当作数组写回，直接去掉
            if "require" in data and not data["require"]:
                del data["require"]

        data = self.apply_defaults(data)

        if data != original:
            try:
                save_json(self.path, data)
                logger.info("扩展清单已更新: %s", self.path)
            except OSError as e:
                self.messages.append(f"扩展清单 {self.path} 不可写: {e}")
        return data

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        """补齐默认字段，返回按键排序的新字典"""
        data["name"] = MANIFEST_NAME
        data["description"] = "Bolt extension installation interface"
        data["license"] = "MIT"

        repos = data.get("repositories")
        if not isinstance(repos, dict):
            repos = {}
        repos["packagist"] = False
        repos["bolt"] = {"type": "composer", "url": self.site + "satis/"}
        data["repositories"] = repos

        data["minimum-stability"] = self.stability
        data["prefer-stable"] = True
        data["config"] = {"discard-changes": True, "preferred-install": "dist"}

        provide = data.get("provide")
        if not isinstance(provide, dict):
            provide = {}
        provide["bolt/bolt"] = self.app_version
        data["provide"] = provide

        if self.web_path:
            extra = data.get("extra")
            if not isinstance(extra, dict):
                extra = {}
            extra["bolt-web-path"] = self.web_path
            data["extra"] = extra

        if self.installer_cmd:
            data["scripts"] = {hook: self.installer_cmd for hook in INSTALLER_HOOKS}

        return dict(sorted(data.items()))
