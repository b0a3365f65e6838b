"""委托包管理器会话

封装对 composer 可执行文件的调用: 工作目录、COMPOSER_HOME、超时、
输出累积，以及已安装仓库文件的读取。仅在线时构造。
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from extend.composer.models import InstalledPackage
from extend.utils.json_io import load_json
from extend.utils.shell import CommandExecutor, CommandResult, LocalExecutor

logger = logging.getLogger(__name__)


class ComposerSession:
    """composer 调用会话"""

    def __init__(
        self,
        options: Mapping[str, Any],
        *,
        composer_bin: str = "composer",
        composer_home: str = "",
        executor: CommandExecutor | None = None,
        timeout: int | None = None,
    ) -> None:
        self.options = options
        self.basedir = Path(options["basedir"])
        self.composer_bin = composer_bin
        self.composer_home = composer_home
        self.timeout = timeout
        self._executor = executor or LocalExecutor()
        self._output: list[str] = []

    @property
    def vendor_dir(self) -> Path:
        return self.basedir / "vendor"

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.composer_home:
            env["COMPOSER_HOME"] = self.composer_home
        return env

    def run(self, command: str, *args: str) -> CommandResult:
        """执行 composer 子命令，输出累积到会话中"""
        cmd = [
            self.composer_bin, command, *args,
            f"--working-dir={self.basedir}", "--no-interaction", "--no-ansi",
        ]
        logger.info("composer %s %s", command, " ".join(args))
        result = self._executor.execute(
            cmd, cwd=str(self.basedir), env=self._env(), timeout=self.timeout,
        )
        if result.output:
            self._output.append(result.output)
        if not result.success:
            logger.warning(
                "composer %s 失败 (rc=%d): %s",
                command, result.returncode, result.stderr[:500],
            )
        return result

    def get_output(self) -> str:
        """本会话累积的全部命令输出"""
        return "\n".join(self._output)

    def read_manifest(self) -> dict[str, Any]:
        try:
            data = load_json(self.options["composerjson"])
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("读取扩展清单失败: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def get_minimum_stability(self) -> str:
        return self.read_manifest().get("minimum-stability") or "stable"

    def load_installed(self) -> list[InstalledPackage]:
        """读取已安装仓库，兼容 v1（列表）与 v2（{"packages": [...]}）格式"""
        path = self.vendor_dir / "composer" / "installed.json"
        try:
            data = load_json(path)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("已安装仓库文件不可读: %s (%s)", path, e)
            return []
        if isinstance(data, dict):
            data = data.get("packages") or []
        if not isinstance(data, list):
            return []
        return [
            InstalledPackage.from_dict(item, self.vendor_dir)
            for item in data
            if isinstance(item, dict) and item.get("name")
        ]
