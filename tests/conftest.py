"""测试共享 fixture — 临时扩展目录 + 可控的探测 / 命令执行

  config          根目录指向 tmp_path，扩展目录已创建（可写）
  resources       ResourceLocator
  extensions      ExtensionRegistry（读取 app/config/extensions.yml）
  fake_opener     工厂: 按状态码返回 HEAD 应答，或抛出传输错误
  executor        RecordingExecutor，记录 composer 调用并按子命令返回结果
  make_manager    工厂: 构造 PackageManager，默认探测返回 200
  write_installed 工厂: 写入 vendor/composer/installed.json
"""

from __future__ import annotations

import json
import urllib.error
from pathlib import Path
from typing import Any

import pytest

from extend.composer.manager import PackageManager
from extend.composer.prober import ConnectivityProber
from extend.core.config import Config
from extend.core.extensions import ExtensionRegistry
from extend.core.resources import ResourceLocator
from extend.utils.shell import CommandResult

SITE = "https://ext.example.com/"


class FakeResponse:
    def __init__(self, status: int) -> None:
        self.status = status

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> bool:
        return False


class FakeOpener:
    """模拟 urllib opener.open: 状态码 >= 400 时按 urllib 行为抛 HTTPError"""

    def __init__(self, status: int | None = 200, error: Exception | None = None) -> None:
        self.status = status
        self.error = error
        self.requests: list[Any] = []

    def __call__(self, req: Any, timeout: float | None = None) -> FakeResponse:
        self.requests.append(req)
        if self.error is not None:
            raise self.error
        assert self.status is not None
        if self.status >= 400:
            raise urllib.error.HTTPError(req.full_url, self.status, "error", {}, None)  # type: ignore[arg-type]
        return FakeResponse(self.status)


class RecordingExecutor:
    """记录 composer 调用，按子命令返回预置结果（默认成功、无输出）"""

    def __init__(self, results: dict[str, CommandResult] | None = None) -> None:
        self.results = results or {}
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        args = list(cmd)
        self.calls.append(args)
        self.envs.append(env)
        return self.results.get(args[1], CommandResult(0, "", ""))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """PackageManager 会写 COMPOSER_HOME，测试结束后恢复"""
    monkeypatch.delenv("COMPOSER_HOME", raising=False)
    monkeypatch.delenv("SERVER_SOFTWARE", raising=False)


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    (tmp_path / "extensions").mkdir()
    return Config(root_dir=str(tmp_path), site=SITE, app_version="2.2.0")


@pytest.fixture()
def resources(config: Config) -> ResourceLocator:
    return ResourceLocator(config)


@pytest.fixture()
def extensions(config: Config) -> ExtensionRegistry:
    root = Path(config.root_dir)
    return ExtensionRegistry(str(root / config.extensions_file), root_dir=str(root))


@pytest.fixture()
def fake_opener():
    return FakeOpener


@pytest.fixture()
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture()
def make_manager(config, resources, extensions, executor):
    def _make(status: int | None = 200, error: Exception | None = None, **kwargs: Any) -> PackageManager:
        opener = kwargs.pop("opener", None) or FakeOpener(status, error)
        prober = ConnectivityProber(
            config.site, app_version=config.app_version,
            app_name=config.app_name, opener=opener,
        )
        kwargs.setdefault("executor", executor)
        return PackageManager(
            config, kwargs.pop("resources", resources),
            kwargs.pop("extensions", extensions), prober=prober, **kwargs,
        )
    return _make


@pytest.fixture()
def write_installed(tmp_path: Path):
    def _write(*packages: dict[str, Any]) -> Path:
        path = tmp_path / "extensions" / "vendor" / "composer" / "installed.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"packages": list(packages)}), encoding="utf-8")
        return path
    return _write
