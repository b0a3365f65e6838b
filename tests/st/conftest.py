"""系统测试 fixture — 全局配置指向临时目录，探测与 composer 调用可控"""

from __future__ import annotations

from typing import Any

import pytest

import extend.core.config as cfgmod
from extend.composer.prober import ConnectivityProber
from extend.services.container import ServiceContainer, reset_container
from extend.utils.logger import reset_logging


@pytest.fixture()
def probe_state(fake_opener) -> dict[str, Any]:
    """修改 probe_state["opener"] 即可切换扩展服务器应答"""
    return {"opener": fake_opener(200)}


@pytest.fixture(autouse=True)
def patched_container(config, executor, probe_state, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cfgmod, "_current", config)
    original = ServiceContainer.package_manager

    def _package_manager(self: ServiceContainer, **kwargs: Any):
        kwargs.setdefault("prober", ConnectivityProber(
            self.config.site, app_version=self.config.app_version,
            opener=probe_state["opener"],
        ))
        kwargs.setdefault("executor", executor)
        return original(self, **kwargs)

    monkeypatch.setattr(ServiceContainer, "package_manager", _package_manager)
    reset_container()
    yield
    reset_container()
    # CLI 入口会把日志 handler 绑定到 CliRunner 的临时流
    reset_logging()
