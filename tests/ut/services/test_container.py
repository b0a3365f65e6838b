"""ServiceContainer 单元测试"""

from __future__ import annotations

import pytest

import extend.core.config as cfgmod
from extend.composer.manager import PackageManager
from extend.core.context import RequestContext
from extend.services.container import (
    ServiceContainer,
    get_container,
    reset_container,
)


@pytest.fixture(autouse=True)
def _setup_config(config, monkeypatch: pytest.MonkeyPatch):
    """确保测试有独立的配置和扩展目录"""
    monkeypatch.setattr(cfgmod, "_current", config)
    reset_container()
    yield
    reset_container()


class TestServiceContainer:
    def test_lazy_loading(self) -> None:
        c = ServiceContainer()
        assert len(c._instances) == 0
        _ = c.resources
        assert "resources" in c._instances

    def test_shared_instances(self) -> None:
        c = ServiceContainer()
        assert c.resources is c.resources
        assert c.extensions is c.extensions

    def test_uses_global_config(self, config) -> None:
        assert ServiceContainer().config is config

    def test_package_manager_per_call(self) -> None:
        c = ServiceContainer()
        offline = RequestContext(writable=False)
        pm1 = c.package_manager(context=offline)
        pm2 = c.package_manager(context=RequestContext(writable=False))
        assert isinstance(pm1, PackageManager)
        assert pm1 is not pm2
        assert pm1.context is offline
        assert pm1.resources is pm2.resources


class TestGlobalContainer:
    def test_singleton(self) -> None:
        assert get_container() is get_container()

    def test_reset(self) -> None:
        c1 = get_container()
        reset_container()
        assert get_container() is not c1
