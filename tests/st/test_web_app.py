"""Web API 端点测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from extend.utils.shell import CommandResult
from extend.web.app import app


@pytest.fixture()
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


class TestGlobalErrorHandlers:
    def test_404_returns_json(self, client) -> None:
        resp = client.get("/api/nonexistent")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_405_returns_json(self, client) -> None:
        resp = client.delete("/api/extend/status")
        assert resp.status_code == 405
        assert "error" in resp.get_json()


class TestStatus:
    def test_online(self, client) -> None:
        data = client.get("/api/extend/status").get_json()
        assert data == {"writable": True, "online": True, "messages": []}

    def test_offline(self, client, probe_state, fake_opener) -> None:
        probe_state["opener"] = fake_opener(503)
        data = client.get("/api/extend/status").get_json()
        assert data["online"] is False
        assert "https://ext.example.com/ 无法访问。" in data["messages"]

    def test_state_not_shared_between_requests(self, client, probe_state, fake_opener) -> None:
        probe_state["opener"] = fake_opener(404)
        assert client.get("/api/extend/status").get_json()["online"] is False
        probe_state["opener"] = fake_opener(200)
        data = client.get("/api/extend/status").get_json()
        assert data["online"] is True
        assert data["messages"] == []


class TestPackages:
    def test_offline_returns_503(self, client, probe_state, fake_opener) -> None:
        probe_state["opener"] = fake_opener(404)
        resp = client.get("/api/extend/packages")
        assert resp.status_code == 503
        assert resp.get_json()["code"] == "PACKAGE_MANAGER_UNAVAILABLE"

    def test_lists_groups(self, client, write_installed, tmp_path: Path) -> None:
        (tmp_path / "extensions" / "composer.json").write_text(
            json.dumps({"require": {"acme/blog": "^1.0", "acme/new": "*"}})
        )
        write_installed({"name": "acme/blog", "version": "1.0.0"})
        data = client.get("/api/extend/packages").get_json()["packages"]
        assert [p["name"] for p in data["installed"]] == ["acme/blog"]
        assert [p["name"] for p in data["pending"]] == ["acme/new"]
        assert data["local"] == []

    def test_show_installed(self, client, write_installed) -> None:
        write_installed({"name": "acme/blog", "version": "1.0.0"})
        data = client.get("/api/extend/show?target=installed").get_json()
        assert data["packages"][0]["title"] == "acme/blog"
        assert data["packages"][0]["readme"] is None


class TestActions:
    def test_install(self, client, executor) -> None:
        executor.results["install"] = CommandResult(0, "Nothing to install", "")
        resp = client.post("/api/extend/install")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == 0
        assert "Nothing to install" in data["output"]

    def test_install_failure(self, client, executor) -> None:
        executor.results["install"] = CommandResult(2, "", "Your requirements could not be resolved")
        resp = client.post("/api/extend/install")
        assert resp.status_code == 500
        data = resp.get_json()
        assert data["status"] == 2
        assert "could not be resolved" in data["output"]

    def test_require(self, client, executor) -> None:
        resp = client.post("/api/extend/require", json={"name": "acme/blog", "version": "^1.0"})
        assert resp.status_code == 200
        assert "acme/blog:^1.0" in executor.calls[-1]

    def test_require_missing_name(self, client) -> None:
        assert client.post("/api/extend/require", json={}).status_code == 400

    def test_require_invalid_name(self, client, executor) -> None:
        resp = client.post("/api/extend/require", json={"name": "--prefer-source"})
        assert resp.status_code == 400
        assert resp.get_json()["code"] == "VALIDATION_ERROR"
        assert executor.calls == []

    def test_remove_requires_packages(self, client) -> None:
        assert client.post("/api/extend/remove", json={}).status_code == 400

    def test_update(self, client, executor) -> None:
        resp = client.post("/api/extend/update", json={"packages": "acme/blog"})
        assert resp.status_code == 200
        assert executor.calls[-1][1] == "update"
        assert "acme/blog" in executor.calls[-1]

    def test_search(self, client, executor) -> None:
        executor.results["search"] = CommandResult(
            0, json.dumps([{"name": "acme/blog", "description": "Blog"}]), "",
        )
        data = client.get("/api/extend/search?q=blog").get_json()
        assert data["packages"] == [{"name": "acme/blog", "description": "Blog", "url": ""}]

    def test_search_requires_query(self, client) -> None:
        assert client.get("/api/extend/search").status_code == 400

    def test_check(self, client, tmp_path: Path) -> None:
        (tmp_path / "extensions" / "composer.json").write_text(
            json.dumps({"require": {"acme/blog": "^1.0"}})
        )
        data = client.get("/api/extend/check").get_json()
        assert data == {"updates": [], "installs": ["acme/blog"]}

    def test_dump_autoload(self, client, executor) -> None:
        assert client.post("/api/extend/dump-autoload").status_code == 200
        assert executor.calls[-1][1] == "dump-autoload"
