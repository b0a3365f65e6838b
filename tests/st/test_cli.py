"""CLI 命令测试"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from extend.cli import _parse_requirements, main
from extend.utils.shell import CommandResult


def _invoke(*args: str):
    return CliRunner().invoke(main, list(args), env={"EXTEND_LOG_LEVEL": "ERROR"})


class TestParseRequirements:
    def test_with_version(self) -> None:
        assert _parse_requirements(("acme/blog:^1.0", "acme/new")) == [
            {"name": "acme/blog", "version": "^1.0"},
            {"name": "acme/new", "version": ""},
        ]


class TestStatus:
    def test_online(self, tmp_path: Path) -> None:
        result = _invoke("status")
        assert result.exit_code == 0
        assert "在线: 是" in result.output
        assert str(tmp_path / "extensions") in result.output

    def test_offline(self, probe_state, fake_opener) -> None:
        probe_state["opener"] = fake_opener(404)
        result = _invoke("status")
        assert result.exit_code == 0
        assert "在线: 否" in result.output


class TestPackageCommands:
    def test_offline_command_fails(self, probe_state, fake_opener) -> None:
        probe_state["opener"] = fake_opener(404)
        result = _invoke("install")
        assert result.exit_code == 1
        assert "包管理器离线" in result.output

    def test_install(self, executor) -> None:
        result = _invoke("install")
        assert result.exit_code == 0
        assert "完成。" in result.output
        assert executor.calls[0][1] == "install"

    def test_install_failure_exit_code(self, executor) -> None:
        executor.results["install"] = CommandResult(2, "", "conflict")
        result = _invoke("install")
        assert result.exit_code == 2
        assert "conflict" in result.output

    def test_require(self, executor) -> None:
        result = _invoke("require", "acme/blog:^1.0")
        assert result.exit_code == 0
        assert "acme/blog:^1.0" in executor.calls[0]

    def test_remove(self, executor) -> None:
        assert _invoke("remove", "acme/blog").exit_code == 0
        assert executor.calls[0][1] == "remove"

    def test_search(self, executor) -> None:
        executor.results["search"] = CommandResult(
            0, json.dumps([{"name": "acme/blog", "description": "Blog tools"}]), "",
        )
        result = _invoke("search", "blog")
        assert "acme/blog" in result.output
        assert "Blog tools" in result.output

    def test_packages_json(self, write_installed) -> None:
        write_installed({"name": "acme/blog", "version": "1.0.0"})
        result = _invoke("packages", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["installed"][0]["name"] == "acme/blog"

    def test_check(self, tmp_path: Path) -> None:
        (tmp_path / "extensions" / "composer.json").write_text(
            json.dumps({"require": {"acme/blog": "^1.0"}})
        )
        result = _invoke("check")
        assert "待安装: acme/blog" in result.output

    def test_dump_autoload(self, executor) -> None:
        assert _invoke("dump-autoload").exit_code == 0
        assert executor.calls[0][1] == "dump-autoload"
