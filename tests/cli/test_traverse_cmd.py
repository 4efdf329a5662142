"""Tests for ``pearshaker traverse``."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from pearshaker.cli.main import cli


class TestTraverseJson:
    """Machine-readable report output."""

    def test_report(self, runner: CliRunner, app_root: Path) -> None:
        """Reachable files and the deferred specifier are reported."""
        result = runner.invoke(cli, ["traverse", str(app_root), "/index.js", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert sorted(data["files"]) == [
            "/index.js",
            "/lib.js",
            "/node_modules/dep/index.js",
        ]
        assert len(data["skips"]) == 1
        skip = data["skips"][0]
        assert skip["specifier"] == "./gone.js"
        assert skip["referrer"] == {"href": "drive:///index.js", "pathname": "/index.js"}
        assert data["resolutions"]["drive:///lib.js"] == {
            "dep": "drive:///node_modules/dep/index.js"
        }

    def test_defer_option(self, runner: CliRunner, app_root: Path) -> None:
        """A pre-deferred specifier is not reported as a skip."""
        result = runner.invoke(
            cli,
            ["traverse", str(app_root), "/index.js", "-d", "./gone.js", "--format", "json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["skips"] == []

    def test_missing_entrypoint(self, runner: CliRunner, app_root: Path) -> None:
        """A missing entrypoint is fatal and exits 1."""
        result = runner.invoke(
            cli, ["traverse", str(app_root), "/nope.js", "--format", "json"]
        )
        assert result.exit_code == 1
        assert "/nope.js" in json.loads(result.stdout)["error"]

    def test_missing_entrypoint_context(self, runner: CliRunner, app_root: Path) -> None:
        """The JSON error keeps the specifier, referrer, and candidates."""
        result = runner.invoke(
            cli, ["traverse", str(app_root), "/nope.js", "--format", "json"]
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["code"] == "MODULE_NOT_FOUND"
        assert data["specifier"] == "/nope.js"
        assert data["referrer"] is None
        assert data["candidates"] == ["drive:///nope.js"]

    def test_config_empties_builtins(
        self, runner: CliRunner, app_root: Path, tmp_path: Path
    ) -> None:
        """With no builtins configured, ``fs`` is skipped like any other miss."""
        config = tmp_path / "shaker.yaml"
        config.write_text("builtins: []\n")
        result = runner.invoke(
            cli,
            ["traverse", str(app_root), "/index.js", "--config", str(config), "--format", "json"],
        )
        assert result.exit_code == 0
        specifiers = [s["specifier"] for s in json.loads(result.stdout)["skips"]]
        assert specifiers == ["fs", "./gone.js"]


class TestTraverseText:
    """Rich table output."""

    def test_tables(self, runner: CliRunner, app_root: Path) -> None:
        result = runner.invoke(cli, ["traverse", str(app_root), "/index.js"])
        assert result.exit_code == 0
        assert "Reachable Files" in result.output
        assert "/lib.js" in result.output
        assert "Skipped Specifiers" in result.output
        assert "./gone.js" in result.output
        assert "1 skipped" in result.output

    def test_no_skips(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "main.js").write_text("module.exports = 1\n")
        result = runner.invoke(cli, ["traverse", str(tmp_path), "/main.js"])
        assert result.exit_code == 0
        assert "Skipped Specifiers" not in result.output
        assert "0 skipped" in result.output

    def test_missing_entrypoint_panel(self, runner: CliRunner, app_root: Path) -> None:
        result = runner.invoke(cli, ["traverse", str(app_root), "/nope.js"])
        assert result.exit_code == 1
        assert "Traversal Failed" in result.output


class TestTraverseUsageErrors:
    """Bad arguments exit 2 before any traversal."""

    def test_root_must_exist(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["traverse", str(tmp_path / "absent"), "/index.js"])
        assert result.exit_code == 2

    def test_entrypoint_required(self, runner: CliRunner, app_root: Path) -> None:
        result = runner.invoke(cli, ["traverse", str(app_root)])
        assert result.exit_code == 2
        assert "Missing argument" in result.output

    def test_malformed_target(self, runner: CliRunner, app_root: Path) -> None:
        result = runner.invoke(cli, ["traverse", str(app_root), "/index.js", "-t", "linux"])
        assert result.exit_code == 2
        assert "linux" in result.output

    def test_invalid_config(
        self, runner: CliRunner, app_root: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("colour: blue\n")
        result = runner.invoke(
            cli, ["traverse", str(app_root), "/index.js", "--config", str(config)]
        )
        assert result.exit_code == 2
        assert "unknown keys" in result.output
