"""Tests for the covenant CLI."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from covenant import __version__
from covenant.cli import app

runner = CliRunner()

GREET = "tests.fixtures.commands:Greet"


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"covenant version {__version__}" in result.stdout


class TestDescribe:
    def test_console_lists_properties(self) -> None:
        result = runner.invoke(app, ["describe", GREET])

        assert result.exit_code == 0
        assert "Greet (tests.fixtures.commands)" in result.stdout
        lines = result.stdout.splitlines()
        assert any(line.split()[:2] == ["name", "expected"] for line in lines)
        assert any(line.split()[:3] == ["greeting", "permitted", "default=callable"] for line in lines)
        assert any(line.split()[:3] == ["message", "provided", "default=none"] for line in lines)

    def test_console_mentions_command_level_handler(self) -> None:
        result = runner.invoke(app, ["describe", "tests.fixtures.commands:Lenient"])

        assert result.exit_code == 0
        assert "command-level on_violation handler registered" in result.stdout

    def test_json(self) -> None:
        result = runner.invoke(app, ["describe", GREET, "--format", "json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["command"] == "tests.fixtures.commands.Greet"
        assert payload["on_violation"] is False
        assert [row["name"] for row in payload["properties"]] == ["name", "greeting", "message"]
        assert payload["properties"][0] == {
            "name": "name",
            "presence": "expected",
            "default": "none",
            "on_violation": False,
        }

    @pytest.mark.parametrize(
        "target",
        [
            "no_colon",
            "tests.fixtures.missing_module:Greet",
            "tests.fixtures.commands:Nope",
            "tests.fixtures.commands:NOT_A_COMMAND",
        ],
    )
    def test_bad_target_exits_2(self, target: str) -> None:
        result = runner.invoke(app, ["describe", target])

        assert result.exit_code == 2


class TestCheck:
    def test_satisfied(self) -> None:
        result = runner.invoke(app, ["check", GREET, "--context", '{"name": "Ada"}'])

        assert result.exit_code == 0
        assert "tests.fixtures.commands.Greet: contract satisfied" in result.stdout

    def test_missing_expected_property(self) -> None:
        result = runner.invoke(app, ["check", GREET])

        assert result.exit_code == 1
        assert "missing: Expected context to include property 'name'." in result.stdout

    def test_json_report(self) -> None:
        result = runner.invoke(app, ["check", GREET, "--context", '{"other": 1}', "--format", "json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload == {
            "command": "tests.fixtures.commands.Greet",
            "ok": False,
            "missing": ["name"],
            "undeclared": [],
        }

    def test_does_not_run_the_command(self) -> None:
        result = runner.invoke(app, ["check", "tests.fixtures.commands:Lenient", "--format", "json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["missing"] == ["name"]

    @pytest.mark.parametrize("context", ["{not json", "[1, 2]"])
    def test_invalid_context_exits_2(self, context: str) -> None:
        result = runner.invoke(app, ["check", GREET, "--context", context])

        assert result.exit_code == 2

    def test_missing_settings_file_exits_2(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", GREET, "--settings", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 2

    def test_warn_policy_reports_without_failing(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("contracts:\n  undeclared: warn\n")

        result = runner.invoke(
            app,
            ["check", GREET, "--settings", str(settings), "--context", '{"name": "Ada", "extra": 1}'],
        )

        assert result.exit_code == 0
        assert "undeclared: extra" in result.stdout
        assert "contract satisfied" in result.stdout

    def test_reject_policy_fails(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("contracts:\n  undeclared: reject\n")

        result = runner.invoke(
            app,
            [
                "check",
                GREET,
                "--settings",
                str(settings),
                "--context",
                '{"name": "Ada", "extra": 1}',
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["ok"] is False
        assert payload["missing"] == []
        assert payload["undeclared"] == ["extra"]

    def test_invalid_settings_exit_2(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("contracts:\n  undeclared: sometimes\n")

        result = runner.invoke(app, ["check", GREET, "--settings", str(settings)])

        assert result.exit_code == 2
