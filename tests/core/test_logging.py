"""Tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from covenant.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="INFO")

        get_logger("covenant.test").info("violation handled", property="user_id")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "violation handled"
        assert payload["property"] == "user_id"
        assert payload["level"] == "info"
        assert "_record" not in payload

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="WARNING")

        get_logger("covenant.test").info("quiet")

        assert "quiet" not in capsys.readouterr().err

    def test_stdlib_loggers_share_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="INFO")

        logging.getLogger("host.app").warning("from stdlib")

        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["event"] == "from stdlib"

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=False, level="INFO")

        get_logger("covenant.test").info("hello console")

        assert "hello console" in capsys.readouterr().err

    def test_logger_name_is_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="INFO")

        get_logger("covenant.engine.test").info("named")

        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["logger"] == "covenant.engine.test"

    def test_custom_stream(self, capsys: pytest.CaptureFixture[str]) -> None:
        buffer = io.StringIO()
        configure_logging(json_output=True, level="INFO", stream=buffer)

        get_logger("covenant.test").warning("to buffer")

        assert json.loads(buffer.getvalue().splitlines()[-1])["event"] == "to buffer"
        assert "to buffer" not in capsys.readouterr().err

    def test_reconfigure_replaces_handlers(self) -> None:
        configure_logging(level="INFO")
        configure_logging(level="DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
