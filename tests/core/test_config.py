"""Tests for covenant configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from covenant.contracts.enums import UndeclaredPolicy
from covenant.core.config import ContractSettings, CovenantSettings, LoggingSettings, load_settings


class TestSettingsModels:
    def test_defaults(self) -> None:
        settings = CovenantSettings()
        assert settings.contracts.undeclared is UndeclaredPolicy.IGNORE
        assert settings.contracts.log_violations is True
        assert settings.logging.level == "INFO"
        assert settings.logging.json_output is False

    def test_settings_are_frozen(self) -> None:
        settings = ContractSettings()
        with pytest.raises(ValidationError):
            settings.undeclared = UndeclaredPolicy.WARN  # type: ignore[misc]

    def test_policy_accepts_string(self) -> None:
        assert ContractSettings(undeclared="reject").undeclared is UndeclaredPolicy.REJECT  # type: ignore[arg-type]

    def test_invalid_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ContractSettings(undeclared="sometimes")  # type: ignore[arg-type]

    def test_level_is_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"  # type: ignore[arg-type]

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CovenantSettings(contracts={"strict": True})  # type: ignore[arg-type]


class TestLoadSettings:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_loads_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(
            "contracts:\n  undeclared: warn\n  log_violations: false\nlogging:\n  level: debug\n  json_output: true\n"
        )

        settings = load_settings(config)

        assert settings.contracts.undeclared is UndeclaredPolicy.WARN
        assert settings.contracts.log_violations is False
        assert settings.logging.level == "DEBUG"
        assert settings.logging.json_output is True

    def test_environment_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("logging:\n  level: WARNING\n")
        monkeypatch.setenv("COVENANT_CONTRACTS__UNDECLARED", "reject")

        settings = load_settings(config)

        assert settings.contracts.undeclared is UndeclaredPolicy.REJECT
        assert settings.logging.level == "WARNING"

    def test_invalid_values_fail_validation(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("contracts:\n  undeclared: sometimes\n")
        with pytest.raises(ValidationError):
            load_settings(config)
