# src/covenant/core/config.py
"""
Configuration schema and loading for covenant.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from covenant.contracts.enums import UndeclaredPolicy


class ContractSettings(BaseModel):
    """How the contract engine treats inputs and violations.

    Example YAML:
        contracts:
          undeclared: warn      # ignore | warn | reject
          log_violations: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    undeclared: UndeclaredPolicy = Field(
        default=UndeclaredPolicy.IGNORE,
        description="Policy for context members no contract declares as expected or permitted",
    )
    log_violations: bool = Field(
        default=True,
        description="Log each detected violation and how it was resolved",
    )


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lowercase level names from YAML or environment."""
        if isinstance(v, str):
            return v.upper()
        return v


class CovenantSettings(BaseModel):
    """Top-level covenant configuration."""

    model_config = {"frozen": True}

    contracts: ContractSettings = Field(default_factory=ContractSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> CovenantSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (COVENANT_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: COVENANT_CONTRACTS__UNDECLARED for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated CovenantSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="COVENANT",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return CovenantSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    """Lowercase nested mapping keys (environment overrides arrive uppercase)."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
