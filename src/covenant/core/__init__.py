# src/covenant/core/__init__.py
"""Core infrastructure: PropertyTable, ExecutionContext, Configuration, Logging."""

from covenant.core.config import (
    ContractSettings,
    CovenantSettings,
    LoggingSettings,
    load_settings,
)
from covenant.core.context import ExecutionContext
from covenant.core.logging import configure_logging, get_logger
from covenant.core.property_table import PropertyTable

__all__ = [
    "ContractSettings",
    "CovenantSettings",
    "ExecutionContext",
    "LoggingSettings",
    "PropertyTable",
    "configure_logging",
    "get_logger",
    "load_settings",
]
