# src/covenant/engine/__init__.py
"""Contract engine: commands, accessors and per-invocation validation."""

from covenant.engine.accessors import PropertyAccessor, evaluate_default, read_property, write_property
from covenant.engine.command import Command
from covenant.engine.contract_engine import ContractEngine
from covenant.engine.declarations import (
    HandlerDeclaration,
    PropertyDeclaration,
    contract_property,
    expects,
    on_violation,
    on_violation_for,
    permits,
    provides,
)

__all__ = [
    "Command",
    "ContractEngine",
    "HandlerDeclaration",
    "PropertyAccessor",
    "PropertyDeclaration",
    "contract_property",
    "evaluate_default",
    "expects",
    "on_violation",
    "on_violation_for",
    "permits",
    "provides",
    "read_property",
    "write_property",
]
