"""
Covenant: property contracts for command objects.

Commands declare which context properties they expect, permit and provide.
The contract engine validates those declarations against the live context,
fills in lazy defaults and routes violations to recovery handlers.

Import patterns:
    from covenant import Command, expects, permits, provides, on_violation_for
"""

__version__ = "0.1.0"

from covenant.contracts import (
    CommandFailure,
    ContractDefinitionError,
    ContractViolation,
    CovenantError,
    DefaultCycleError,
    Presence,
    UndeclaredPropertyError,
    WriteViolationError,
)
from covenant.core.context import ExecutionContext
from covenant.engine import (
    Command,
    contract_property,
    expects,
    on_violation,
    on_violation_for,
    permits,
    provides,
)
from covenant.plugins import HookManager, hookimpl

__all__ = [
    "Command",
    "CommandFailure",
    "ContractDefinitionError",
    "ContractViolation",
    "CovenantError",
    "DefaultCycleError",
    "ExecutionContext",
    "HookManager",
    "Presence",
    "UndeclaredPropertyError",
    "WriteViolationError",
    "__version__",
    "contract_property",
    "expects",
    "hookimpl",
    "on_violation",
    "on_violation_for",
    "permits",
    "provides",
]
