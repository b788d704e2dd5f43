"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Enums, errors, property definitions, result types and collaborator protocols
that cross subsystem boundaries are defined here.

Import patterns:
    from covenant.contracts import Presence, ContractViolation, PropertyDefinition
"""

from covenant.contracts.enums import (
    ContextOutcome,
    InvocationState,
    Presence,
    UndeclaredPolicy,
)
from covenant.contracts.errors import (
    CommandFailure,
    ContractDefinitionError,
    ContractViolation,
    CovenantError,
    DefaultCycleError,
    UndeclaredPropertyError,
    WriteViolationError,
)
from covenant.contracts.property import (
    UNSET,
    DefaultSpec,
    PropertyDefinition,
    UnsetSentinel,
    ViolationHandler,
    coerce_presence,
    validate_default,
)
from covenant.contracts.protocols import ContextProtocol, HookRunnerProtocol
from covenant.contracts.results import ContractReport, ViolationResolution

__all__ = [
    "UNSET",
    "CommandFailure",
    "ContextOutcome",
    "ContextProtocol",
    "ContractDefinitionError",
    "ContractReport",
    "ContractViolation",
    "CovenantError",
    "DefaultCycleError",
    "DefaultSpec",
    "HookRunnerProtocol",
    "InvocationState",
    "Presence",
    "PropertyDefinition",
    "UndeclaredPolicy",
    "UndeclaredPropertyError",
    "UnsetSentinel",
    "ViolationHandler",
    "ViolationResolution",
    "WriteViolationError",
    "coerce_presence",
    "validate_default",
]
