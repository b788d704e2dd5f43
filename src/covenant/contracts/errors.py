"""Error taxonomy for command contracts.

Only ContractViolation has a recovery path (per-property or command-level
violation handlers). Everything else is fatal from the engine's point of
view: the engine guarantees rollback notification but never suppresses.

- ContractDefinitionError: programming mistake at declaration time
- ContractViolation: expected property missing at validation time
- WriteViolationError: write to a property that is not `provides`
- DefaultCycleError: lazy defaults that resolve through each other
- UndeclaredPropertyError: context carries undeclared input (reject policy)
- CommandFailure: control flow signal raised when a context is marked failed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from covenant.contracts.protocols import ContextProtocol


class CovenantError(Exception):
    """Base class for every error raised by covenant."""


class ContractDefinitionError(CovenantError, ValueError):
    """Raised when a contract declaration is invalid.

    Never routed to violation handlers - an invalid declaration is a bug in
    the command class, not a runtime contract failure.
    """


class ContractViolation(CovenantError):
    """An expected property was missing from the context.

    Immutable once constructed. Handlers receive the instance as their only
    argument besides the command.

    Attributes:
        command: Command instance whose contract was violated
        property: Name of the offending property
        message: Human-readable description
    """

    def __init__(self, command: Any = None, property: str | None = None, message: str | None = None) -> None:
        self._command = command
        self._property = property
        self._message = message
        super().__init__(self.message)

    @property
    def command(self) -> Any:
        return self._command

    @property
    def message(self) -> str:
        if self._message is not None:
            return self._message
        return f"Property '{self._property}' violated the command's contract."

    # Defined after every other @property: from here on the name shadows the
    # builtin inside this class body.
    @property
    def property(self) -> str | None:
        return self._property

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ContractViolation(property={self._property!r}, message={self.message!r})"


class WriteViolationError(CovenantError, AttributeError):
    """Raised when writing a property that the contract does not provide."""

    def __init__(self, command_name: str, name: str, reason: str | None = None) -> None:
        self.command_name = command_name
        self.name = name
        detail = f" ({reason})" if reason else ""
        super().__init__(f"{command_name} has no such writable property '{name}'{detail}")


class DefaultCycleError(CovenantError, RecursionError):
    """Raised when lazy defaults reference each other in a cycle.

    Attributes:
        cycle: Property names in resolution order, ending with the repeat
    """

    def __init__(self, cycle: tuple[str, ...]) -> None:
        self.cycle = cycle
        super().__init__(f"Default cycle detected while resolving properties: {' -> '.join(cycle)}")


class UndeclaredPropertyError(CovenantError):
    """Raised under the 'reject' policy when the context carries undeclared input."""

    def __init__(self, command_name: str, names: tuple[str, ...]) -> None:
        self.command_name = command_name
        self.names = names
        super().__init__(f"{command_name} received undeclared context properties: {', '.join(names)}")


class CommandFailure(CovenantError):
    """Raised when an execution context is marked as failed.

    This is NOT a bug - it's the signal a command (or a violation handler)
    uses to stop the run with a failure outcome. Command.invoke() absorbs it
    and returns the failed context; Command.invoke_strict() lets it propagate.
    """

    def __init__(self, context: ContextProtocol) -> None:
        self.context = context
        reason = context.failure_reason
        super().__init__(reason if reason is not None else "Command failed")
