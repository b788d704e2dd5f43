"""Result types for violation resolution.

Recoverable contract failures are modelled as values. ViolationResolution
records which violations were absorbed by handlers and which one (if any)
had no handler. Raising is an explicit final step: raise_for_unresolved().
"""

from __future__ import annotations

from dataclasses import dataclass

from covenant.contracts.errors import ContractViolation


@dataclass(frozen=True, slots=True)
class ViolationResolution:
    """Outcome of resolving a violation table.

    Attributes:
        handled: Property names whose handler ran and returned normally
        unresolved: First violation without a handler, None if all were handled
    """

    handled: tuple[str, ...] = ()
    unresolved: ContractViolation | None = None

    @property
    def is_resolved(self) -> bool:
        return self.unresolved is None

    def raise_for_unresolved(self) -> None:
        """Raise the unresolved violation, if there is one.

        Raises:
            ContractViolation: The first violation no handler absorbed
        """
        if self.unresolved is not None:
            raise self.unresolved


@dataclass(frozen=True, slots=True)
class ContractReport:
    """Static check of a context against a contract, without running anything.

    Used by the CLI `check` command.
    """

    command: str
    missing: tuple[str, ...]
    undeclared: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return not self.missing
