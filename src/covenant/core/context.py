"""Execution context shared by commands.

The ExecutionContext is the mutable key/value store a command reads its
inputs from and writes its outputs to. It also carries the run outcome and
the rollback notification list.

Example:
    context = ExecutionContext.build({"user_id": 42})
    command = CreateUser(context)
    ...
    context.mark_failed("user is banned")  # raises CommandFailure
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

import structlog

from covenant.contracts.enums import ContextOutcome
from covenant.contracts.errors import CommandFailure

logger = structlog.get_logger(__name__)


class ExecutionContext:
    """Ordered key/value store with outcome tracking and rollback.

    Membership means key presence: a key set to None is still a member.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._table: dict[str, Any] = {}
        if values is not None:
            self._table.update(values)
        self._table.update(kwargs)
        self.outcome = ContextOutcome.PENDING
        self.failure_reason: str | None = None
        self._registered: list[Any] = []
        self._rolled_back = False

    @classmethod
    def build(cls, context: ExecutionContext | Mapping[str, Any] | None = None, **kwargs: Any) -> ExecutionContext:
        """Return the given context unchanged, or build one from a mapping.

        Keyword arguments are merged into the context in both cases.
        """
        if isinstance(context, ExecutionContext):
            context._table.update(kwargs)
            return context
        return cls(context, **kwargs)

    # === Key/value access ===

    def has(self, name: str) -> bool:
        return name in self._table

    def get(self, name: str, default: Any = None) -> Any:
        return self._table.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._table[name] = value

    def members(self) -> list[str]:
        return list(self._table)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._table)

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __getitem__(self, name: str) -> Any:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"ExecutionContext({self._table!r}, outcome={self.outcome.value!r})"

    # === Outcome ===

    @property
    def success(self) -> bool:
        return self.outcome is not ContextOutcome.FAILED

    @property
    def failure(self) -> bool:
        return self.outcome is ContextOutcome.FAILED

    def mark_failed(self, reason: str | None = None, **data: Any) -> None:
        """Record a failure outcome and halt the run.

        Extra keyword data is merged into the context so callers can inspect
        it after the run.

        Raises:
            CommandFailure: Always - this is how the run is stopped
        """
        self._table.update(data)
        self.outcome = ContextOutcome.FAILED
        self.failure_reason = reason
        raise CommandFailure(self)

    def mark_succeeded(self) -> None:
        if self.outcome is not ContextOutcome.FAILED:
            self.outcome = ContextOutcome.SUCCEEDED

    # === Rollback ===

    def register(self, command: Any) -> None:
        """Add a command to the rollback notification list."""
        self._registered.append(command)

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    def rollback(self) -> None:
        """Notify registered commands in reverse order, at most once per context.

        Every registered command is notified even when an earlier rollback
        raises.

        Raises:
            Exception: The first error raised by a command's rollback(), once
                all commands have been notified
        """
        if self._rolled_back:
            return
        self._rolled_back = True
        first_error: Exception | None = None
        for command in reversed(self._registered):
            logger.warning("Rolling back command", command=type(command).__name__)
            try:
                command.rollback()
            except Exception as exc:
                logger.error(
                    "Command rollback failed",
                    command=type(command).__name__,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
