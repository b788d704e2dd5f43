"""Protocols for the collaborators the contract engine consumes.

The engine never depends on a concrete context store or hook runner. These
protocols describe the narrow surface it uses; they're for type checking,
runtime_checkable so tests can assert conformance.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContextProtocol(Protocol):
    """Shared mutable key/value store passed through a command's lifecycle.

    Membership is key presence: a key holding None is still a member.
    """

    failure_reason: str | None

    def has(self, name: str) -> bool: ...

    def get(self, name: str, default: Any = None) -> Any: ...

    def set(self, name: str, value: Any) -> None: ...

    def members(self) -> Iterable[str]: ...

    def mark_failed(self, reason: str | None = None, **data: Any) -> None: ...

    def mark_succeeded(self) -> None: ...

    def register(self, command: Any) -> None: ...

    def rollback(self) -> None: ...


@runtime_checkable
class HookRunnerProtocol(Protocol):
    """Runs a command body wrapped in before/around/after stages.

    The body must run exactly once, and errors raised inside it must
    propagate out of run_with_hooks() unmodified.
    """

    def run_with_hooks(self, command: Any, body: Callable[[], Any]) -> None: ...
