# src/covenant/engine/accessors.py
"""Data-driven property accessors.

Every declared property gets a PropertyAccessor descriptor on its command
class. The descriptor holds nothing but the property name: reads and writes
go through read_property() / write_property(), which look the definition up
in the class's PropertyTable. Accessor behaviour is therefore a pure
function of the property's classification and default.

Reads memoize into the context (first access wins). Only `provides`
properties can be written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from covenant.contracts.errors import DefaultCycleError, WriteViolationError
from covenant.contracts.property import PropertyDefinition

if TYPE_CHECKING:
    from covenant.engine.command import Command


def evaluate_default(command: Command, definition: PropertyDefinition) -> Any:
    """Compute a property's default on the given command.

    - callable: invoked with the command as its only argument
    - str: name of a zero-argument method dispatched on the command
    - None: the property resolves to None
    """
    default = definition.default
    if default is None:
        return None
    if isinstance(default, str):
        return getattr(command, default)()
    return default(command)


def read_property(command: Command, name: str) -> Any:
    """Return a property's value, computing and storing its default if absent.

    A property already in the context is returned as stored - its default is
    never evaluated. Otherwise the default is computed once and written into
    the context, so later reads are idempotent.

    Raises:
        AttributeError: If the property is not declared
        DefaultCycleError: If computing the default re-enters a default that
            is still being computed
    """
    context = command.context
    if context.has(name):
        return context.get(name)

    definition = type(command).property_table.get(name)
    if definition is None:
        raise AttributeError(f"{type(command).__name__} has no declared property '{name}'")

    resolving = command._resolving
    if name in resolving:
        cycle_start = resolving.index(name)
        raise DefaultCycleError((*resolving[cycle_start:], name))

    resolving.append(name)
    try:
        value = evaluate_default(command, definition)
    finally:
        resolving.pop()

    context.set(name, value)
    return value


def write_property(command: Command, name: str, value: Any) -> None:
    """Write a provided property into the context.

    Raises:
        WriteViolationError: If the property is undeclared, expected or permitted
    """
    definition = type(command).property_table.get(name)
    if definition is None:
        raise WriteViolationError(type(command).__name__, name, "not declared")
    if not definition.is_writable:
        raise WriteViolationError(type(command).__name__, name, f"declared as {definition.presence.value}")
    command.context.set(name, value)


class PropertyAccessor:
    """Data descriptor routing attribute access to the contract routines."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: Command | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return read_property(instance, self.name)

    def __set__(self, instance: Command, value: Any) -> None:
        write_property(instance, self.name, value)

    def __delete__(self, instance: Command) -> None:
        raise WriteViolationError(type(instance).__name__, self.name, "properties cannot be deleted")

    def __repr__(self) -> str:
        return f"PropertyAccessor({self.name!r})"
