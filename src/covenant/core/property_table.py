"""Per-command-class registry of declared properties.

The PropertyTable is the single source of truth for a command's contract:
accessors, validation and default forcing all read from it. Insertion order
is preserved so defaults are forced in a deterministic order.

Tables are built while the command class is being defined. A subclass gets
a copy of its parent's table, so extending a contract never mutates the
parent.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from covenant.contracts.enums import Presence
from covenant.contracts.errors import ContractDefinitionError
from covenant.contracts.property import (
    UNSET,
    DefaultSpec,
    PropertyDefinition,
    UnsetSentinel,
    ViolationHandler,
    coerce_presence,
    validate_default,
)
from covenant.contracts.protocols import ContextProtocol


class PropertyTable:
    """Ordered mapping of property name to PropertyDefinition.

    Usage:
        table = PropertyTable()
        table.declare("user_id", "expected")
        table.declare("role", Presence.PERMITTED, default=lambda cmd: "member")

        table.missing_expected(context)  # ["user_id"] if absent
    """

    def __init__(self) -> None:
        self._table: dict[str, PropertyDefinition] = {}

    def declare(
        self,
        name: str,
        presence: Presence | str | UnsetSentinel = UNSET,
        *,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> PropertyDefinition:
        """Create or merge a property definition.

        Options supplied here overlay the existing definition; options left
        unset keep their previous value.

        Args:
            name: Property name
            presence: Classification (Presence member or its string value)
            default: Callable(command), method name, or None
            on_violation: Handler(command, violation) for this property

        Returns:
            The stored (possibly merged) definition

        Raises:
            ContractDefinitionError: Invalid presence, invalid default, invalid
                name, or a new property declared without a presence
        """
        if not isinstance(name, str) or not name.isidentifier():
            raise ContractDefinitionError(f"Invalid property name {name!r}: must be a Python identifier")

        resolved_presence = UNSET if isinstance(presence, UnsetSentinel) else coerce_presence(presence)
        if not isinstance(default, UnsetSentinel):
            validate_default(name, default)

        existing = self._table.get(name)
        if existing is None:
            if isinstance(resolved_presence, UnsetSentinel):
                raise ContractDefinitionError(f"Property '{name}' must be declared with a presence")
            definition = PropertyDefinition(
                name=name,
                presence=resolved_presence,
                default=None if isinstance(default, UnsetSentinel) else default,
                on_violation=None if isinstance(on_violation, UnsetSentinel) else on_violation,
            )
        else:
            definition = existing.merged(
                presence=resolved_presence,
                default=default,
                on_violation=on_violation,
            )

        self._table[name] = definition
        return definition

    def set_violation_handler(self, name: str, handler: ViolationHandler) -> PropertyDefinition:
        """Attach a per-property violation handler.

        Raises:
            ContractDefinitionError: If the property has not been declared
        """
        if name not in self._table:
            raise ContractDefinitionError(f"Cannot attach a violation handler to undeclared property '{name}'")
        return self.declare(name, on_violation=handler)

    def get(self, name: str) -> PropertyDefinition | None:
        return self._table.get(name)

    def copy(self) -> PropertyTable:
        """Return an independent table with the same definitions."""
        clone = PropertyTable()
        clone._table = dict(self._table)
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[PropertyDefinition]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"PropertyTable({list(self._table)!r})"

    # === Views ===

    def _names_with(self, presence: Presence) -> list[str]:
        return [name for name, definition in self._table.items() if definition.presence is presence]

    def expected(self) -> list[str]:
        return self._names_with(Presence.EXPECTED)

    def permitted(self) -> list[str]:
        return self._names_with(Presence.PERMITTED)

    def provided(self) -> list[str]:
        return self._names_with(Presence.PROVIDED)

    def expected_and_permitted(self) -> list[str]:
        return self.expected() + self.permitted()

    def all(self) -> list[str]:
        """Every declared name, expected first, then permitted, then provided."""
        return self.expected() + self.permitted() + self.provided()

    # === Context queries ===

    def missing_expected(self, context: ContextProtocol) -> list[str]:
        """Expected names absent from the context, in declaration order.

        Membership is key presence, not truthiness.
        """
        return [name for name in self.expected() if not context.has(name)]

    def undeclared(self, context: ContextProtocol) -> list[str]:
        """Context members not declared as expected or permitted.

        Diagnostic only - enforcement depends on the configured policy.
        """
        inputs = set(self.expected_and_permitted())
        return [name for name in context.members() if name not in inputs]

    def default_for(self, name: str) -> DefaultSpec | None:
        """Return the default specification for a declared property.

        Raises:
            KeyError: If the property is not declared
        """
        return self._table[name].default

    def on_violation_for(self, name: str) -> ViolationHandler | None:
        definition = self._table.get(name)
        return definition.on_violation if definition is not None else None

    def describe(self) -> list[dict[str, Any]]:
        """Serializable summary of the table, in `all()` order."""
        return [
            {
                "name": name,
                "presence": str(self._table[name].presence),
                "default": self._table[name].default_kind,
                "on_violation": self._table[name].on_violation is not None,
            }
            for name in self.all()
        ]
