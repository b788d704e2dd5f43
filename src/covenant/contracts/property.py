"""Declared property metadata.

A PropertyDefinition is one entry of a command's contract: its presence
classification, how to compute a default when it is absent from the context,
and an optional handler for violations scoped to this property alone.

Definitions are frozen. Re-declaring a property produces a new definition
via merged(), overlaying only the options that were actually supplied.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Final

from covenant.contracts.enums import Presence
from covenant.contracts.errors import ContractDefinitionError


class UnsetSentinel:
    """Sentinel for "option not supplied", distinct from an explicit None.

    This is a singleton - use the UNSET instance, not the class directly.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<UNSET>"


UNSET: Final[UnsetSentinel] = UnsetSentinel()

# A default is either a callable taking the command instance, or the name of
# a zero-argument method on the command.
DefaultSpec = Callable[[Any], Any] | str
ViolationHandler = Callable[[Any, Any], Any]


def coerce_presence(value: Any) -> Presence:
    """Convert a DSL presence value to a Presence member.

    Raises:
        ContractDefinitionError: If value is not one of the three classifications
    """
    if isinstance(value, Presence):
        return value
    try:
        return Presence(value)
    except ValueError:
        raise ContractDefinitionError(f"Invalid value '{value}' for option presence") from None


def validate_default(name: str, default: Any) -> DefaultSpec | None:
    """Check that a default is a callable, a method name, or None.

    Raises:
        ContractDefinitionError: For any other kind of default
    """
    if default is None or callable(default) or isinstance(default, str):
        return default
    raise ContractDefinitionError(
        f"Invalid default for property '{name}': expected a callable or a method name, "
        f"got {type(default).__name__}. Wrap literal values in a callable."
    )


@dataclass(frozen=True, slots=True)
class PropertyDefinition:
    """One declared property.

    Attributes:
        name: Property name, unique within its table
        presence: Contract classification
        default: Callable(command) or method name, None when absent
        on_violation: Handler(command, violation) for this property only
    """

    name: str
    presence: Presence
    default: DefaultSpec | None = None
    on_violation: ViolationHandler | None = None

    def __post_init__(self) -> None:
        """Coerce presence and validate the default.

        Raises:
            ContractDefinitionError: Invalid presence or default
        """
        object.__setattr__(self, "presence", coerce_presence(self.presence))
        validate_default(self.name, self.default)

    @property
    def is_writable(self) -> bool:
        """Only provided properties accept writes from the command."""
        return self.presence is Presence.PROVIDED

    @property
    def default_kind(self) -> str:
        """Describe the default for diagnostics: 'none', 'callable' or 'method'."""
        if self.default is None:
            return "none"
        if isinstance(self.default, str):
            return "method"
        return "callable"

    def merged(
        self,
        *,
        presence: Presence | UnsetSentinel = UNSET,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> PropertyDefinition:
        """Return a new definition with the supplied options overlaid."""
        changes: dict[str, Any] = {}
        if not isinstance(presence, UnsetSentinel):
            changes["presence"] = presence
        if not isinstance(default, UnsetSentinel):
            changes["default"] = default
        if not isinstance(on_violation, UnsetSentinel):
            changes["on_violation"] = on_violation
        if not changes:
            return self
        return replace(self, **changes)
