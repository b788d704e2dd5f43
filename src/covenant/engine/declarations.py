# src/covenant/engine/declarations.py
"""Class-body declaration helpers.

These are placeholders collected by Command.__init_subclass__: the attribute
name becomes the property name, and the placeholder is replaced by a
PropertyAccessor once the property is in the class's PropertyTable.

Example:
    class CreateUser(Command):
        email = expects()
        role = permits(default=lambda cmd: "member")
        user = provides()

        @permits
        def locale(self):
            return "en"

        @on_violation_for("email")
        def _missing_email(self, violation):
            self.context.mark_failed("email is required")
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from covenant.contracts.enums import Presence
from covenant.contracts.property import (
    UNSET,
    DefaultSpec,
    UnsetSentinel,
    ViolationHandler,
    coerce_presence,
)


@dataclass(frozen=True, slots=True)
class PropertyDeclaration:
    """A property declared in a class body, awaiting its attribute name."""

    presence: Presence
    default: DefaultSpec | None | UnsetSentinel = UNSET
    on_violation: ViolationHandler | None | UnsetSentinel = UNSET


@dataclass(frozen=True, slots=True)
class HandlerDeclaration:
    """A violation handler declared in a class body.

    An empty `names` tuple marks the command-level fallback handler.
    """

    func: ViolationHandler
    names: tuple[str, ...] = ()


def contract_property(
    presence: Presence | str,
    *,
    default: DefaultSpec | None | UnsetSentinel = UNSET,
    on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
) -> PropertyDeclaration:
    """Declare a property with an explicit presence classification.

    Raises:
        ContractDefinitionError: Invalid presence
    """
    return PropertyDeclaration(presence=coerce_presence(presence), default=default, on_violation=on_violation)


def expects(
    default: DefaultSpec | None | UnsetSentinel = UNSET,
    *,
    on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
) -> PropertyDeclaration:
    """Declare a property that must be in the context before the command runs.

    A default only matters when a violation handler absorbs the missing
    property: finalization then computes it like any other default.
    """
    return contract_property(Presence.EXPECTED, default=default, on_violation=on_violation)


def permits(
    default: DefaultSpec | None | UnsetSentinel = UNSET,
    *,
    on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
) -> PropertyDeclaration:
    """Declare an optional property with a lazy default.

    Usable as a decorator: the decorated function becomes the default and
    its name the property name.
    """
    return contract_property(Presence.PERMITTED, default=default, on_violation=on_violation)


def provides(
    default: DefaultSpec | None | UnsetSentinel = UNSET,
    *,
    on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
) -> PropertyDeclaration:
    """Declare a property the command body produces (the only writable kind)."""
    return contract_property(Presence.PROVIDED, default=default, on_violation=on_violation)


def on_violation_for(*names: str) -> Callable[[ViolationHandler], HandlerDeclaration]:
    """Decorate a method as the violation handler for the named properties."""

    def decorator(func: ViolationHandler) -> HandlerDeclaration:
        return HandlerDeclaration(func=func, names=names)

    return decorator


def on_violation(func: ViolationHandler) -> HandlerDeclaration:
    """Decorate a method as the command-level fallback violation handler."""
    return HandlerDeclaration(func=func)
