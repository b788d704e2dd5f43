# src/covenant/engine/command.py
"""Command base class and its contract DSL.

A command is a unit of business logic run once against an ExecutionContext.
Subclasses declare their contract in the class body (or through the
classmethods below), implement call(), and optionally rollback().

Example:
    class PlaceOrder(Command):
        customer_id = expects()
        currency = permits(default=lambda cmd: "EUR")
        order = provides()

        def call(self):
            self.order = Order(self.customer_id, self.currency)

    context = PlaceOrder.invoke(customer_id=7)
    context["order"]

Lifecycle per run: validate the contract, run call() through the hook
manager, force every declared accessor, re-check the violation table. Any
error rolls the context back before propagating.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from covenant.contracts.enums import Presence
from covenant.contracts.errors import CommandFailure, ContractDefinitionError
from covenant.contracts.property import (
    UNSET,
    DefaultSpec,
    PropertyDefinition,
    UnsetSentinel,
    ViolationHandler,
)
from covenant.contracts.results import ContractReport
from covenant.core.config import ContractSettings
from covenant.core.context import ExecutionContext
from covenant.core.property_table import PropertyTable
from covenant.engine.accessors import PropertyAccessor, write_property
from covenant.engine.contract_engine import ContractEngine
from covenant.engine.declarations import HandlerDeclaration, PropertyDeclaration
from covenant.plugins.manager import HookManager


class Command:
    """Base class for contracted commands.

    Class attributes:
        property_table: The contract; each subclass owns a copy of its parent's
        violation_handler: Command-level fallback handler(command, violation)
        hooks: Hook manager running call() inside before/around/after stages
        contract_settings: Undeclared-property policy and violation logging

    Instance attributes other than declared properties must be private
    (leading underscore): public attribute writes go through the contract
    and only `provides` properties are writable.
    """

    property_table: ClassVar[PropertyTable] = PropertyTable()
    violation_handler: ClassVar[ViolationHandler | None] = None
    hooks: ClassVar[HookManager] = HookManager()
    contract_settings: ClassVar[ContractSettings] = ContractSettings()

    context: ExecutionContext

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.property_table = cls.property_table.copy()

        # Properties first so handlers can reference any property in the body
        namespace = list(cls.__dict__.items())
        for attr, value in namespace:
            if isinstance(value, PropertyDeclaration):
                cls.declare(attr, value.presence, default=value.default, on_violation=value.on_violation)
        for attr, value in namespace:
            if isinstance(value, HandlerDeclaration):
                setattr(cls, attr, value.func)
                if value.names:
                    cls.on_violation_for(*value.names, handler=value.func)
                else:
                    cls.on_violation(value.func)

    def __init__(self, context: ExecutionContext | Mapping[str, Any] | None = None, **values: Any) -> None:
        object.__setattr__(self, "context", ExecutionContext.build(context, **values))
        self._resolving: list[str] = []
        self._engine = ContractEngine(self, type(self).contract_settings)
        self.context.register(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        write_property(self, name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._engine.state.value!r})"

    # === Definition DSL ===

    @classmethod
    def declare(
        cls,
        name: str,
        presence: Presence | str | UnsetSentinel = UNSET,
        *,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> PropertyDefinition:
        """Declare (or merge into) a property and install its accessor.

        Raises:
            ContractDefinitionError: Invalid presence, invalid default, or a
                name that collides with the Command API
        """
        if name in RESERVED_NAMES:
            raise ContractDefinitionError(f"Property name '{name}' is reserved by {Command.__name__}")
        definition = cls.property_table.declare(name, presence, default=default, on_violation=on_violation)
        setattr(cls, name, PropertyAccessor(name))
        return definition

    @classmethod
    def expects(
        cls,
        *names: str,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> None:
        for name in names:
            cls.declare(name, Presence.EXPECTED, default=default, on_violation=on_violation)

    @classmethod
    def permits(
        cls,
        *names: str,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> None:
        for name in names:
            cls.declare(name, Presence.PERMITTED, default=default, on_violation=on_violation)

    @classmethod
    def provides(
        cls,
        *names: str,
        default: DefaultSpec | None | UnsetSentinel = UNSET,
        on_violation: ViolationHandler | None | UnsetSentinel = UNSET,
    ) -> None:
        for name in names:
            cls.declare(name, Presence.PROVIDED, default=default, on_violation=on_violation)

    @classmethod
    def on_violation_for(cls, *names: str, handler: ViolationHandler) -> ViolationHandler:
        """Attach a handler to each named (already declared) property.

        Raises:
            ContractDefinitionError: If a name is not declared
        """
        for name in names:
            cls.property_table.set_violation_handler(name, handler)
        return handler

    @classmethod
    def on_violation(cls, handler: ViolationHandler) -> ViolationHandler:
        """Set the command-level fallback handler. Usable as a decorator."""
        cls.violation_handler = handler
        return handler

    @classmethod
    def use_hooks(cls, *plugins: Any) -> HookManager:
        """Give this class its own hook manager: the inherited plugins plus these."""
        cls.hooks = cls.hooks.extended(*plugins)
        return cls.hooks

    # === Invocation ===

    @classmethod
    def invoke(cls, context: ExecutionContext | Mapping[str, Any] | None = None, **values: Any) -> ExecutionContext:
        """Run a new instance and return its context.

        A failure signalled through this context's mark_failed() is absorbed:
        the returned context reports failure. Every other error propagates,
        including a CommandFailure raised for a different context.
        """
        return cls(context, **values).run()

    @classmethod
    def invoke_strict(
        cls, context: ExecutionContext | Mapping[str, Any] | None = None, **values: Any
    ) -> ExecutionContext:
        """Run a new instance; CommandFailure propagates to the caller."""
        return cls(context, **values).run_strict()

    @classmethod
    def check(cls, context: Mapping[str, Any] | ExecutionContext | None = None) -> ContractReport:
        """Compare a context with the contract without running anything."""
        built = ExecutionContext.build(context)
        return ContractReport(
            command=f"{cls.__module__}.{cls.__qualname__}",
            missing=tuple(cls.property_table.missing_expected(built)),
            undeclared=tuple(cls.property_table.undeclared(built)),
        )

    def run(self) -> ExecutionContext:
        try:
            self.run_strict()
        except CommandFailure as exc:
            # Only this context's own failure is an outcome; a nested
            # command failing on another context is a body error
            if exc.context is not self.context:
                raise
        return self.context

    def run_strict(self) -> ExecutionContext:
        self._engine.run(type(self).hooks)
        return self.context

    @property
    def engine(self) -> ContractEngine:
        return self._engine

    # === Overridable behaviour ===

    def call(self) -> None:
        """Command body. Subclasses override."""

    def rollback(self) -> None:
        """Undo side effects when the run (or a later command sharing the context) fails."""


RESERVED_NAMES: frozenset[str] = frozenset({*dir(Command), "context"})
