# src/covenant/engine/contract_engine.py
"""Per-invocation contract validation and default resolution.

A ContractEngine is created for every command instance and drives one run:

    CREATED -> VALIDATING -> EXECUTING -> FINALIZING -> SUCCEEDED
    any state after CREATED -> FAILED -> ROLLED_BACK (error re-raised)

Validation detects missing expected properties, builds a violation per
property and resolves each through its handler chain (per-property handler,
then the command-level handler, then raise). Finalization forces every
declared accessor so lazy defaults materialize, then re-resolves the SAME
violation table built before the body ran.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

from covenant.contracts.enums import InvocationState, UndeclaredPolicy
from covenant.contracts.errors import ContractViolation, UndeclaredPropertyError
from covenant.contracts.property import ViolationHandler
from covenant.contracts.protocols import ContextProtocol, HookRunnerProtocol
from covenant.contracts.results import ViolationResolution
from covenant.core.config import ContractSettings
from covenant.engine.accessors import read_property

if TYPE_CHECKING:
    from covenant.engine.command import Command

logger = structlog.get_logger(__name__)


def missing_property_message(name: str) -> str:
    return f"Expected context to include property '{name}'."


class ContractEngine:
    """Orchestrates validation and default resolution around one invocation.

    Example:
        engine = ContractEngine(command)
        engine.run(hooks)  # raises on unhandled violations, rolls back on error
    """

    def __init__(self, command: Command, settings: ContractSettings | None = None) -> None:
        self._command = command
        self._settings = settings if settings is not None else ContractSettings()
        self._violations: dict[str, ContractViolation] = {}
        self.state = InvocationState.CREATED

    @property
    def context(self) -> ContextProtocol:
        return self._command.context

    @property
    def violation_table(self) -> Mapping[str, ContractViolation]:
        """Read-only view of the violations detected before the body ran."""
        return MappingProxyType(self._violations)

    def _transition(self, state: InvocationState) -> None:
        logger.debug(
            "Invocation state change",
            command=type(self._command).__name__,
            from_state=self.state.value,
            to_state=state.value,
        )
        self.state = state

    # === Validation ===

    def report_undeclared(self) -> tuple[str, ...]:
        """Apply the undeclared-property policy to the current context.

        Returns:
            Names of context members not declared as expected or permitted

        Raises:
            UndeclaredPropertyError: Under the 'reject' policy, if any exist
        """
        policy = self._settings.undeclared
        if policy is UndeclaredPolicy.IGNORE:
            return ()
        command_name = type(self._command).__name__
        undeclared = tuple(type(self._command).property_table.undeclared(self.context))
        if not undeclared:
            return ()
        if policy is UndeclaredPolicy.REJECT:
            raise UndeclaredPropertyError(command_name, undeclared)
        logger.warning("Context includes undeclared properties", command=command_name, properties=list(undeclared))
        return undeclared

    def detect_violations(self) -> dict[str, ContractViolation]:
        """Build the violation table from missing expected properties.

        Returns:
            Mapping of property name to violation, in declaration order
        """
        missing = type(self._command).property_table.missing_expected(self.context)
        self._violations = {
            name: ContractViolation(self._command, property=name, message=missing_property_message(name))
            for name in missing
        }
        if self._violations and self._settings.log_violations:
            logger.info(
                "Contract violations detected",
                command=type(self._command).__name__,
                properties=list(self._violations),
            )
        return self._violations

    def handler_for(self, name: str) -> ViolationHandler | None:
        """Per-property handler, else the command-level handler, else None."""
        command_cls = type(self._command)
        handler = command_cls.property_table.on_violation_for(name)
        if handler is not None:
            return handler
        return command_cls.violation_handler

    def resolve(self, violations: Mapping[str, ContractViolation]) -> ViolationResolution:
        """Run each violation through its handler chain, in declaration order.

        A handler may absorb the violation (return normally), stop the run by
        marking the context failed, or raise. The first violation without a
        handler ends resolution; later violations are not evaluated.

        Returns:
            Resolution naming the handled violations and the first unresolved one
        """
        handled: list[str] = []
        for name, violation in violations.items():
            handler = self.handler_for(name)
            if handler is None:
                if self._settings.log_violations:
                    logger.warning(
                        "Unhandled contract violation",
                        command=type(self._command).__name__,
                        property=name,
                    )
                return ViolationResolution(handled=tuple(handled), unresolved=violation)
            handler(self._command, violation)
            handled.append(name)
            if self._settings.log_violations:
                logger.info("Contract violation handled", command=type(self._command).__name__, property=name)
        return ViolationResolution(handled=tuple(handled))

    def validate(self) -> ViolationResolution:
        """Detect and resolve violations before the body runs.

        Raises:
            ContractViolation: If a violation has no handler
            UndeclaredPropertyError: Under the 'reject' undeclared policy
        """
        self._transition(InvocationState.VALIDATING)
        self.report_undeclared()
        resolution = self.resolve(self.detect_violations())
        resolution.raise_for_unresolved()
        return resolution

    # === Execution ===

    def execute(self, hooks: HookRunnerProtocol) -> None:
        self._transition(InvocationState.EXECUTING)
        hooks.run_with_hooks(self._command, self._command.call)

    # === Finalization ===

    def force_defaults(self) -> None:
        """Read every declared accessor for its memoizing side effect."""
        for name in type(self._command).property_table.all():
            read_property(self._command, name)

    def recheck(self) -> ViolationResolution:
        """Re-resolve the violation table built before the body ran.

        The table is NOT recomputed from the post-body context: handlers run
        again with the original violation objects.
        """
        resolution = self.resolve(self._violations)
        resolution.raise_for_unresolved()
        return resolution

    def finalize(self) -> None:
        self._transition(InvocationState.FINALIZING)
        self.force_defaults()
        self.recheck()
        self.context.mark_succeeded()
        self._transition(InvocationState.SUCCEEDED)

    def fail(self, error: BaseException) -> None:
        """Record the failure and notify the context's rollback list once.

        A rollback that raises never replaces `error`: the rollback error is
        attached to it as a note (it is already logged by the context).
        """
        self._transition(InvocationState.FAILED)
        logger.warning(
            "Command run failed",
            command=type(self._command).__name__,
            error_type=type(error).__name__,
            error=str(error),
        )
        try:
            self.context.rollback()
        except Exception as rollback_error:
            # The run's own error is what propagates; the rollback error
            # travels with it as a note
            error.add_note(f"Rollback also failed: {type(rollback_error).__name__}: {rollback_error}")
        self._transition(InvocationState.ROLLED_BACK)

    def run(self, hooks: HookRunnerProtocol) -> None:
        """Validate, execute through the hooks, and finalize.

        Any error after CREATED triggers rollback and is then re-raised
        unchanged - rollback never swallows it.

        Raises:
            RuntimeError: If this invocation has already run
        """
        if self.state is not InvocationState.CREATED:
            raise RuntimeError(f"{type(self._command).__name__} invocation already ran (state={self.state.value})")
        try:
            self.validate()
            self.execute(hooks)
            self.finalize()
        except Exception as exc:
            self.fail(exc)
            raise
