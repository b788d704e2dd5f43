"""Status codes, classifications and modes used across subsystem boundaries.

CRITICAL: Every declared property MUST carry exactly one Presence value.
There is no "unknown" presence - an invalid classification crashes at
declaration time, before any command is invoked.
"""

from enum import StrEnum


class Presence(StrEnum):
    """How a property participates in a command's contract.

    - EXPECTED: must be in the context before the command runs
    - PERMITTED: optional input, lazily defaulted when absent
    - PROVIDED: produced by the command body, the only writable kind
    """

    EXPECTED = "expected"
    PERMITTED = "permitted"
    PROVIDED = "provided"


class InvocationState(StrEnum):
    """Lifecycle state of a single command invocation.

    Transitions:
        CREATED -> VALIDATING -> EXECUTING -> FINALIZING -> SUCCEEDED
        any state after CREATED -> FAILED -> ROLLED_BACK
    """

    CREATED = "created"
    VALIDATING = "validating"
    EXECUTING = "executing"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"


class ContextOutcome(StrEnum):
    """Outcome recorded on an execution context."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UndeclaredPolicy(StrEnum):
    """What to do with context members no contract declares as input."""

    IGNORE = "ignore"
    WARN = "warn"
    REJECT = "reject"
