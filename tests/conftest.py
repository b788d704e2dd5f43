# tests/conftest.py
"""Shared test fixtures and helpers.

Command classes under test are defined inline in each test so every test
owns its contract. Classes that must be importable by module path (the CLI
tests) live in tests/fixtures/commands.py.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from covenant.plugins.hookspecs import hookimpl

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Hook plugins
# =============================================================================


class RecordingHooks:
    """Hook plugin that appends each stage it sees to a shared list."""

    def __init__(self, events: list[str], label: str = "hooks") -> None:
        self.events = events
        self.label = label

    @hookimpl
    def covenant_before_call(self, command: Any) -> None:
        self.events.append(f"{self.label}:before")

    @hookimpl(wrapper=True)
    def covenant_call(self, command: Any, body: Callable[[], Any]) -> Any:
        self.events.append(f"{self.label}:around:in")
        result = yield
        self.events.append(f"{self.label}:around:out")
        return result

    @hookimpl
    def covenant_after_call(self, command: Any) -> None:
        self.events.append(f"{self.label}:after")


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def recording_hooks(events: list[str]) -> RecordingHooks:
    return RecordingHooks(events)
