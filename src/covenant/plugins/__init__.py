# src/covenant/plugins/__init__.py
"""Hook plugin system: pluggy specs and the manager that runs them."""

from covenant.plugins.hookspecs import PROJECT_NAME, CovenantCommandSpec, hookimpl, hookspec
from covenant.plugins.manager import HookManager

__all__ = [
    "PROJECT_NAME",
    "CovenantCommandSpec",
    "HookManager",
    "hookimpl",
    "hookspec",
]
