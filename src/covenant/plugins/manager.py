# src/covenant/plugins/manager.py
"""Hook manager: composes before/around/after stages around a command body.

Uses pluggy for hook-based plugin registration.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pluggy
import structlog

from covenant.plugins.hookspecs import PROJECT_NAME, CovenantCommandSpec, hookimpl

logger = structlog.get_logger(__name__)

BODY_RUNNER_NAME = "covenant.body"


class _BodyRunner:
    """Built-in covenant_call implementation that invokes the body.

    Registered trylast so every other implementation (and every wrapper)
    sees the call first.
    """

    @hookimpl(trylast=True)
    def covenant_call(self, command: Any, body: Callable[[], Any]) -> bool:
        body()
        return True


class HookManager:
    """Manages hook plugins and runs command bodies through them.

    Usage:
        manager = HookManager()
        manager.register(AuditHooks())

        manager.run_with_hooks(command, command.call)
    """

    def __init__(self, plugins: tuple[Any, ...] = ()) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CovenantCommandSpec)
        self._pm.register(_BodyRunner(), name=BODY_RUNNER_NAME)
        self._plugins: list[Any] = []
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: Any, name: str | None = None) -> None:
        """Register a hook plugin.

        Args:
            plugin: Plugin instance (or module) implementing hook methods
            name: Optional registration name

        Raises:
            ValueError: If the plugin (or its name) is already registered
        """
        self._pm.register(plugin, name=name)
        self._plugins.append(plugin)

    def unregister(self, plugin: Any) -> None:
        self._pm.unregister(plugin)
        self._plugins.remove(plugin)

    @property
    def plugins(self) -> tuple[Any, ...]:
        """User plugins in registration order (excludes the built-in body runner)."""
        return tuple(self._plugins)

    def extended(self, *plugins: Any) -> HookManager:
        """Return a new manager with this manager's plugins plus the given ones."""
        return HookManager((*self._plugins, *plugins))

    def run_with_hooks(self, command: Any, body: Callable[[], Any]) -> None:
        """Run body once, wrapped in the registered stages.

        Errors raised by the body or by any stage propagate unmodified.
        """
        hook = self._pm.hook
        hook.covenant_before_call(command=command)
        hook.covenant_call(command=command, body=body)
        hook.covenant_after_call(command=command)
        logger.debug("Command body completed", command=type(command).__name__, plugins=len(self._plugins))
