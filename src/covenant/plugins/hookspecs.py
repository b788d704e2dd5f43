# src/covenant/plugins/hookspecs.py
"""pluggy hook specifications for command execution stages.

Hook plugins wrap a command body with before / around / after stages.
The contract engine only hands the body to the hook runner; it never
controls how the stages compose.

Usage (implementing a hook plugin):
    from covenant.plugins.hookspecs import hookimpl

    class AuditHooks:
        @hookimpl
        def covenant_before_call(self, command):
            command.audit_log.append("start")

        @hookimpl(wrapper=True)
        def covenant_call(self, command, body):
            command.audit_log.append("around:in")
            result = yield
            command.audit_log.append("around:out")
            return result

        @hookimpl
        def covenant_after_call(self, command):
            command.audit_log.append("end")

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from collections.abc import Callable
from typing import Any

import pluggy

# Project name for pluggy
PROJECT_NAME = "covenant"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for plugins to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CovenantCommandSpec:
    """Hook specifications for the stages around a command body."""

    @hookspec
    def covenant_before_call(self, command: Any) -> None:
        """Run before the command body.

        Args:
            command: The command instance about to execute
        """

    @hookspec(firstresult=True)
    def covenant_call(self, command: Any, body: Callable[[], Any]) -> Any:
        """Run the command body.

        Implement with ``@hookimpl(wrapper=True)`` to add an *around* stage.
        A built-in trylast implementation invokes ``body`` exactly once.

        Args:
            command: The command instance
            body: Zero-argument callable running the command's logic

        Returns:
            A non-None marker once the body has run
        """

    @hookspec
    def covenant_after_call(self, command: Any) -> None:
        """Run after the command body completed without raising.

        Args:
            command: The command instance that just executed
        """
