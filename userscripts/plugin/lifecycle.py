"""
Script Lifecycle.

Runs script hooks in dependency order: init() and enable() from the
dependencies up, disable() from the dependents down.

Every hook call is its own failure domain. A failing hook is reported and
the walk carries on with the next hook or script.
"""

import logging
from collections.abc import Callable
from typing import Any

from userscripts.core.notify import LoggingNotifier, Notifier, report_error
from userscripts.plugin.errors import DisableError, EnableError, HookError, InitError
from userscripts.plugin.graph import topological_sort
from userscripts.plugin.registry import Script, ScriptRegistry

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Walks a resolved registry to enable or disable its scripts."""

    def __init__(self, registry: ScriptRegistry, notifier: Notifier | None = None):
        self.registry = registry
        self.notifier = notifier or LoggingNotifier()

    def order(self) -> list[Script]:
        """
        Registered scripts in dependency order.

        Raises:
            CyclicDependencyError: If scripts depend on each other in a cycle
        """
        scripts = []
        for name in topological_sort(self.registry.dependency_graph()):
            script = self.registry.get(name)
            if script is None:
                logger.warning("Skipping unregistered dependency %s", name)
                continue
            scripts.append(script)
        return scripts

    def dependency_objects(self, script: Script) -> dict[str, Any]:
        """Map each dependency alias to the dependency's loaded module."""
        objects = {}
        for dep_name, edge in (script.dependencies or {}).items():
            dependency = self.registry.get(dep_name)
            if dependency is not None:
                objects[edge.alias] = dependency.handle.module
        return objects

    def enable_all(self) -> None:
        """Initialize and enable every script, dependencies first."""
        for script in self.order():
            handle = script.handle
            if handle.init is not None:
                self._call(
                    InitError, script.name, handle.init, self.dependency_objects(script)
                )
            if handle.enable is not None:
                self._call(EnableError, script.name, handle.enable)

    def disable_all(self) -> None:
        """Disable every script, dependents first."""
        for script in reversed(self.order()):
            if script.handle.disable is not None:
                self._call(DisableError, script.name, script.handle.disable)

    def _call(
        self, error_type: type[HookError], name: str, hook: Callable, *args: Any
    ) -> None:
        logger.debug("%s %s", error_type.phase.capitalize(), name)
        try:
            hook(*args)
        except Exception as e:
            error = error_type(name, str(e))
            error.__cause__ = e
            report_error(self.notifier, error)
