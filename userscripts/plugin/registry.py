"""
Script Registry.

This module holds the in-memory table of discovered scripts and the
dependency edges they declare.

Key features:
- Optional-capability handles (depends/init/enable/disable slots)
- Additive merge of discovered scripts with an admission predicate
- Lazy, once-only dependency computation per script
- Insertion-ordered storage so graph ordering is deterministic
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from userscripts.core.notify import LoggingNotifier, Notifier, report_error
from userscripts.plugin.errors import DependsError, ScriptImportError
from userscripts.plugin.loader import load_scripts_at
from userscripts.plugin.naming import (
    is_local,
    name_to_uri,
    resolve_dependency_uri,
    uri_to_name,
)

logger = logging.getLogger(__name__)

HOOKS = ("depends", "init", "enable", "disable")


class ScriptOrigin(Enum):
    """Where a script was discovered."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass
class ScriptHandle:
    """
    Loaded script code with independently optional hooks.

    Attributes:
        module: The loaded module object (None if loading failed)
        depends: Returns {alias: uri_or_relative_path}
        init: Receives {alias: dependency_module}
        enable: Called after init
        disable: Called on teardown
    """

    module: Any = None
    depends: Callable[[], Mapping[str, str]] | None = None
    init: Callable[[dict[str, Any]], Any] | None = None
    enable: Callable[[], Any] | None = None
    disable: Callable[[], Any] | None = None

    @classmethod
    def from_module(cls, module: Any) -> "ScriptHandle":
        """Build a handle, keeping only the hooks the module actually defines."""
        hooks = {}
        for hook in HOOKS:
            fn = getattr(module, hook, None)
            hooks[hook] = fn if callable(fn) else None
        return cls(module=module, **hooks)


@dataclass
class DependencyEdge:
    """
    A declared dependency.

    Attributes:
        alias: Name under which the dependent receives the dependency
        uri: Absolute (resolved) URI of the dependency
    """

    alias: str
    uri: str


@dataclass
class Script:
    """
    A discovered script.

    Attributes:
        name: Canonical script name
        handle: Loaded code
        dependencies: dependency name -> edge, None until computed
    """

    name: str
    handle: ScriptHandle = field(default_factory=ScriptHandle)
    dependencies: dict[str, DependencyEdge] | None = None

    @property
    def origin(self) -> ScriptOrigin:
        return ScriptOrigin.LOCAL if is_local(self.name) else ScriptOrigin.REMOTE

    @property
    def uri(self) -> str | None:
        """Source URI for remote scripts, None for local ones."""
        if self.origin is ScriptOrigin.LOCAL:
            return None
        return name_to_uri(self.name)


class ScriptRegistry:
    """
    Registry of scripts for one enable cycle.

    A fresh registry is created on every enable. Scripts are only ever
    added; the first discovery of a name wins.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        loader: Callable[[Path], Mapping[str, Any]] = load_scripts_at,
    ):
        """
        Initialize ScriptRegistry.

        Args:
            notifier: Sink for per-script failures
            loader: Directory -> {name: module} collaborator
        """
        self.notifier = notifier or LoggingNotifier()
        self._loader = loader
        self._scripts: dict[str, Script] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._scripts

    def __getitem__(self, name: str) -> Script:
        return self._scripts[name]

    def __iter__(self):
        return iter(self._scripts.values())

    def __len__(self) -> int:
        return len(self._scripts)

    def get(self, name: str) -> Script | None:
        return self._scripts.get(name)

    def names(self) -> list[str]:
        return list(self._scripts)

    def discover(self, path: Path) -> Mapping[str, Any]:
        """Return the scripts found at path, keyed by file stem."""
        return self._loader(path)

    def merge(
        self, discovered: Mapping[str, Any], predicate: Callable[[str], bool]
    ) -> list[str]:
        """
        Register newly discovered scripts.

        A script is admitted when its name is not registered yet and
        predicate(name) holds. Its module is only read (and therefore
        imported) once admitted. A script whose import fails is still
        registered, with an empty handle.

        Args:
            discovered: name -> module mapping
            predicate: Admission check

        Returns:
            Names of newly registered scripts
        """
        added = []

        for name in discovered:
            if name in self._scripts:
                continue
            if not predicate(name):
                logger.debug("Skipping script %s: not depended upon", name)
                continue

            script = Script(name=name)
            self._scripts[name] = script
            added.append(name)

            try:
                script.handle = ScriptHandle.from_module(discovered[name])
            except ScriptImportError as e:
                report_error(self.notifier, e)
            except Exception as e:
                error = ScriptImportError(name, str(e))
                error.__cause__ = e
                report_error(self.notifier, error)

        if added:
            logger.debug("Registered scripts: %s", ", ".join(added))
        return added

    def is_depended_upon(self, name: str) -> bool:
        """Check whether any registered script depends on name."""
        return any(
            script.dependencies and name in script.dependencies
            for script in self._scripts.values()
        )

    def resolve_dependencies(self) -> None:
        """
        Compute dependency edges for every script that has none yet.

        A failing depends() hook, or one returning anything but a mapping of
        strings to strings, is reported and leaves the script without
        dependencies. Scripts already resolved are never recomputed.
        """
        for script in self._scripts.values():
            if script.dependencies is not None:
                continue
            script.dependencies = {}

            depends = script.handle.depends
            if depends is None:
                continue

            try:
                script.dependencies = self._read_dependencies(script.name, depends)
            except Exception as e:
                error = DependsError(script.name, str(e))
                error.__cause__ = e
                report_error(self.notifier, error)

    def _read_dependencies(
        self, name: str, depends: Callable[[], Mapping[str, str]]
    ) -> dict[str, DependencyEdge]:
        declared = depends()
        if not isinstance(declared, Mapping):
            raise TypeError(
                f"depends() must return a mapping, got {type(declared).__name__}"
            )

        edges = {}
        for alias, declared_uri in declared.items():
            if not isinstance(alias, str) or not isinstance(declared_uri, str):
                raise TypeError(
                    f"Dependency {alias!r}: {declared_uri!r} must map a string "
                    "alias to a string URI"
                )
            uri = resolve_dependency_uri(name, declared_uri)
            edges[uri_to_name(uri)] = DependencyEdge(alias=alias, uri=uri)
        return edges

    def dependency_graph(self) -> dict[str, list[str]]:
        """Project the registry onto {name: [dependency names]}."""
        return {
            script.name: list(script.dependencies or {})
            for script in self._scripts.values()
        }

    def missing_dependencies(self) -> dict[str, str]:
        """
        Build the download queue.

        Returns:
            uri -> dependency name, for every dependency not registered yet
        """
        queue: dict[str, str] = {}
        for script in self._scripts.values():
            for dep_name, edge in (script.dependencies or {}).items():
                if dep_name not in self._scripts:
                    queue[edge.uri] = dep_name
        return queue
