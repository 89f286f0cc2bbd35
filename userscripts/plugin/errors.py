"""
Script Loader Errors.

Every failure the loader can report is a ScriptError. Each error knows the
subject it concerns (script name, URI or file path) and the phase it
happened in, so notifications read like "EnableError when enabling script foo".

Per-script failures (import, depends, init, enable, disable) are reported
and swallowed. Resolution failures (fetch, write, directory) abort the
current enable cycle.
"""


class ScriptError(Exception):
    """Base exception for script loader errors."""

    phase = "handling"

    def __init__(self, subject: str, message: str = ""):
        self.subject = subject
        super().__init__(message or f"Failed {self.phase} {subject}")

    @property
    def title(self) -> str:
        """Notification title, e.g. 'InitError when initializing script foo'."""
        return f"{type(self).__name__} when {self.phase} {self.subject}"


class ScriptImportError(ScriptError):
    """Raised when a script's top-level code fails while being imported."""

    phase = "loading script"


class DependsError(ScriptError):
    """Raised when a script's depends() hook fails."""

    phase = "reading dependencies of script"


class HookError(ScriptError):
    """Base exception for lifecycle hook failures."""

    pass


class InitError(HookError):
    phase = "initializing script"


class EnableError(HookError):
    phase = "enabling script"


class DisableError(HookError):
    phase = "disabling script"


class ResolutionError(ScriptError):
    """Base exception for failures that abort dependency resolution."""

    pass


class FetchError(ResolutionError):
    """Raised when a dependency URI cannot be read."""

    phase = "retrieving"

    def __init__(self, uri: str, message: str = ""):
        self.uri = uri
        super().__init__(uri, message)


class WriteError(ResolutionError):
    """Raised when a fetched dependency cannot be written to the cache."""

    phase = "writing to file"

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(path, message)


class DirectoryError(ResolutionError):
    """Raised when the cache directory cannot be created or used."""

    phase = "ensuring writable directory"

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(path, message)


class CyclicDependencyError(ScriptError):
    """Raised when the dependency graph contains a cycle."""

    phase = "ordering scripts"

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        path = " -> ".join(cycle)
        super().__init__(path, f"Circular dependency detected: {path}")
