"""
Userscripts - Dependency-resolving loader for user-authored scripts.

Scripts are plain Python files in a local directory. A script may declare
remote dependencies through a depends() function; those are downloaded
into a cache directory, loaded, and handed to the script's init().
"""

__version__ = "0.1.0"

from userscripts.plugin.manager import ScriptLoader
from userscripts.plugin.registry import ScriptHandle, ScriptRegistry
from userscripts.plugin.errors import CyclicDependencyError, ScriptError
from userscripts.core.notify import LoggingNotifier, Notifier

__all__ = [
    "__version__",
    "CyclicDependencyError",
    "LoggingNotifier",
    "Notifier",
    "ScriptError",
    "ScriptHandle",
    "ScriptLoader",
    "ScriptRegistry",
]
