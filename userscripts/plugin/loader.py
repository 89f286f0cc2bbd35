"""
Dynamic Script Loader.

This module turns a directory of script files into importable modules.

Key features:
- importlib integration for dynamic loading
- Lazy import: a script's code runs only when its entry is first read
- Fresh import on every load, so a new enable cycle sees edited scripts
"""

import hashlib
import importlib.util
import logging
import re
import sys
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import ModuleType

from userscripts.plugin.errors import ScriptImportError
from userscripts.plugin.naming import SCRIPT_SUFFIX

logger = logging.getLogger(__name__)

MODULE_PREFIX = "userscripts_script_"


def module_name_for(script_name: str) -> str:
    """
    Name under which a script is registered in sys.modules.

    The readable part alone is ambiguous ("a-b" and "a_b" both become
    "a_b"), so a digest of the full name is appended.
    """
    readable = re.sub(r"\W", "_", script_name)
    digest = hashlib.sha256(script_name.encode("utf-8")).hexdigest()
    return f"{MODULE_PREFIX}{readable}_{digest}"


class ScriptModules(Mapping[str, ModuleType]):
    """
    Read-only mapping of script name -> module for one directory.

    Keys are the stems of the script files found in the directory, in sorted
    order. Values are imported on first access and kept for the lifetime of
    the mapping.
    """

    def __init__(self, directory: Path):
        self.directory = directory
        self._paths: dict[str, Path] = {}
        self._modules: dict[str, ModuleType] = {}

        if directory.is_dir():
            for path in sorted(directory.glob(f"*{SCRIPT_SUFFIX}")):
                if path.is_file():
                    self._paths[path.stem] = path

    def __getitem__(self, name: str) -> ModuleType:
        if name not in self._modules:
            self._modules[name] = load_script_module(name, self._paths[name])
        return self._modules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, name: object) -> bool:
        return name in self._paths


def load_script_module(script_name: str, path: Path) -> ModuleType:
    """
    Import a single script file.

    Args:
        script_name: Name of the script
        path: Path to the script file

    Returns:
        Loaded module

    Raises:
        KeyError: If the file does not exist
        ScriptImportError: If the script cannot be imported
    """
    if not path.is_file():
        raise KeyError(script_name)

    module_name = module_name_for(script_name)
    logger.debug("Importing script %s from %s", script_name, path)

    try:
        spec = importlib.util.spec_from_file_location(module_name, path)

        if spec is None or spec.loader is None:
            raise ScriptImportError(
                script_name, f"Failed to create module spec for {path}"
            )

        module = importlib.util.module_from_spec(spec)

        # Add to sys.modules before execution
        sys.modules[module_name] = module

        spec.loader.exec_module(module)
        return module

    except Exception as e:
        # Clean up sys.modules on failure
        sys.modules.pop(module_name, None)

        if isinstance(e, ScriptImportError):
            raise
        raise ScriptImportError(script_name, f"Failed to import script: {e}") from e


def load_scripts_at(directory: Path) -> ScriptModules:
    """
    List the scripts in a directory.

    A missing directory simply has no scripts.

    Args:
        directory: Directory to scan

    Returns:
        Lazy mapping of script name -> module
    """
    return ScriptModules(Path(directory))
