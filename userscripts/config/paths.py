"""
Storage Locations.

Scripts live in two flat directories derived from the XDG base
directories: local scripts under the data directory, fetched dependencies
under the cache directory.
"""

import os
from pathlib import Path

APP_DIR = "userscripts"
SCRIPTS_DIR = "scripts"


def _xdg_dir(variable: str, fallback: str) -> Path:
    value = os.environ.get(variable)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def script_dir(base: Path) -> Path:
    """Where to store scripts for a given base path."""
    return base / APP_DIR / SCRIPTS_DIR


def default_local_dir() -> Path:
    return script_dir(_xdg_dir("XDG_DATA_HOME", ".local/share"))


def default_cache_dir() -> Path:
    return script_dir(_xdg_dir("XDG_CACHE_HOME", ".cache"))


def default_config_file() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_DIR / "userscripts.toml"
