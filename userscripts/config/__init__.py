"""
Userscripts Configuration - TOML-based settings.

This module provides:
- The settings schema (directories, fetch timeout, log level)
- Loading and validating the settings file
- Generating a commented default settings file

Example usage:
    from userscripts.config import load_settings

    settings = load_settings()
    print(settings.local_dir)
"""

from dataclasses import dataclass
from pathlib import Path

from userscripts.config.paths import (
    default_cache_dir,
    default_config_file,
    default_local_dir,
)
from userscripts.config.schema import ConfigField, SchemaError, validate_config
from userscripts.config.toml_handler import (
    TOMLError,
    defaults_document,
    read_toml,
    write_toml,
)

SECTION = "userscripts"

SCHEMA: dict[str, ConfigField] = {
    "local_dir": ConfigField(
        str, "", "Directory of local scripts (empty: platform default)"
    ),
    "cache_dir": ConfigField(
        str, "", "Directory for fetched dependencies (empty: platform default)"
    ),
    "fetch_timeout": ConfigField(
        float, 0.0, "Timeout in seconds for each download (0: no timeout)", min=0.0
    ),
    "log_level": ConfigField(
        str,
        "INFO",
        "Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    ),
}


class ConfigError(Exception):
    """Base exception for config API errors."""

    pass


@dataclass
class Settings:
    """
    Loader settings.

    Attributes:
        local_dir: Directory of local scripts
        cache_dir: Directory for fetched dependencies
        fetch_timeout: Download timeout in seconds, None for no timeout
        log_level: Logging level name
    """

    local_dir: Path
    cache_dir: Path
    fetch_timeout: float | None = None
    log_level: str = "INFO"


def load_settings(path: Path | None = None) -> Settings:
    """
    Load settings from a TOML file.

    A missing file or a file without a [userscripts] table yields the
    defaults.

    Args:
        path: Settings file (default: platform config location)

    Returns:
        Settings

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    path = path or default_config_file()
    data = {}

    try:
        if path.exists():
            data = read_toml(path).get(SECTION, {})
            if not isinstance(data, dict):
                raise ConfigError(f"[{SECTION}] must be a table in {path}")
        values = validate_config(data, SCHEMA)
    except (TOMLError, SchemaError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    return Settings(
        local_dir=Path(values["local_dir"]).expanduser()
        if values["local_dir"]
        else default_local_dir(),
        cache_dir=Path(values["cache_dir"]).expanduser()
        if values["cache_dir"]
        else default_cache_dir(),
        fetch_timeout=values["fetch_timeout"] or None,
        log_level=values["log_level"],
    )


def write_default_config(path: Path | None = None) -> Path:
    """
    Write a commented settings file with default values.

    Args:
        path: Destination (default: platform config location)

    Returns:
        Path written

    Raises:
        ConfigError: If the file already exists or cannot be written
    """
    path = path or default_config_file()
    if path.exists():
        raise ConfigError(f"Configuration file already exists: {path}")

    try:
        write_toml(path, defaults_document(SECTION, SCHEMA))
    except TOMLError as e:
        raise ConfigError(str(e)) from e
    return path


__all__ = ["ConfigError", "SCHEMA", "Settings", "load_settings", "write_default_config"]
