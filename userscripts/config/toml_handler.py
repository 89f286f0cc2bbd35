"""
TOML File I/O.

Settings are read with tomllib and written with tomlkit, which keeps the
field descriptions as comments in the generated file.
"""

import tomllib
from pathlib import Path
from typing import Any

import tomlkit

from userscripts.config.schema import ConfigField


class TOMLError(Exception):
    """Base exception for TOML-related errors."""

    pass


def read_toml(file_path: Path) -> dict[str, Any]:
    """
    Read and parse a TOML file.

    Raises:
        TOMLError: If file cannot be read or parsed
    """
    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise TOMLError(f"Failed to load TOML file {file_path}: {e}") from e


def _field_comments(field: ConfigField) -> list[str]:
    comments = [field.description] if field.description else []
    constraints = [
        f"{name}: {value}"
        for name, value in (
            ("min", field.min),
            ("max", field.max),
            ("choices", field.choices),
        )
        if value is not None
    ]
    if constraints:
        comments.append(f"Constraints: {', '.join(constraints)}")
    return comments


def defaults_document(
    section: str, schema: dict[str, ConfigField]
) -> tomlkit.TOMLDocument:
    """Build a document holding one table of schema defaults, each field commented."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment(f"Configuration for {section}"))
    doc.add(tomlkit.nl())

    table = tomlkit.table()
    for field_name, field in schema.items():
        for comment in _field_comments(field):
            table.add(tomlkit.comment(comment))
        table.add(field_name, field.default)
        table.add(tomlkit.nl())

    doc.add(section, table)
    return doc


def write_toml(file_path: Path, doc: tomlkit.TOMLDocument) -> None:
    """
    Write a document to file_path, creating parent directories.

    Raises:
        TOMLError: If file cannot be written
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    except OSError as e:
        raise TOMLError(f"Failed to write TOML file {file_path}: {e}") from e
