"""
Configuration Schema.

This module provides field definitions and validation for the loader
settings.

Key features:
- Type-safe field definitions with constraints
- Integers accepted where floats are expected (TOML writes 10, not 10.0)
- Partial configs: missing fields fall back to their defaults
"""

from dataclasses import dataclass
from typing import Any


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    pass


class ValidationError(SchemaError):
    """Raised when value validation fails."""

    pass


def _matches_type(value: Any, type_: type) -> bool:
    # bool is an int subclass; never let True pass as a number
    if isinstance(value, bool) and type_ is not bool:
        return False
    if type_ is float:
        return isinstance(value, (int, float))
    return isinstance(value, type_)


@dataclass
class ConfigField:
    """
    Represents a configuration field with type and constraints.

    Attributes:
        type_: The expected type of the field value
        default: Default value for the field
        description: Human-readable description
        min: Minimum value (for numbers)
        max: Maximum value (for numbers)
        choices: List of allowed values (optional)
    """

    type_: type
    default: Any
    description: str = ""
    min: Any = None
    max: Any = None
    choices: list[Any] | None = None

    def __post_init__(self):
        """Validate field definition."""
        if not _matches_type(self.default, self.type_):
            raise SchemaError(
                f"Default value {self.default!r} does not match type {self.type_.__name__}"
            )

        if (self.min is not None or self.max is not None) and self.type_ not in (
            int,
            float,
        ):
            raise SchemaError(
                f"min/max constraints only supported for int, float. Got {self.type_.__name__}"
            )

        if self.choices is not None and self.default not in self.choices:
            raise SchemaError(
                f"Default value {self.default!r} not in choices {self.choices}"
            )

    def validate(self, value: Any) -> None:
        """
        Validate a value against this field's constraints.

        Raises:
            ValidationError: If validation fails
        """
        if not _matches_type(value, self.type_):
            raise ValidationError(
                f"Expected type {self.type_.__name__}, got {type(value).__name__}"
            )

        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"Value {value!r} not in allowed choices {self.choices}"
            )

        if self.min is not None and value < self.min:
            raise ValidationError(f"Value {value} is less than minimum {self.min}")
        if self.max is not None and value > self.max:
            raise ValidationError(f"Value {value} is greater than maximum {self.max}")


def validate_config(
    config: dict[str, Any], schema: dict[str, ConfigField]
) -> dict[str, Any]:
    """
    Validate a configuration dictionary against a schema.

    Args:
        config: The configuration dictionary to validate
        schema: The schema dictionary (field_name -> ConfigField)

    Returns:
        The configuration with defaults filled in for missing fields

    Raises:
        ValidationError: If validation fails
    """
    for key in config:
        if key not in schema:
            raise ValidationError(f"Unknown configuration field: {key}")

    values = {}
    for field_name, field in schema.items():
        value = config.get(field_name, field.default)
        try:
            field.validate(value)
        except ValidationError as e:
            raise ValidationError(f"Field '{field_name}': {e}") from e
        values[field_name] = field.type_(value)

    return values
