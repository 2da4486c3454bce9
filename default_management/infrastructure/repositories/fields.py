"""Helpers for partial-field updates."""

from enum import Enum
from typing import Any, Sequence
from uuid import UUID


def to_column_value(value: Any) -> Any:
    """Convert a domain attribute value to its column representation."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def column_values(entity: Any, fields: Sequence[str]) -> dict[str, Any]:
    """Collect the named attributes of an entity as column values."""
    return {name: to_column_value(getattr(entity, name)) for name in fields}
