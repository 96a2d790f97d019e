"""Template data values.

All data a template is expanded against has the shape of a decoded JSON
document: null, booleans, numbers, strings, sequences and string-keyed mappings.
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

from .enums import ValueKind

Value: TypeAlias = (
    None | bool | int | float | str | Sequence["Value"] | Mapping[str, "Value"]
)


def is_mapping(value: Any) -> bool:
    """Check if value can own named members."""
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """Check if value is a list-like value. Strings are not sequences."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def kind_of(value: Any) -> ValueKind:
    """Classify a value.

    Args:
        value: Value to classify

    Returns:
        ValueKind of the value

    Raises:
        TypeError: If value is not a supported template value
    """
    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if is_mapping(value):
        return ValueKind.MAPPING
    if is_sequence(value):
        return ValueKind.SEQUENCE
    raise TypeError(f"Unsupported template value of type {type(value).__name__}")
