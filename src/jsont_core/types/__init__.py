"""Shared types for jsont-core.

Import from here rather than submodules:
    from jsont_core.types import LogLevel, Value, kind_of
"""

from .enums import LogFormat, LogLevel, TokenKind, ValueKind
from .validation import ValidationIssue, ValidationResult
from .values import Value, is_mapping, is_sequence, kind_of

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "TokenKind",
    "ValueKind",
    # Values
    "Value",
    "kind_of",
    "is_mapping",
    "is_sequence",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
