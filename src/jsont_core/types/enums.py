"""Shared enumerations for jsont-core."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class ValueKind(str, Enum):
    """Shape of a template data value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class TokenKind(str, Enum):
    """Kind of token produced by the tokenizer."""

    LITERAL = "literal"
    DIRECTIVE = "directive"
