"""Template error handling - Structured errors with context."""

from .errors import (
    BadFormatter,
    CompilationError,
    ConfigurationError,
    ErrorCategory,
    ErrorTemplate,
    EvaluationError,
    MissingFormatter,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedVariable,
)
from .factory import ErrorFactory, create_error, get_error_factory
from .registry import ErrorRegistry

__all__ = [
    # Core error types
    "TemplateError",
    "ErrorCategory",
    "ErrorTemplate",
    # Compilation errors
    "CompilationError",
    "BadFormatter",
    "MissingFormatter",
    "ConfigurationError",
    "TemplateSyntaxError",
    # Evaluation errors
    "EvaluationError",
    "UndefinedVariable",
    # Lookup errors
    "TemplateNotFound",
    # Registry and factory
    "ErrorRegistry",
    "ErrorFactory",
    # Convenience functions
    "get_error_factory",
    "create_error",
]
