"""Template error types."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    COMPILATION = "COMPILATION"
    EVALUATION = "EVALUATION"
    LOOKUP = "LOOKUP"


@dataclass(eq=False)
class TemplateError(Exception):
    """Structured error with context. Base exception for all template errors."""

    # Identity
    code: str  # e.g., "BAD_FORMATTER"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    template_name: str | None = None  # Which template failed
    near: list[str] | None = None  # Statements around the failure
    line: int | None = None  # Line in the template text

    # Original exception (wrapped formatter failures)
    cause: BaseException | None = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        text = self.message
        if self.line is not None:
            text += f" (line {self.line})"
        if self.detail:
            text += f": {self.detail}"
        if self.near:
            text += "\n\nNear: " + " ".join(self.near)
        return text

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and API responses.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "template_name": self.template_name,
            "near": self.near,
            "line": self.line,
            "timestamp": self.timestamp.isoformat(),
            "cause": repr(self.cause) if self.cause else None,
        }

    def with_context(
        self,
        template_name: str | None = None,
        line: int | None = None,
    ) -> "TemplateError":
        """Return copy with additional context.

        The copy keeps the concrete exception class.

        Args:
            template_name: Optional template name
            line: Optional line in the template text

        Returns:
            New error instance with updated context
        """
        return replace(
            self,
            template_name=template_name or self.template_name,
            line=line if line is not None else self.line,
        )


class CompilationError(TemplateError):
    """Error raised while compiling template text into a program."""


class BadFormatter(CompilationError):
    """A formatter name could not be resolved, e.g. {variable|BAD}."""


class MissingFormatter(CompilationError):
    """A substitution has no formatter and no default formatter is configured."""


class ConfigurationError(CompilationError):
    """Compile options or configuration are invalid."""


class TemplateSyntaxError(CompilationError):
    """Syntax error in the template text."""


class EvaluationError(TemplateError):
    """Error raised while expanding a program against data."""


class UndefinedVariable(EvaluationError):
    """The template references a name the data does not define."""


class TemplateNotFound(TemplateError):
    """A template could not be located by name."""


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    error_class: type[TemplateError]
    message_template: str  # "'{formatter}' is not a valid formatter"
    detail_template: str | None = None
    suggestion_template: str | None = None
