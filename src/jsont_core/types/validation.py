"""Shared validation types for jsont-core."""

from dataclasses import dataclass, field


@dataclass
class ValidationIssue:
    """Single validation issue (error or warning).

    Used by:
    - ConfigLoader (config validation)
    - TemplateEngine (template syntax validation)
    """

    path: str  # e.g., "compile.meta" or a template name
    message: str  # Human-readable description
    severity: str = "error"  # "error" | "warning"
    line: int | None = None  # Line number in template text (if available)


@dataclass
class ValidationResult:
    """Result of validation (config or template)."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure valid is False if there are errors."""
        if self.errors:
            self.valid = False
