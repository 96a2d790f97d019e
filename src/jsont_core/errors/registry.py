"""Error registry for creating errors from templates."""

from typing import Any

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

_COMPILATION = ErrorCategory.COMPILATION
_EVALUATION = ErrorCategory.EVALUATION
_LOOKUP = ErrorCategory.LOOKUP

BUILTIN_TEMPLATES: tuple[ErrorTemplate, ...] = (
    # Compilation
    ErrorTemplate(
        "BAD_FORMATTER",
        _COMPILATION,
        BadFormatter,
        "{formatter} is not a valid formatter",
        suggestion_template="Register the formatter or pass a more_formatters resolver",
    ),
    ErrorTemplate(
        "MISSING_FORMATTER",
        _COMPILATION,
        MissingFormatter,
        "This template requires explicit formatters.",
        detail_template="Substitution '{name}' has no formatter and default-formatter is none",
        suggestion_template="Write the substitution as {{name|formatter}}",
    ),
    ErrorTemplate(
        "META_ODD_LENGTH",
        _COMPILATION,
        ConfigurationError,
        "{meta} has an odd number of metacharacters",
    ),
    ErrorTemplate(
        "BAD_FORMAT_CHAR",
        _COMPILATION,
        ConfigurationError,
        "Only format characters : and | are accepted (got {format_char})",
    ),
    ErrorTemplate(
        "CONFIG_INVALID",
        _COMPILATION,
        ConfigurationError,
        "Configuration is invalid",
        suggestion_template="Check the configuration file against the documented keys",
    ),
    ErrorTemplate(
        "HEADER_NO_BLANK_LINE",
        _COMPILATION,
        CompilationError,
        "Must be one blank line between template options and body (got {got!r})",
    ),
    ErrorTemplate(
        "TOO_MANY_END",
        _COMPILATION,
        TemplateSyntaxError,
        "Got too many {meta_left}end{meta_right} statements",
        detail_template=(
            "You may have mistyped an earlier 'section' or 'repeated section' directive"
        ),
    ),
    ErrorTemplate(
        "TOO_FEW_END",
        _COMPILATION,
        TemplateSyntaxError,
        "Got too few {meta_left}end{meta_right} statements",
        detail_template="Unclosed section: {section}",
    ),
    ErrorTemplate(
        "ORPHAN_CLAUSE",
        _COMPILATION,
        TemplateSyntaxError,
        "'{clause}' clause appears outside of any section",
    ),
    ErrorTemplate(
        "CLAUSE_NOT_ALLOWED",
        _COMPILATION,
        TemplateSyntaxError,
        "'{clause}' clause is only allowed in a repeated section",
        detail_template="Found in section '{section}'",
    ),
    ErrorTemplate(
        "DUPLICATE_CLAUSE",
        _COMPILATION,
        TemplateSyntaxError,
        "'{clause}' clause declared twice in section '{section}'",
    ),
    ErrorTemplate(
        "EMPTY_DIRECTIVE",
        _COMPILATION,
        TemplateSyntaxError,
        "Empty directive {meta_left}{meta_right}",
        suggestion_template="Use {meta_left}.meta-left{meta_right} for a literal delimiter",
    ),
    ErrorTemplate(
        "MALFORMED_SECTION",
        _COMPILATION,
        TemplateSyntaxError,
        "Malformed section directive {meta_left}{directive}{meta_right}",
        suggestion_template=(
            "Write {meta_left}section name{meta_right} or "
            "{meta_left}repeated section name{meta_right}"
        ),
    ),
    # Evaluation
    ErrorTemplate(
        "UNDEFINED_VARIABLE",
        _EVALUATION,
        UndefinedVariable,
        "{name} is not defined",
    ),
    ErrorTemplate(
        "EMPTY_VALUE",
        _EVALUATION,
        UndefinedVariable,
        "Evaluating {name} gave null value",
    ),
    ErrorTemplate(
        "EXPECTED_LIST",
        _EVALUATION,
        EvaluationError,
        "Expected a list; got {type_name}",
        detail_template="Repeated section '{section}'",
    ),
    ErrorTemplate(
        "FORMATTER_FAILED",
        _EVALUATION,
        EvaluationError,
        "Formatting value {value!r} with formatter {formatter} raised exception",
        detail_template="{error}",
    ),
    ErrorTemplate(
        "INVALID_DATA",
        _EVALUATION,
        EvaluationError,
        "Template data is not valid JSON",
        detail_template="{error}",
    ),
    # Lookup
    ErrorTemplate(
        "TEMPLATE_NOT_FOUND",
        _LOOKUP,
        TemplateNotFound,
        "Could not locate template: {name}",
        detail_template="Searched: {searched}",
    ),
    ErrorTemplate(
        "TEMPLATE_NAME_REQUIRED",
        _LOOKUP,
        TemplateNotFound,
        "Template name must not be empty",
    ),
)


def interpolate(text: str | None, context: dict[str, Any]) -> str | None:
    """Fill ``{var}`` placeholders from context.

    Text with a placeholder the context cannot fill is returned unchanged.
    """
    if text is None:
        return None
    try:
        return text.format(**context)
    except (KeyError, IndexError):
        return text


class ErrorRegistry:
    """Maps error codes to templates and builds errors from them."""

    def __init__(self, templates: tuple[ErrorTemplate, ...] = BUILTIN_TEMPLATES) -> None:
        self._by_code = {template.code: template for template in templates}

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Look up the template for an error code, or None."""
        return self._by_code.get(code)

    def list_codes(self) -> list[str]:
        """Every registered error code, in registration order."""
        return list(self._by_code)

    def register(self, template: ErrorTemplate) -> None:
        """Add or replace an error template."""
        self._by_code[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> TemplateError:
        """Build the error for ``code``.

        An explicit ``detail`` in the context wins over the template's
        detail. ``template_name``, ``near`` and ``line`` are copied onto the
        error when present.

        Args:
            code: Error code
            context: Values for the message placeholders
            cause: Original exception, if any

        Returns:
            Instance of the template's error class

        Raises:
            ValueError: If the code is not registered
        """
        template = self._by_code.get(code)
        if template is None:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        values = context or {}
        return template.error_class(
            code=code,
            category=template.category,
            message=interpolate(template.message_template, values) or f"Error {code}",
            detail=values.get("detail") or interpolate(template.detail_template, values),
            suggestion=interpolate(template.suggestion_template, values),
            template_name=values.get("template_name"),
            near=values.get("near"),
            line=values.get("line"),
            cause=cause,
        )
