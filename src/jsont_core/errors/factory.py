"""Error factory for creating TemplateErrors."""

from typing import Any

from .errors import TemplateError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates TemplateErrors from codes or wrapped exceptions."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        **kwargs: Any,
    ) -> TemplateError:
        """Create TemplateError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional original exception
            **kwargs: Additional context variables

        Returns:
            TemplateError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context, cause=cause)

    def from_exception(
        self,
        error: BaseException,
        code: str,
        template_name: str | None = None,
        **context: Any,
    ) -> TemplateError:
        """Wrap any exception in a TemplateError.

        TemplateErrors pass through with added context; anything else is
        wrapped under ``code`` and kept as ``cause``.

        Args:
            error: Exception to convert
            code: Error code used for foreign exceptions
            template_name: Optional template name
            **context: Context variables for template interpolation

        Returns:
            TemplateError instance
        """
        if isinstance(error, TemplateError):
            return error.with_context(template_name=template_name)

        context.setdefault("error", f"{type(error).__name__}: {error}")
        if template_name:
            context["template_name"] = template_name
        return self.create(code, context, cause=error)


# Convenience singleton; the registry is read-only after construction
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton.

    Returns:
        Default ErrorFactory instance
    """
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, cause: BaseException | None = None, **context: Any) -> TemplateError:
    """Convenience function to create error.

    Args:
        code: Error code
        cause: Optional original exception
        **context: Context variables for template interpolation

    Returns:
        TemplateError instance
    """
    return get_error_factory().create(code, context, cause=cause)
