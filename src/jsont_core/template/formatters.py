"""Template formatter implementations and the formatter registry."""

import html
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from jsont_core.errors import create_error
from jsont_core.types import is_mapping, is_sequence

from .types import BoundFormatter, Formatter, FormatterResolver


def format_str(value: Any) -> str:
    """Convert a value to text.

    None becomes the empty string, booleans are written the JSON way and
    lists and mappings are written as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if is_mapping(value):
        return json.dumps(dict(value), separators=(",", ":"), default=str)
    if is_sequence(value):
        return json.dumps(list(value), separators=(",", ":"), default=str)
    return str(value)


def format_raw(value: Any) -> Any:
    """Return the value unchanged."""
    return value


def format_html(value: Any) -> str:
    """Escape &, < and > for HTML text. Quotes are left alone."""
    return html.escape(format_str(value), quote=False)


def format_html_attr_value(value: Any) -> str:
    """Escape a value for use inside a quoted HTML attribute."""
    return html.escape(format_str(value), quote=True)


def format_size(value: Any) -> int:
    """Return length of string, or element count of a list or mapping.

    Raises:
        TypeError: If value doesn't support len()
    """
    return len(value)


def format_url_params(value: Any) -> str:
    """Encode a mapping as URL parameters, e.g. {"a": 1, "b": "x y"} -> a=1&b=x+y.

    A value that is not a mapping is encoded as a single parameter value.
    """
    if not is_mapping(value):
        return format_url_param_value(value)
    return "&".join(
        f"{quote_plus(format_str(k))}={quote_plus(format_str(v))}" for k, v in value.items()
    )


def format_url_param_value(value: Any) -> str:
    """Percent-encode one URL parameter value, e.g. 'Search query?' -> 'Search+query%3F'."""
    return quote_plus(format_str(value))


# Built-in formatters
FORMATTERS: dict[str, Formatter] = {
    "html": format_html,
    "html-attr-value": format_html_attr_value,
    "htmltag": format_html_attr_value,
    "raw": format_raw,
    "size": format_size,
    "url-params": format_url_params,
    "url-param-value": format_url_param_value,
    "str": format_str,
}


class FormatterRegistry:
    """Maps formatter names to value transforms.

    Resolution consults the caller's resolver first, then this registry.
    Registration is meant for initialization; programs resolve their
    formatters when compiled, so later registrations only affect later
    compilations.
    """

    def __init__(self, formatters: Mapping[str, Formatter] | None = None):
        """Initialize registry with the built-in formatters.

        Args:
            formatters: Extra formatters; these override built-ins of the same name
        """
        self._formatters: dict[str, Formatter] = dict(FORMATTERS)
        if formatters:
            self._formatters.update(formatters)

    def register(self, name: str, func: Formatter) -> None:
        """Register or replace a formatter."""
        self._formatters[name] = func

    def names(self) -> list[str]:
        """List registered formatter names."""
        return sorted(self._formatters)

    def get(self, name: str) -> Formatter | None:
        return self._formatters.get(name)

    def resolve(
        self, name: str, more_formatters: FormatterResolver | None = None
    ) -> BoundFormatter:
        """Resolve a formatter name.

        Args:
            name: Formatter name as written in the template
            more_formatters: Optional user resolver (callable or mapping)

        Returns:
            BoundFormatter

        Raises:
            BadFormatter: If no formatter has that name
        """
        func: Formatter | None = None
        if more_formatters is not None:
            if isinstance(more_formatters, Mapping):
                func = more_formatters.get(name)
            else:
                func = more_formatters(name)
        if func is None:
            func = self._formatters.get(name)
        if func is None:
            raise create_error("BAD_FORMATTER", formatter=name)
        return BoundFormatter(name, func)
