"""Unit tests for built-in formatters and FormatterRegistry."""

import pytest

from jsont_core.errors import BadFormatter
from jsont_core.template.formatters import (
    FORMATTERS,
    FormatterRegistry,
    format_html,
    format_html_attr_value,
    format_raw,
    format_size,
    format_str,
    format_url_param_value,
    format_url_params,
)


class TestBuiltinFormatters:
    """Tests for the built-in formatter functions."""

    def test_html_escapes_markup(self):
        """&, < and > are escaped; quotes are not."""
        assert format_html("<b>Tom & 'Jerry'</b>") == "&lt;b&gt;Tom &amp; 'Jerry'&lt;/b&gt;"

    def test_html_attr_value_escapes_quotes(self):
        """Quotes are escaped for attribute values."""
        assert format_html_attr_value('say "hi" & \'bye\'') == (
            "say &quot;hi&quot; &amp; &#x27;bye&#x27;"
        )

    def test_htmltag_alias(self):
        """htmltag is the attribute-value escaper."""
        assert FORMATTERS["htmltag"] is format_html_attr_value

    def test_raw_identity(self):
        """raw returns its input unchanged."""
        value = ["<b>", 1]
        assert format_raw(value) is value

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (2.5, "2.5"),
            ("text", "text"),
            ([1, "a"], '[1,"a"]'),
            ({"a": [1, 2]}, '{"a":[1,2]}'),
        ],
    )
    def test_str(self, value, expected):
        """str writes scalars plainly and containers as compact JSON."""
        assert format_str(value) == expected

    def test_html_stringifies_first(self):
        """Non-string values are stringified before escaping."""
        assert format_html(7) == "7"

    @pytest.mark.parametrize(
        "value,expected",
        [("abc", 3), ([1, 2], 2), ({"a": 1}, 1), ([], 0)],
    )
    def test_size(self, value, expected):
        """size counts characters or elements."""
        assert format_size(value) == expected

    def test_size_of_number_fails(self):
        """Numbers have no size."""
        with pytest.raises(TypeError):
            format_size(5)

    def test_url_params(self):
        """Mappings become encoded key=value pairs."""
        assert format_url_params({"q": "a b", "page": 2}) == "q=a+b&page=2"

    def test_url_params_single_value(self):
        """Non-mappings are encoded as one value."""
        assert format_url_params("a&b") == "a%26b"

    def test_url_param_value(self):
        """Reserved characters are percent-encoded, spaces become +."""
        assert format_url_param_value("Search query?") == "Search+query%3F"


class TestFormatterRegistry:
    """Tests for FormatterRegistry."""

    @pytest.fixture
    def registry(self):
        """Create FormatterRegistry instance."""
        return FormatterRegistry()

    def test_builtin_names(self, registry):
        """All built-ins are registered."""
        assert registry.names() == sorted(FORMATTERS)
        assert "url-param-value" in registry.names()

    def test_register(self, registry):
        """Registered formatters resolve by name."""
        registry.register("shout", str.upper)

        bound = registry.resolve("shout")
        assert bound.name == "shout"
        assert bound("hey") == "HEY"

    def test_constructor_overrides_builtins(self):
        """Formatters passed in replace built-ins of the same name."""
        registry = FormatterRegistry({"html": str.upper})

        assert registry.get("html") is str.upper
        assert registry.get("raw") is format_raw

    def test_registries_are_independent(self, registry):
        """Registering on one registry does not affect another."""
        registry.register("shout", str.upper)

        assert FormatterRegistry().get("shout") is None
        assert "shout" not in FORMATTERS

    def test_resolver_before_registry(self, registry):
        """The user resolver is consulted first."""
        bound = registry.resolve("html", {"html": str.upper})

        assert bound.func is str.upper

    def test_resolver_miss_falls_back(self, registry):
        """A resolver returning None defers to the registry."""
        bound = registry.resolve("html", lambda name: None)

        assert bound.func is format_html

    def test_unknown_name(self, registry):
        """Unresolvable names raise BadFormatter."""
        with pytest.raises(BadFormatter) as exc_info:
            registry.resolve("bogus")
        assert exc_info.value.code == "BAD_FORMATTER"
        assert exc_info.value.message == "bogus is not a valid formatter"
