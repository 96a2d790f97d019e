"""Property-based tests for template compilation and expansion.

Tests section balancing, scoping, iteration and that data is never
interpreted as template text.
"""

import html

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jsont_core.errors import TemplateSyntaxError, UndefinedVariable
from jsont_core.template import TemplateEngine

# Directive names that are keywords rather than variables
KEYWORDS = {"end", "or"}

names = st.from_regex(r"[a-z]{1,8}", fullmatch=True).filter(lambda s: s not in KEYWORDS)
plain_text = st.text(alphabet=st.characters(blacklist_characters="{}"), max_size=20)
non_empty_values = st.text(min_size=1, max_size=30)

leaves = st.one_of(
    plain_text,
    st.just("{title}"),
    st.just("{.space}"),
    st.just("{# note}"),
)


def wrap_section(args):
    repeated, body, or_body = args
    opener = "{repeated section items}" if repeated else "{section a}"
    if or_body is None:
        return opener + "".join(body) + "{end}"
    return opener + "".join(body) + "{or}" + or_body + "{end}"


# Templates whose sections are always balanced
balanced_templates = st.recursive(
    leaves,
    lambda children: st.tuples(
        st.booleans(),
        st.lists(children, max_size=4),
        st.one_of(st.none(), plain_text),
    ).map(wrap_section),
    max_leaves=15,
)

# Every name a balanced template uses resolves against this data
BALANCED_DATA = {"a": True, "items": [1, 2], "title": "t"}


@pytest.mark.property
class TestSectionBalance:
    """Property tests for section/end balancing."""

    @given(st.lists(balanced_templates, max_size=4))
    @settings(max_examples=200)
    def test_balanced_templates_compile_and_render(self, parts):
        """Balanced templates compile and expand to text."""
        engine = TemplateEngine()
        template = engine.compile("".join(parts))

        assert isinstance(template.expand(BALANCED_DATA), str)

    @given(balanced_templates)
    @settings(max_examples=100)
    def test_extra_end_rejected(self, text):
        """One end too many fails compilation."""
        with pytest.raises(TemplateSyntaxError):
            TemplateEngine().compile(text + "{end}")

    @given(balanced_templates)
    @settings(max_examples=100)
    def test_missing_end_rejected(self, text):
        """An unclosed section fails compilation."""
        with pytest.raises(TemplateSyntaxError):
            TemplateEngine().compile("{section z}" + text)

    @given(st.lists(balanced_templates, max_size=3))
    @settings(max_examples=100)
    def test_recompilation_is_idempotent(self, parts):
        """Compiling the same text twice gives templates with the same output."""
        text = "".join(parts)

        first = TemplateEngine().compile(text).expand(BALANCED_DATA)
        second = TemplateEngine().compile(text).expand(BALANCED_DATA)

        assert first == second


@pytest.mark.property
class TestTemplateInjectionPrevention:
    """Property tests ensuring data is never executed as template code."""

    @given(plain_text)
    @settings(max_examples=100)
    def test_plain_text_unchanged(self, text):
        """Text without metacharacters expands to itself."""
        assert TemplateEngine().expand(text, {}) == text

    @given(non_empty_values)
    @settings(max_examples=200)
    def test_values_are_not_templates(self, value):
        """Values containing directives are written as they are."""
        assert TemplateEngine().expand("{v|raw}", {"v": value}) == value

    @given(non_empty_values)
    @settings(max_examples=200)
    def test_html_formatter_escapes(self, value):
        """html output has no markup characters and decodes to the value."""
        result = TemplateEngine().expand("{v|html}", {"v": value})

        assert "<" not in result
        assert ">" not in result
        assert html.unescape(result) == value


@pytest.mark.property
class TestScoping:
    """Property tests for name resolution."""

    @given(outer=non_empty_values, inner=non_empty_values, name=names)
    @settings(max_examples=100)
    def test_inner_scope_wins(self, outer, inner, name):
        """The nearest scope that defines a name provides it."""
        section = "inner" if name != "inner" else "other"
        data = {name: outer, section: {name: inner}}
        text = f"{{{name}|raw}}/{{section {section}}}{{{name}|raw}}{{end}}"

        assert TemplateEngine().expand(text, data) == f"{outer}/{inner}"

    @given(names, st.dictionaries(names, non_empty_values, max_size=5))
    @settings(max_examples=100)
    def test_undefined_names(self, name, data):
        """Names missing from every scope raise UndefinedVariable."""
        data.pop(name, None)

        with pytest.raises(UndefinedVariable):
            TemplateEngine().expand(f"{{{name}}}", data)


@pytest.mark.property
class TestRepeatedSections:
    """Property tests for list iteration."""

    @given(st.lists(non_empty_values, max_size=10))
    @settings(max_examples=100)
    def test_alternates_with(self, items):
        """Elements are joined by the alternates clause; empty lists use or."""
        text = "{repeated section xs}{@|raw}{alternates with},{or}empty{end}"
        result = TemplateEngine().expand(text, {"xs": items})

        assert result == (",".join(items) if items else "empty")

    @given(st.lists(st.dictionaries(names, non_empty_values, min_size=1), min_size=1))
    @settings(max_examples=50)
    def test_one_output_per_element(self, rows):
        """The default clause runs exactly once per element."""
        text = "{repeated section rows}[{.space}]{end}"

        assert TemplateEngine().expand(text, {"rows": rows}) == "[ ]" * len(rows)

    @given(st.sampled_from(["{}", "[]", "<%%>", "{{}}", "[[]]"]), non_empty_values)
    @settings(max_examples=50)
    def test_any_meta(self, meta, value):
        """Templates behave the same under any metacharacters."""
        half = len(meta) // 2
        left, right = meta[:half], meta[half:]
        text = f"{left}section a{right}{left}b|raw{right}{left}end{right}"

        result = TemplateEngine().expand(text, {"a": {"b": value}}, meta=meta)

        assert result == value
