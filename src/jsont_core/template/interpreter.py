"""Execute compiled programs against data."""

from collections.abc import Callable, Sequence
from contextlib import closing
from typing import Any

from jsont_core.errors import UndefinedVariable, create_error, get_error_factory
from jsont_core.types import is_sequence

from .context import ScopedContext, _type_name
from .formatters import format_str
from .types import (
    ALTERNATES_CLAUSE,
    CURRENT_SCOPE,
    OR_CLAUSE,
    Literal,
    Section,
    Statement,
    Substitution,
)

Sink = Callable[[str], Any]

# Statements shown on either side of a failing one
NEAR_RADIUS = 3


def execute(statements: Sequence[Statement], context: ScopedContext, sink: Sink) -> None:
    """Execute template statements in a ScopedContext.

    Args:
        statements: Statements of one clause
        context: Scope stack for name lookups
        sink: Called with each output fragment, in order
    """
    for i, statement in enumerate(statements):
        if isinstance(statement, Literal):
            sink(statement.text)
            continue
        try:
            if isinstance(statement, Substitution):
                do_substitution(statement, context, sink)
            elif statement.repeated:
                do_repeated_section(statement.section, context, sink)
            else:
                do_section(statement.section, context, sink)
        except UndefinedVariable as e:
            # Innermost clause wins: it is closest to the failure
            if e.near is None:
                start = max(0, i - NEAR_RADIUS)
                e.near = [str(s) for s in statements[start : i + NEAR_RADIUS + 1]]
            raise


def do_substitution(statement: Substitution, context: ScopedContext, sink: Sink) -> None:
    """Variable substitution, e.g. {foo} or {foo|html}."""
    name = statement.name
    # {@} is the current scope: {section is_new}new since {@}{end}
    value = context.current_value() if name == CURRENT_SCOPE else context.lookup(name)

    for formatter in statement.formatters:
        try:
            value = formatter(value)
        except Exception as e:
            # TemplateErrors from formatters pass through unwrapped
            raise get_error_factory().from_exception(
                e, "FORMATTER_FAILED", value=value, formatter=formatter.name
            ) from e

    if not value:
        raise create_error("EMPTY_VALUE", name=name)
    sink(value if isinstance(value, str) else format_str(value))


def do_section(block: Section, context: ScopedContext, sink: Sink) -> None:
    """{section foo}: shown once if foo is present and truthy, else its 'or' clause."""
    with context.section(block.name) as value:
        if value:
            execute(block.statements(), context, sink)
        else:
            # absent, null, false, empty list ...
            execute(block.statements(OR_CLAUSE), context, sink)


def do_repeated_section(block: Section, context: ScopedContext, sink: Sink) -> None:
    """{repeated section foo}: the default clause once per element of foo.

    'alternates with' runs between elements; 'or' runs instead when the list
    is empty or absent.
    """
    if block.name == CURRENT_SCOPE:
        # Stay in the enclosing scope, which must itself be the list
        items = context.current_value()
        if not is_sequence(items):
            raise create_error(
                "EXPECTED_LIST", type_name=_type_name(items), section=block.name
            )
        _repeat(block, items, context, sink)
        return

    with context.section(block.name) as items:
        if items is not None and not is_sequence(items):
            raise create_error(
                "EXPECTED_LIST", type_name=_type_name(items), section=block.name
            )
        _repeat(block, items or (), context, sink)


def _repeat(block: Section, items: Sequence[Any], context: ScopedContext, sink: Sink) -> None:
    if not items:
        execute(block.statements(OR_CLAUSE), context, sink)
        return

    last_index = len(items) - 1
    statements = block.statements()
    alt_statements = block.statements(ALTERNATES_CLAUSE)
    with closing(context.iterate()) as positions:
        for i in positions:
            execute(statements, context, sink)
            if i != last_index:
                execute(alt_statements, context, sink)
