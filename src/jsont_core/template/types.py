"""Template type definitions: compile options and the program AST."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

from jsont_core.config.models import DEFAULT_FORMAT_CHAR, DEFAULT_FORMATTER, DEFAULT_META

# Clause names
DEFAULT_CLAUSE = "default"
OR_CLAUSE = "or"
ALTERNATES_CLAUSE = "alternates with"

# Section / substitution name meaning "the current scope value"
CURRENT_SCOPE = "@"

Formatter: TypeAlias = Callable[[Any], Any]
FormatterResolver: TypeAlias = Callable[[str], Formatter | None] | Mapping[str, Formatter]


@dataclass(frozen=True)
class CompileOptions:
    """Options controlling how template text is compiled.

    Header keys map onto fields: ``meta``, ``format-char`` -> ``format_char``,
    ``default-formatter`` -> ``default_formatter``.
    """

    meta: str = DEFAULT_META
    format_char: str = DEFAULT_FORMAT_CHAR
    default_formatter: str | None = DEFAULT_FORMATTER  # None = explicit formatters only
    more_formatters: FormatterResolver | None = None  # consulted before built-ins


@dataclass(frozen=True)
class BoundFormatter:
    """A formatter resolved at compile time, kept with the name it was written as."""

    name: str
    func: Formatter

    def __call__(self, value: Any) -> Any:
        return self.func(value)


@dataclass(frozen=True)
class Literal:
    """Text copied verbatim to the output."""

    text: str

    def __str__(self) -> str:
        return repr(self.text)


@dataclass(frozen=True)
class Substitution:
    """A variable looked up at render time and passed through formatters."""

    name: str
    formatters: tuple[BoundFormatter, ...]

    def __str__(self) -> str:
        return "{" + "|".join([self.name, *(f.name for f in self.formatters)]) + "}"


@dataclass(frozen=True)
class NestedSection:
    """A child section, shown once or repeated per list element."""

    section: "Section"
    repeated: bool = False

    def __str__(self) -> str:
        kind = "Repeated Section" if self.repeated else "Section"
        return f"<{kind} {self.section.name}>"


Statement: TypeAlias = Literal | Substitution | NestedSection


class Section:
    """A (repeated) section: named clauses of ordered statements.

    Statements are appended to the current clause while the template is being
    compiled. ``freeze()`` is called when the section's end directive is seen;
    afterwards the section is read-only.
    """

    def __init__(self, name: str | None = None):
        self.name = name
        self._clauses: dict[str, list[Statement]] = {DEFAULT_CLAUSE: []}
        self._current = DEFAULT_CLAUSE
        self._frozen: Mapping[str, tuple[Statement, ...]] | None = None

    def __repr__(self) -> str:
        return f"<Block {self.name}>"

    @property
    def closed(self) -> bool:
        return self._frozen is not None

    @property
    def current_clause(self) -> str:
        return self._current

    @property
    def clauses(self) -> Mapping[str, tuple[Statement, ...]]:
        if self._frozen is not None:
            return self._frozen
        return MappingProxyType({k: tuple(v) for k, v in self._clauses.items()})

    def has_clause(self, clause: str) -> bool:
        return clause in self.clauses

    def statements(self, clause: str = DEFAULT_CLAUSE) -> tuple[Statement, ...]:
        """Statements of a clause; a clause that was never declared is empty."""
        return self.clauses.get(clause, ())

    def new_clause(self, clause: str) -> None:
        self._check_open()
        self._clauses[clause] = []
        self._current = clause

    def append(self, statement: Statement) -> None:
        self._check_open()
        self._clauses[self._current].append(statement)

    def freeze(self) -> None:
        if self._frozen is None:
            self._frozen = MappingProxyType({k: tuple(v) for k, v in self._clauses.items()})

    def iter_statements(self):
        """Yield every statement of this section and its children, depth first."""
        for statements in self.clauses.values():
            for statement in statements:
                yield statement
                if isinstance(statement, NestedSection):
                    yield from statement.section.iter_statements()

    def _check_open(self) -> None:
        if self._frozen is not None:
            raise RuntimeError(f"{self!r} is closed")
