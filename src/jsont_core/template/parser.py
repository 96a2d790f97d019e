"""Template compilation: directive classification and program building."""

import re
from typing import Any

from jsont_core.errors import CompilationError, create_error
from jsont_core.types import TokenKind

from .formatters import FormatterRegistry
from .tokenizer import Token, Tokenizer, split_meta
from .types import (
    ALTERNATES_CLAUSE,
    OR_CLAUSE,
    CompileOptions,
    FormatterResolver,
    Literal,
    NestedSection,
    Section,
    Substitution,
)

# {section name} or {repeated section name}
SECTION_PATTERN = re.compile(r"^(?:(repeated)\s+)?section\s+(\S+)$")

# Looks like a section directive but is not one: {repeatedsection x}, {section a b}
SECTION_LIKE_PATTERN = re.compile(r"^(?:repeated\s*section|section\s)")

# Header line, e.g. "default-formatter: html"
OPTION_PATTERN = re.compile(r"^([a-zA-Z\-]+):\s*(.*)")
OPTION_NAMES = ("meta", "format-char", "default-formatter")

FORMAT_CHARS = (":", "|")

CLAUSES = (OR_CLAUSE, ALTERNATES_CLAUSE)


class ProgramBuilder:
    """Receives directives from the compiler and builds a tree of Sections."""

    def __init__(
        self,
        registry: FormatterRegistry,
        more_formatters: FormatterResolver | None = None,
    ):
        """Initialize builder with an open root section.

        Args:
            registry: Formatter registry used to resolve formatter names
            more_formatters: User resolver consulted before the registry
        """
        self.current_block = Section()
        self.stack: list[Section] = [self.current_block]
        self._repeated: list[bool] = [False]
        self.registry = registry
        self.more_formatters = more_formatters

    @property
    def depth(self) -> int:
        """Number of sections currently open, not counting the root."""
        return len(self.stack) - 1

    def append(self, text: str) -> None:
        """Append a literal."""
        self.current_block.append(Literal(text))

    def append_substitution(self, name: str, formatters: list[str]) -> None:
        """Append a substitution. Formatters are resolved now, not at render time."""
        bound = tuple(self.registry.resolve(f, self.more_formatters) for f in formatters)
        self.current_block.append(Substitution(name, bound))

    def new_section(self, repeated: bool, section_name: str) -> None:
        """Open a section or repeated section."""
        new_block = Section(section_name)
        self.current_block.append(NestedSection(new_block, repeated))
        self.stack.append(new_block)
        self._repeated.append(repeated)
        self.current_block = new_block

    def new_clause(self, clause: str) -> None:
        """Start a clause ('or', 'alternates with') in the open section."""
        if self.depth == 0:
            raise create_error("ORPHAN_CLAUSE", clause=clause)
        if clause == ALTERNATES_CLAUSE and not self._repeated[-1]:
            raise create_error(
                "CLAUSE_NOT_ALLOWED", clause=clause, section=self.current_block.name
            )
        if self.current_block.has_clause(clause):
            raise create_error("DUPLICATE_CLAUSE", clause=clause, section=self.current_block.name)
        self.current_block.new_clause(clause)

    def end_section(self) -> None:
        """Close the open section and return to its parent."""
        block = self.stack.pop()
        self._repeated.pop()
        block.freeze()
        self.current_block = self.stack[-1]

    def root(self) -> Section:
        """Close and return the root section."""
        root = self.stack[0]
        root.freeze()
        return root


def _keyword_literal(keyword: str, meta_left: str, meta_right: str) -> str | None:
    return {
        "meta-left": meta_left,
        "meta-right": meta_right,
        "space": " ",
        "tab": "\t",
        "newline": "\n",
    }.get(keyword)


def compile_template(
    template_str: str,
    options: CompileOptions | None = None,
    registry: FormatterRegistry | None = None,
    tokenizer: Tokenizer | None = None,
    builder: ProgramBuilder | None = None,
) -> Section:
    """Compile template text into a program (the root Section).

    The text must not contain a header; see parse_header().

    Args:
        template_str: Template body
        options: Compile options (defaults to CompileOptions())
        registry: Formatter registry (defaults to built-ins only)
        tokenizer: Tokenizer whose pattern cache to use
        builder: Something with the ProgramBuilder interface

    Returns:
        Root Section of the compiled program

    Raises:
        CompilationError: BadFormatter, MissingFormatter, ConfigurationError
            or TemplateSyntaxError
    """
    options = options or CompileOptions()
    registry = registry or FormatterRegistry()
    tokenizer = tokenizer or Tokenizer()

    meta_left, meta_right = split_meta(options.meta)

    # : looks like Python format specs {foo:.3f}, | reads like a pipe {name|html}
    if options.format_char not in FORMAT_CHARS:
        raise create_error("BAD_FORMAT_CHAR", format_char=options.format_char)

    if builder is None:
        builder = ProgramBuilder(registry, options.more_formatters)

    # Goes negative on too many {end}, stays positive on a missing {end}
    balance_counter = 0

    for token in tokenizer.tokenize(template_str, meta_left, meta_right):
        if token.kind == TokenKind.LITERAL:
            builder.append(token.text)
            continue

        try:
            balance_counter += _compile_directive(
                token, builder, options, meta_left, meta_right, balance_counter
            )
        except CompilationError as e:
            if e.line is None:
                e.line = token.line
            raise

    if balance_counter != 0:
        raise create_error(
            "TOO_FEW_END",
            meta_left=meta_left,
            meta_right=meta_right,
            section=builder.current_block.name,
        )
    return builder.root()


def _compile_directive(
    token: Token,
    builder: ProgramBuilder,
    options: CompileOptions,
    meta_left: str,
    meta_right: str,
    balance_counter: int,
) -> int:
    """Feed one directive to the builder. Returns the change in section balance."""
    directive = token.text
    if not directive:
        raise create_error("EMPTY_DIRECTIVE", meta_left=meta_left, meta_right=meta_right)

    if directive.startswith("#"):
        return 0

    # {.space}, {.meta-left} ...; other dotted keywords are aliases: {.section x}, {.end}
    if directive.startswith("."):
        keyword = directive[1:]
        literal = _keyword_literal(keyword, meta_left, meta_right)
        if literal is not None:
            builder.append(literal)
            return 0
        directive = keyword

    match = SECTION_PATTERN.match(directive)
    if match:
        builder.new_section(bool(match.group(1)), match.group(2))
        return 1
    if SECTION_LIKE_PATTERN.match(directive):
        raise create_error(
            "MALFORMED_SECTION", directive=directive, meta_left=meta_left, meta_right=meta_right
        )

    if directive in CLAUSES:
        builder.new_clause(directive)
        return 0

    if directive == "end":
        if balance_counter == 0:
            raise create_error("TOO_MANY_END", meta_left=meta_left, meta_right=meta_right)
        builder.end_section()
        if token.had_newline:
            builder.append("\n")
        return -1

    # Now we know the directive is a substitution.
    parts = [part.strip() for part in directive.split(options.format_char)]
    name, formatters = parts[0], parts[1:]
    if not formatters:
        if options.default_formatter is None:
            raise create_error("MISSING_FORMATTER", name=name)
        formatters = [options.default_formatter]

    builder.append_substitution(name, formatters)
    if token.had_newline:
        builder.append("\n")
    return 0


def parse_header(text: str) -> tuple[dict[str, Any], str]:
    """Split optional header options from the template body.

    The format is like HTTP or e-mail headers. The first lines can specify
    options; one blank line must separate them from the body:

        default-formatter: none
        meta: {{}}
        format-char: :

        Template goes here: {{variable:html}}

    Args:
        text: Template text, possibly with a header

    Returns:
        (options, body); option keys use CompileOptions field names and
        'default-formatter: none' becomes None

    Raises:
        CompilationError: If the header is not followed by a blank line
    """
    options: dict[str, Any] = {}
    lines = text.split("\n")
    stop: int | None = None

    for index, line in enumerate(lines):
        match = OPTION_PATTERN.match(line)
        # Accept 'Default-Formatter: raw' like HTTP headers
        name = match.group(1).lower() if match else None
        if name not in OPTION_NAMES:
            stop = index
            break
        value: str | None = match.group(2).strip()
        if name == "default-formatter" and value.lower() == "none":
            value = None
        options[name.replace("-", "_")] = value

    if not options:
        # There were no options, so no blank line is necessary.
        return {}, text

    if stop is None:
        # Text ended inside the header
        raise create_error("HEADER_NO_BLANK_LINE", got=lines[-1], line=len(lines))

    if lines[stop].strip():
        raise create_error("HEADER_NO_BLANK_LINE", got=lines[stop], line=stop + 1)
    return options, "\n".join(lines[stop + 1 :])


def validate_syntax(
    template_str: str,
    options: CompileOptions | None = None,
    registry: FormatterRegistry | None = None,
) -> list[str]:
    """Validate template text without keeping the program.

    Args:
        template_str: Template body
        options: Compile options
        registry: Formatter registry

    Returns:
        List of error messages (empty if valid)
    """
    try:
        compile_template(template_str, options, registry)
    except CompilationError as e:
        return [str(e)]
    return []
