"""Template Engine implementation."""

import json
import time
from collections.abc import Mapping
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from jsont_core.config import EngineConfig
from jsont_core.errors import CompilationError, TemplateError, create_error
from jsont_core.logging import LogConfig, TemplateLogger
from jsont_core.types import ValidationIssue, ValidationResult

from . import parser
from .context import ScopedContext
from .formatters import FormatterRegistry
from .interpreter import Sink, execute
from .locator import FileSystemLocator, TemplateLocator
from .tokenizer import Tokenizer
from .types import CompileOptions, Formatter, Section

_OPTION_FIELDS = frozenset(f.name for f in fields(CompileOptions))


class Template:
    """A compiled template program.

    Immutable once built; one Template can be rendered any number of times,
    from any number of threads. Every render gets its own ScopedContext.
    """

    def __init__(
        self,
        program: Section,
        options: CompileOptions,
        source: str = "",
        name: str | None = None,
        logger: TemplateLogger | None = None,
    ):
        """Initialize template.

        Args:
            program: Root section returned by the compiler
            options: Options the program was compiled with
            source: Template text the program was compiled from
            name: Optional template name used in errors and logs
            logger: Optional logger for render events
        """
        self._program = program
        self._options = options
        self._source = source
        self._name = name
        self._logger = logger

    def __repr__(self) -> str:
        return f"<Template {self._name or '<string>'}>"

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def source(self) -> str:
        return self._source

    @property
    def options(self) -> CompileOptions:
        return self._options

    @property
    def program(self) -> Section:
        return self._program

    @property
    def statement_count(self) -> int:
        """Number of statements in the program, nested ones included."""
        return sum(1 for _ in self._program.iter_statements())

    def render(self, data: Any, sink: Sink) -> None:
        """Expand the template, sending output fragments to ``sink`` in order.

        Args:
            data: Data to expand against; str or bytes are decoded as JSON
            sink: Called once per output fragment

        Raises:
            EvaluationError: If the data is not valid JSON, a name is undefined,
                a formatter fails or a repeated section gets a non-list
        """
        log = self._logger.render(self._name) if self._logger else None
        if log:
            log.started()
        start = time.perf_counter()
        fragment_count = 0

        def counting_sink(fragment: str) -> None:
            nonlocal fragment_count
            fragment_count += 1
            sink(fragment)

        try:
            context = ScopedContext(_decode_data(data))
            execute(self._program.statements(), context, counting_sink)
        except TemplateError as e:
            if log:
                log.failed(e)
            if self._name and e.template_name is None:
                raise e.with_context(template_name=self._name) from e.__cause__
            raise

        if log:
            duration_ms = (time.perf_counter() - start) * 1000
            log.completed(duration_ms, fragment_count)

    def expand(self, data: Any) -> str:
        """Expand the template and return the output as one string."""
        tokens: list[str] = []
        self.render(data, tokens.append)
        return "".join(tokens)

    def tokenstream(self, data: Any) -> list[str]:
        """Expand the template and return the output fragments in order."""
        tokens: list[str] = []
        self.render(data, tokens.append)
        return tokens


def _issue(error: TemplateError, name: str | None, line: int | None) -> ValidationIssue:
    message = f"{error.message}: {error.detail}" if error.detail else error.message
    return ValidationIssue(path=name or "<string>", message=message, line=line)


def _decode_data(data: Any) -> Any:
    if not isinstance(data, (str, bytes, bytearray)):
        return data
    try:
        return json.loads(data)
    # bytes that are not UTF-8 fail before parsing starts
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise create_error("INVALID_DATA", cause=e, error=str(e)) from e


class TemplateEngine:
    """Compile and expand templates.

    Supports:
    - Substitutions: {name}, {name|html}, {@}
    - Sections: {section user}...{or}...{end}
    - Repeated sections: {repeated section items}...{alternates with}...{end}
    - Header options: meta, format-char, default-formatter
    - Comments and keywords: {# comment}, {.space}, {.meta-left}

    Does NOT support:
    - Expressions or arithmetic
    - Control flow beyond presence checks and list iteration
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        formatters: Mapping[str, Formatter] | None = None,
        logger: TemplateLogger | None = None,
        locator: TemplateLocator | None = None,
    ):
        """Initialize template engine.

        Args:
            config: Engine configuration (defaults to EngineConfig())
            formatters: Extra formatters added to the built-ins
            logger: Optional logger for compile and render events
            locator: Optional template locator used by draw()
        """
        self.config = config or EngineConfig()
        self.registry = FormatterRegistry(formatters)
        self.tokenizer = Tokenizer()
        self.logger = logger
        self.locator = locator

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        formatters: Mapping[str, Formatter] | None = None,
    ) -> "TemplateEngine":
        """Build an engine with the logger and locator the configuration describes.

        Args:
            config: Engine configuration
            formatters: Extra formatters added to the built-ins

        Returns:
            Configured TemplateEngine
        """
        logger = None
        if config.logging.enabled:
            logger = TemplateLogger(
                LogConfig(
                    level=config.logging.level,
                    format=config.logging.format,
                    components=asdict(config.logging.components),
                )
            )
        locator = FileSystemLocator(
            config.locator.paths,
            extension=config.locator.extension,
            logger=logger,
        )
        return cls(config=config, formatters=formatters, logger=logger, locator=locator)

    def compile(self, text: str, name: str | None = None, **options: Any) -> Template:
        """Compile template text. The text must not have a header.

        Args:
            text: Template text
            name: Optional template name used in errors and logs
            **options: CompileOptions fields overriding the configured defaults

        Returns:
            Compiled Template

        Raises:
            CompilationError: If the text or the options are invalid
        """
        return self._compile(text, name, self._options(options))

    def from_string(self, text: str, name: str | None = None, **options: Any) -> Template:
        """Compile template text that may start with a header.

        Header options take precedence over ``options``.

        Raises:
            CompilationError: If the header or the body is invalid
        """
        try:
            header, body = parser.parse_header(text)
        except TemplateError as e:
            raise e.with_context(template_name=name) from e.__cause__
        line_offset = text.count("\n") - body.count("\n") if header else 0
        return self._compile(body, name, self._options({**options, **header}), line_offset)

    def from_file(self, path: str | Path, **options: Any) -> Template:
        """Read a UTF-8 template file and compile it with from_string()."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        return self.from_string(text, name=str(path), **options)

    def expand(self, text: str, data: Any, **options: Any) -> str:
        """Compile and expand in one step. Prefer compile() for reused templates."""
        return self.compile(text, **options).expand(data)

    def draw(self, name: str, data: Any) -> str:
        """Locate a template by name, compile it and expand it.

        Raises:
            TemplateNotFound: If there is no locator or it has no such template
        """
        if self.locator is None:
            raise create_error("TEMPLATE_NOT_FOUND", name=name, searched="<no locator>")
        text = self.locator.find(name)
        return self.from_string(text, name=name).expand(data)

    def validate(self, text: str, name: str | None = None, **options: Any) -> ValidationResult:
        """Validate template text (header allowed) without keeping the program.

        Does NOT check that variables exist; that needs data.

        Returns:
            ValidationResult with one error per problem found (compilation
            stops at the first one)
        """
        errors: list[ValidationIssue] = []
        try:
            header, body = parser.parse_header(text)
        except CompilationError as e:
            errors.append(_issue(e, name, e.line))
            return ValidationResult(valid=False, errors=errors)

        line_offset = text.count("\n") - body.count("\n") if header else 0
        try:
            compile_options = self._options({**options, **header})
            parser.compile_template(body, compile_options, self.registry, self.tokenizer)
        except CompilationError as e:
            line = e.line + line_offset if e.line is not None else None
            errors.append(_issue(e, name, line))
        return ValidationResult(valid=not errors, errors=errors)

    def _options(self, overrides: Mapping[str, Any]) -> CompileOptions:
        unknown = set(overrides) - _OPTION_FIELDS
        if unknown:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Unknown compile options: {', '.join(sorted(unknown))}",
            )
        defaults = self.config.compile
        values: dict[str, Any] = {
            "meta": defaults.meta,
            "format_char": defaults.format_char,
            "default_formatter": defaults.default_formatter,
        }
        values.update(overrides)
        return CompileOptions(**values)

    def _compile(
        self,
        text: str,
        name: str | None,
        options: CompileOptions,
        line_offset: int = 0,
    ) -> Template:
        log = self.logger.compile(name) if self.logger else None
        if log:
            log.started(len(text))
        start = time.perf_counter()

        try:
            program = parser.compile_template(text, options, self.registry, self.tokenizer)
        except TemplateError as e:
            line = e.line + line_offset if e.line is not None else None
            error = e.with_context(template_name=name, line=line)
            if log:
                log.failed(error)
            raise error from e.__cause__

        template = Template(program, options, source=text, name=name, logger=self.logger)
        if log:
            duration_ms = (time.perf_counter() - start) * 1000
            log.completed(duration_ms, template.statement_count)
        return template


def compile_template(text: str, **options: Any) -> Template:
    """Compile template text with a fresh engine. The text must not have a header."""
    return TemplateEngine().compile(text, **options)


def expand(text: str, data: Any, **options: Any) -> str:
    """Compile and expand template text with a fresh engine."""
    return TemplateEngine().compile(text, **options).expand(data)
