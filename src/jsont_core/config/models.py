"""Configuration data models."""

from dataclasses import dataclass, field

from jsont_core.types import LogFormat, LogLevel

DEFAULT_META = "{}"
DEFAULT_FORMAT_CHAR = "|"
DEFAULT_FORMATTER = "str"
DEFAULT_EXTENSION = ".html.jsont"


@dataclass
class CompileConfig:
    """Default compile options for templates without a header."""

    meta: str = DEFAULT_META
    format_char: str = DEFAULT_FORMAT_CHAR
    default_formatter: str | None = DEFAULT_FORMATTER  # None = explicit formatters only


@dataclass
class LoggingComponentsConfig:
    """Per-component logging switches."""

    compile: bool = True
    render: bool = True
    locator: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    enabled: bool = False
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)


@dataclass
class LocatorConfig:
    """Template file lookup configuration."""

    paths: list[str] = field(default_factory=list)  # searched last-to-first
    extension: str = DEFAULT_EXTENSION


@dataclass
class EngineConfig:
    """Root configuration of a TemplateEngine."""

    compile: CompileConfig = field(default_factory=CompileConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    locator: LocatorConfig = field(default_factory=LocatorConfig)
