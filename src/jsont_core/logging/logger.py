"""Template logger - Hierarchical colored logging for compile and render events."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from jsont_core.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from jsont_core.types import LogFormat, LogLevel

COMPONENTS = ("compile", "render", "locator")

LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}

LEVEL_COLORS = {
    LogLevel.DEBUG: LIGHT_BLUE,
    LogLevel.INFO: CYAN,
    LogLevel.WARN: YELLOW,
    LogLevel.ERROR: RED,
}

COMPONENT_COLORS = {
    "compile": MAGENTA,
    "render": CYAN,
    "locator": GREEN,
}

ANONYMOUS = "<string>"


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Enable every component unless told otherwise."""
        if not self.components:
            self.components = dict.fromkeys(COMPONENTS, True)


class TemplateLogger:
    """Main logger facade. Hands out one logger per component."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()

    def compile(self, template_name: str | None) -> "CompileLogger":
        """Get a logger scoped to one compilation.

        Args:
            template_name: Template name (None for anonymous templates)
        """
        return CompileLogger(self, template_name or ANONYMOUS)

    def render(self, template_name: str | None) -> "RenderLogger":
        """Get a logger scoped to one render call.

        Args:
            template_name: Template name (None for anonymous templates)
        """
        return RenderLogger(self, template_name or ANONYMOUS)

    def locator(self) -> "LocatorLogger":
        """Get a logger for template lookups."""
        return LocatorLogger(self)

    def configure(self, config: LogConfig) -> None:
        """Replace the configuration."""
        self.config = config

    def enabled_for(self, level: LogLevel, component: str) -> bool:
        """Check whether a message would be written.

        Args:
            level: Message level
            component: Component name (compile, render, locator)
        """
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.config.level]:
            return False
        return self.config.components.get(component, True)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        if not self.enabled_for(level, component):
            return
        if self.config.format == LogFormat.JSON:
            line = self._format_json(level, component, message, context)
        else:
            line = self._format_colored(level, component, message, context)
        print(line, file=self.config.output)

    def _format_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None,
    ) -> str:
        timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        entry = {
            "timestamp": timestamp,
            "level": level.value,
            "component": component,
            "message": message,
            **(context or {}),
        }
        return json.dumps(entry, default=str)

    def _format_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None,
    ) -> str:
        # [COMPONENT] message {context}
        tag_color = COMPONENT_COLORS.get(component, RESET)
        line = f"{tag_color}[{component.upper()}]{RESET} {LEVEL_COLORS[level]}{message}{RESET}"
        if context and self.config.show_context:
            details = str(context)
            limit = self.config.truncate_at
            if len(details) > limit:
                details = details[:limit] + "..."
            line += f" {LIGHT_BLUE}{details}{RESET}"
        return line


class _ComponentLogger:
    component = ""

    def __init__(self, parent: TemplateLogger, template_name: str | None = None):
        self.parent = parent
        self.template_name = template_name

    def _event(self, level: LogLevel, event: str, message: str, **context: Any) -> None:
        base = {"template_name": self.template_name} if self.template_name else {}
        self.parent._log(level, self.component, message, {**base, "event": event, **context})


class CompileLogger(_ComponentLogger):
    """Logger for compilation events."""

    component = "compile"

    def started(self, length: int) -> None:
        """Log compilation start.

        Args:
            length: Length of the template text
        """
        self._event(
            LogLevel.DEBUG,
            "compile_started",
            f"Compiling template '{self.template_name}'",
            length=length,
        )

    def completed(self, duration_ms: float, statement_count: int) -> None:
        """Log compilation completion.

        Args:
            duration_ms: Compilation duration in milliseconds
            statement_count: Number of statements in the program
        """
        self._event(
            LogLevel.INFO,
            "compile_completed",
            f"Template '{self.template_name}' compiled "
            f"({statement_count} statements, {duration_ms:.2f}ms) ✓",
            duration_ms=duration_ms,
            statement_count=statement_count,
        )

    def failed(self, error: Exception) -> None:
        """Log compilation failure."""
        self._event(
            LogLevel.ERROR,
            "compile_failed",
            f"Template '{self.template_name}' failed to compile: {error}",
            error=str(error),
            error_type=type(error).__name__,
        )


class RenderLogger(_ComponentLogger):
    """Logger for render events."""

    component = "render"

    def started(self) -> None:
        """Log render start."""
        self._event(
            LogLevel.DEBUG, "render_started", f"Rendering template '{self.template_name}'"
        )

    def completed(self, duration_ms: float, fragment_count: int) -> None:
        """Log render completion.

        Args:
            duration_ms: Render duration in milliseconds
            fragment_count: Number of fragments written to the sink
        """
        self._event(
            LogLevel.INFO,
            "render_completed",
            f"Template '{self.template_name}' rendered "
            f"({fragment_count} fragments, {duration_ms:.2f}ms) ✓",
            duration_ms=duration_ms,
            fragment_count=fragment_count,
        )

    def failed(self, error: Exception) -> None:
        """Log render failure, with the statements near it when known."""
        context: dict[str, Any] = {"error": str(error), "error_type": type(error).__name__}
        near = getattr(error, "near", None)
        if near:
            context["near"] = near
        self._event(
            LogLevel.ERROR,
            "render_failed",
            f"Template '{self.template_name}' failed to render: {error}",
            **context,
        )


class LocatorLogger(_ComponentLogger):
    """Logger for template lookups."""

    component = "locator"

    def resolved(self, name: str, path: str) -> None:
        """Log a successful lookup."""
        self._event(
            LogLevel.DEBUG,
            "template_resolved",
            f"Resolved '{name}' -> {path}",
            template_name=name,
            path=path,
        )

    def missing(self, name: str) -> None:
        """Log a failed lookup."""
        self._event(
            LogLevel.WARN,
            "template_missing",
            f"Template '{name}' not found",
            template_name=name,
        )
