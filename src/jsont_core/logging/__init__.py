"""Template logging - Hierarchical colored logging for compile and render events."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    CompileLogger,
    LocatorLogger,
    LogConfig,
    RenderLogger,
    TemplateLogger,
)

__all__ = [
    # Logger classes
    "TemplateLogger",
    "CompileLogger",
    "RenderLogger",
    "LocatorLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
