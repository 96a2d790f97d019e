"""Template engine: compile JSON Template text and expand it against data."""

from .context import ScopedContext
from .engine import Template, TemplateEngine, compile_template, expand
from .formatters import FORMATTERS, FormatterRegistry
from .locator import FileSystemLocator, TemplateLocator
from .parser import ProgramBuilder, parse_header, validate_syntax
from .tokenizer import Token, Tokenizer, split_meta
from .types import (
    BoundFormatter,
    CompileOptions,
    Literal,
    NestedSection,
    Section,
    Substitution,
)

__all__ = [
    # Public API
    "TemplateEngine",
    "Template",
    "compile_template",
    "expand",
    "CompileOptions",
    # Formatters
    "FORMATTERS",
    "FormatterRegistry",
    "BoundFormatter",
    # Locators
    "TemplateLocator",
    "FileSystemLocator",
    # Compiler internals
    "Token",
    "Tokenizer",
    "split_meta",
    "ProgramBuilder",
    "parse_header",
    "validate_syntax",
    "Section",
    "Literal",
    "Substitution",
    "NestedSection",
    "ScopedContext",
]
