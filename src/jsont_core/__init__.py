"""jsont-core - JSON Template engine.

Compile logic-light templates once, expand them against JSON-shaped data:

    from jsont_core import compile_template

    template = compile_template("Hello {name|html}")
    template.expand({"name": "<World>"})  # 'Hello &lt;World&gt;'
"""

from jsont_core.errors import (
    BadFormatter,
    CompilationError,
    ConfigurationError,
    EvaluationError,
    MissingFormatter,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedVariable,
)
from jsont_core.template import (
    CompileOptions,
    FileSystemLocator,
    Template,
    TemplateEngine,
    compile_template,
    expand,
)

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "TemplateEngine",
    "Template",
    "CompileOptions",
    "FileSystemLocator",
    "compile_template",
    "expand",
    "TemplateError",
    "CompilationError",
    "BadFormatter",
    "MissingFormatter",
    "ConfigurationError",
    "TemplateSyntaxError",
    "EvaluationError",
    "UndefinedVariable",
    "TemplateNotFound",
]
