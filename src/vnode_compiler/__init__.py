"""Virtual node template compiler.

Compiles HTML-like template markup with ``{{ expression }}`` interpolation,
bound props and directives into render functions that build virtual node
trees through a caller-supplied node factory.

Progressive API Disclosure:
- Level 1: Simple function - compile_template()
- Level 2: Configured compilation - CompilerOptions and CompilerConfig
- Level 3: Individual stages - parse(), detect_static_nodes(), compile_node(), safer_eval()
"""

__version__ = "0.1.0"
__author__ = "VNode Compiler Team"

# Level 1: Simple compilation
# Level 2: Options and configuration
from .api import CompiledTemplate, CompilerOptions, compile, compile_template

# Level 3: Individual pipeline stages
from .codegen import DirectiveRegistry, compile_node, compile_props, default_directives
from .sandbox import RestrictedFunction, Scope, safer_eval
from .shared import (
    CompilerConfig,
    CompilerError,
    ConfigValidationError,
    DirectiveConflictError,
    EmptyTemplateError,
    EvaluatorSyntaxError,
    MultipleRootsError,
    SandboxViolationError,
    TagMismatchError,
    UndefinedNameError,
)
from .tree import StaticAnalysis, VNode, create_node, detect_static_nodes, parse

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple compilation
    "compile",
    "compile_template",
    "CompiledTemplate",

    # Level 2: Options and configuration
    "CompilerOptions",
    "CompilerConfig",

    # Level 3: Pipeline stages
    "parse",
    "create_node",
    "VNode",
    "detect_static_nodes",
    "StaticAnalysis",
    "compile_node",
    "compile_props",
    "DirectiveRegistry",
    "default_directives",
    "safer_eval",
    "RestrictedFunction",
    "Scope",

    # Errors
    "CompilerError",
    "ConfigValidationError",
    "DirectiveConflictError",
    "EmptyTemplateError",
    "EvaluatorSyntaxError",
    "MultipleRootsError",
    "SandboxViolationError",
    "TagMismatchError",
    "UndefinedNameError",
]
