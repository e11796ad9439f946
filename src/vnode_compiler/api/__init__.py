"""Public compilation API.

Key Components:
    compile_template: Compiles template text into a CompiledTemplate
    CompiledTemplate: Render function plus code, static map and metrics
    CompilerOptions: Node factory, directives, patterns and config
"""

from .compiler import CompiledTemplate, compile, compile_template
from .options import CompilerOptions, NodeFactory

__all__ = [
    "CompiledTemplate",
    "compile",
    "compile_template",
    "CompilerOptions",
    "NodeFactory",
]
