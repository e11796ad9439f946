"""Code generation for virtual node trees.

Key Components:
    CodeGenerator: Generates render expressions and records static analysis
    compile_node: Module-level shortcut for one node
    compile_props: Dict-literal generation for a props mapping
    parse_interpolations: String expression with interpolation markers spliced in
    DirectiveRegistry: Priority-ordered directive handlers
"""

from .directives import (
    DEFAULT_PRIORITY,
    Directive,
    DirectiveHandler,
    DirectiveRegistry,
    default_directives,
    for_directive,
    if_directive,
)
from .generator import (
    CodeGenerator,
    compile_node,
    compile_props,
    parse_interpolations,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "Directive",
    "DirectiveHandler",
    "DirectiveRegistry",
    "default_directives",
    "for_directive",
    "if_directive",
    "CodeGenerator",
    "compile_node",
    "compile_props",
    "parse_interpolations",
]
