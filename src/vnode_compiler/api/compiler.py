"""Compiler facade: template text in, reusable render function out.

Pipeline: strip comments, build the node tree, require a single root,
generate the render expression (running the static analysis on the way) and
compile it with the restricted evaluator.

Examples:
    >>> template = compile_template('<p class="greeting">Hello {{ name }}</p>')
    >>> node = template.render(context={"name": "Ada"})
    >>> node.type, node.children[0].children
    ('p', 'Hello Ada')
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vnode_compiler.codegen import CodeGenerator
from vnode_compiler.sandbox import RestrictedFunction, Scope, safer_eval
from vnode_compiler.shared import (
    CompileMetrics,
    CompilerError,
    DiagnosticEntry,
    DiagnosticSeverity,
    EmptyTemplateError,
    MultipleRootsError,
    TemplateTooLargeError,
    get_logger,
)
from vnode_compiler.tokenization import strip_comments
from vnode_compiler.tree import StaticAnalysis, TagTreeBuilder, node_type

from .options import CompilerOptions, NodeFactory

MS_PER_SECOND = 1000


@dataclass
class CompiledTemplate:
    """A compiled template, callable as its own render function.

    ``static_map`` classifies every node of the template tree by position so
    that a caching layer can reuse subtrees that never change.
    """

    code: str
    evaluator: RestrictedFunction
    options: CompilerOptions
    static_map: StaticAnalysis
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: CompileMetrics = field(default_factory=CompileMetrics)
    correlation_id: Optional[str] = None

    def render(
        self,
        h: Optional[NodeFactory] = None,
        context: Any = None,
        **values: Any
    ) -> Any:
        """Render the template into a node tree.

        Args:
            h: Node-construction function; defaults to the one compiled with
            context: Data the template's expressions resolve against; a
                Scope, mapping or object
            **values: Extra values layered over ``context``

        Returns:
            Whatever the outermost ``h`` call returns
        """
        with Scope(values, parent=context) as scope:
            scope.set("h", h if h is not None else self.options.h)
            return self.evaluator(scope)

    __call__ = render

    def to_dict(self) -> Dict[str, Any]:
        """Convert the compilation outcome to a JSON-friendly dictionary."""
        return {
            "code": self.code,
            "static_map": self.static_map.to_dict(),
            "metrics": self.metrics.to_dict(),
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
            "correlation_id": self.correlation_id,
        }


def _single_root(roots: List[Any]) -> Any:
    if not roots:
        raise EmptyTemplateError("Template contains no nodes")
    if len(roots) > 1:
        raise MultipleRootsError([node_type(root) for root in roots])
    return roots[0]


def compile_template(
    template: str,
    options: Optional[CompilerOptions] = None,
    correlation_id: Optional[str] = None
) -> CompiledTemplate:
    """Compile template text into a render function.

    Args:
        template: Template markup with exactly one root node
        options: Compiler options; defaults to ``CompilerOptions()``
        correlation_id: Optional correlation ID for log tracking

    Returns:
        CompiledTemplate wrapping the generated code

    Raises:
        TemplateTooLargeError: If the template exceeds ``max_template_length``
        TagMismatchError: If a closing tag has no matching opening tag
        MultipleRootsError: If the template has more than one root node
        EmptyTemplateError: If the template has no nodes
        DirectiveConflictError: If directives cannot be combined on a node
        EvaluatorSyntaxError: If the generated code is not valid Python
    """
    options = options if options is not None else CompilerOptions()
    config = options.config
    logger = get_logger(__name__, correlation_id, "compiler")
    start_time = time.time()
    template_length = len(template)

    if config.max_template_length is not None and template_length > config.max_template_length:
        raise TemplateTooLargeError(
            f"Template length {template_length} exceeds limit "
            f"{config.max_template_length}"
        )

    logger.info(
        "Starting template compilation",
        extra={"template_length": template_length, "directives": options.directives.names()}
    )

    diagnostics: List[DiagnosticEntry] = []
    comments_stripped = 0
    if config.strip_comments:
        template, comments_stripped = strip_comments(template)
        if comments_stripped:
            diagnostics.append(
                DiagnosticEntry(
                    severity=DiagnosticSeverity.DEBUG,
                    message=f"Stripped {comments_stripped} comments",
                    component="compiler",
                    correlation_id=correlation_id,
                )
            )

    try:
        root = _single_root(TagTreeBuilder(options.h, correlation_id).build(template))
        generator = CodeGenerator(options, correlation_id)
        code = generator.generate(root)
        evaluator = safer_eval(code, config.strict_undefined, correlation_id)
    except CompilerError as e:
        logger.error(
            "Template compilation failed",
            extra={"error_type": type(e).__name__, "error": str(e)}
        )
        raise

    static_map = generator.static_analysis
    diagnostics.extend(generator.diagnostics)
    metrics = CompileMetrics(
        processing_time_ms=(time.time() - start_time) * MS_PER_SECOND,
        template_length=template_length,
        node_count=len(static_map),
        static_node_count=static_map.static_count,
        code_length=len(code),
        comments_stripped=comments_stripped,
    )

    logger.info(
        "Template compilation completed",
        extra={
            "node_count": metrics.node_count,
            "static_node_count": metrics.static_node_count,
            "processing_time_ms": metrics.processing_time_ms,
        }
    )

    return CompiledTemplate(
        code=code,
        evaluator=evaluator,
        options=options,
        static_map=static_map,
        diagnostics=diagnostics,
        metrics=metrics,
        correlation_id=correlation_id,
    )


compile = compile_template  # noqa: A001
