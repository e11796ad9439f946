"""Code generation from node trees to Python render expressions.

The generated code is a single Python expression built from ``h(...)``
calls, dict literals for props and list literals for children, e.g.::

    h('div', {'class': 'card', 'key': 'vn-key-3f9a0c1d2e4b5a67'}, [
        h('#text', None, 'Hello {}!'.format((name)))])

It is meant to be evaluated by the restricted evaluator with ``h`` and the
template data in scope.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Pattern

from vnode_compiler.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    DirectiveConflictError,
    get_logger,
)
from vnode_compiler.tree import (
    TEXT_NODE,
    StaticAnalysis,
    detect_static_nodes,
    node_children,
    node_props,
    node_type,
    text_of,
)

if TYPE_CHECKING:
    from vnode_compiler.api.options import CompilerOptions


def _escape_format(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def parse_interpolations(source: str, interpolation_regex: Pattern[str]) -> str:
    """Build a Python string expression for ``source`` with markers spliced in.

    Text without markers becomes a plain string literal. Otherwise each
    marker is replaced by a ``{}`` field of a ``str.format`` call whose
    arguments are the captured expressions.

    Example:
        >>> import re
        >>> parse_interpolations('Hi {{ name }}!', re.compile(r'\\{\\{\\s*(.+?)\\s*\\}\\}'))
        "'Hi {}!'.format((name))"
    """
    parts: List[str] = []
    expressions: List[str] = []
    last = 0
    for match in interpolation_regex.finditer(source):
        parts.append(_escape_format(source[last:match.start()]))
        parts.append("{}")
        expressions.append(match.group(1))
        last = match.end()

    if not expressions:
        return repr(source)

    parts.append(_escape_format(source[last:]))
    arguments = ", ".join(f"({expression})" for expression in expressions)
    return f"{''.join(parts)!r}.format({arguments})"


def _single_marker(value: str, interpolation_regex: Pattern[str]) -> Optional[str]:
    """Captured expression when ``value`` is exactly one marker."""
    matches = list(interpolation_regex.finditer(value))
    if len(matches) == 1 and matches[0].span() == (0, len(value)):
        return matches[0].group(1)
    return None


def _value_code(value: Any, interpolation_regex: Pattern[str]) -> str:
    if not isinstance(value, str):
        return repr(value)
    expression = _single_marker(value, interpolation_regex)
    if expression is not None:
        return expression
    return parse_interpolations(value, interpolation_regex)


class CodeGenerator:
    """Generates render expressions for node trees.

    One generator compiles one root; it records the static analysis of that
    root and the diagnostics produced while generating.
    """

    def __init__(
        self, options: "CompilerOptions", correlation_id: Optional[str] = None
    ) -> None:
        self.options = options
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "code_generator")

        self.static_analysis: Optional[StaticAnalysis] = None
        self.diagnostics: List[DiagnosticEntry] = []
        self.keys_injected = 0

    def generate(self, node: Any) -> str:
        """Generate the render expression for ``node``.

        Raises:
            DirectiveConflictError: If a node has several directives while the
                configuration forbids chaining them
        """
        self.static_analysis = detect_static_nodes(node, self.options)
        code = self.compile_node(node)

        if self.keys_injected:
            self._diagnose(
                DiagnosticSeverity.DEBUG,
                f"Injected {self.keys_injected} synthetic key props",
                {"keys_injected": self.keys_injected},
            )
        self.logger.debug(
            "Code generated",
            extra={
                "code_length": len(code),
                "static_nodes": self.static_analysis.static_count,
                "keys_injected": self.keys_injected,
            }
        )
        return code

    def compile_node(self, node: Any) -> str:
        """Generate code for one node and its subtree."""
        if node_type(node) == TEXT_NODE:
            text = parse_interpolations(text_of(node), self.options.interpolation_regex)
            return f"h({TEXT_NODE!r}, None, {text})"
        return self._compile_element(node, dict(node_props(node)))

    def _compile_element(
        self, node: Any, props: Dict[str, Any], outermost: bool = True
    ) -> str:
        directives = self.options.directives.resolve(props)

        if not directives:
            children = ", ".join(self.compile_node(child) for child in node_children(node))
            return f"h({node_type(node)!r}, {self.compile_props(props)}, [{children}])"

        if outermost and len(directives) > 1:
            self._check_multiple(node, [directive.name for directive in directives])

        directive = directives[0]
        value = props[directive.name]
        # Directive props are dropped from a copy; the node itself is untouched
        rest = {key: val for key, val in props.items() if key != directive.name}
        return directive.handler(
            value if isinstance(value, str) else str(value),
            lambda: self._compile_element(node, rest, outermost=False),
        )

    def _check_multiple(self, node: Any, names: List[str]) -> None:
        if self.options.config.multiple_directives == "error":
            raise DirectiveConflictError(node_type(node), names)
        self._diagnose(
            DiagnosticSeverity.INFO,
            f"Chained directives on <{node_type(node)}>: {', '.join(names)}",
            {"node_type": node_type(node), "directives": names},
        )

    def compile_props(self, props: Mapping[str, Any]) -> str:
        """Generate a dict literal for ``props``.

        Bound keys contribute their captured name with the raw value as an
        expression; other values are literals or interpolations. A synthetic
        ``key`` is added when no prop resolves to ``key``.
        """
        binding_regex = self.options.data_binding_regex
        interpolation_regex = self.options.interpolation_regex
        entries: List[str] = []
        has_key = False

        for key, value in props.items():
            binding = binding_regex.search(key)
            if binding:
                name = binding.group(1)
                code = value if isinstance(value, str) else repr(value)
            else:
                name = key
                code = _value_code(value, interpolation_regex)
            has_key = has_key or name == "key"
            entries.append(f"{name!r}: {code}")

        if not has_key:
            entries.append(f"'key': {self.options.new_key()!r}")
            self.keys_injected += 1

        return "{" + ", ".join(entries) + "}"

    def _diagnose(
        self, severity: DiagnosticSeverity, message: str, details: Dict[str, Any]
    ) -> None:
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component="code_generator",
                details=details,
                correlation_id=self.correlation_id,
            )
        )


def compile_node(node: Any, options: "CompilerOptions") -> str:
    """Generate the render expression for ``node`` with ``options``."""
    return CodeGenerator(options).generate(node)


def compile_props(props: Mapping[str, Any], options: "CompilerOptions") -> str:
    """Generate the dict literal for a props mapping with ``options``."""
    return CodeGenerator(options).compile_props(props)
