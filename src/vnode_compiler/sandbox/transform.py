"""AST validation and scope rewriting for restricted evaluation.

``ExpressionValidator`` rejects constructs that could bind names, suspend
execution or reach interpreter internals: private and frame attributes,
dunder subscript keys and format strings that look up fields.
``ScopeRewriter`` turns every free name load into an explicit call on the
scope lookup parameter, leaving names bound inside the expression
(comprehension targets, lambda parameters) alone.
"""

import ast
import string
from typing import FrozenSet, List, Set

from vnode_compiler.shared import SandboxViolationError

from .scope import RESERVED_KEY


def _is_dunder(name: str) -> bool:
    return name.startswith("__")


# Frame, code and traceback attributes that lead back to interpreter globals
BLOCKED_ATTRIBUTES: FrozenSet[str] = frozenset({
    "ag_await", "ag_code", "ag_frame",
    "co_code", "cr_await", "cr_code", "cr_frame",
    "f_back", "f_builtins", "f_code", "f_globals", "f_locals",
    "func_code", "func_globals",
    "gi_code", "gi_frame", "gi_yieldfrom",
    "mro", "tb_frame", "tb_next",
})

FORMAT_METHODS: FrozenSet[str] = frozenset({"format", "format_map"})

_formatter = string.Formatter()


def _format_fields_are_plain(template: str) -> bool:
    """Check that every replacement field only selects an argument.

    Fields such as ``{0.attr}`` or ``{0[key]}`` perform attribute and item
    lookups at format time, out of reach of the AST checks.
    """
    try:
        for _, field_name, format_spec, _ in _formatter.parse(template):
            if field_name is None:
                continue
            if "." in field_name or "[" in field_name:
                return False
            if format_spec and "{" in format_spec:
                return False
    except ValueError:
        return False
    return True


class ExpressionValidator(ast.NodeVisitor):
    """Collects every sandbox violation in an expression tree."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def validate(self, tree: ast.AST) -> None:
        """Validate ``tree``.

        Raises:
            SandboxViolationError: If the expression contains forbidden constructs
        """
        self.errors = []
        self.visit(tree)
        if self.errors:
            raise SandboxViolationError(
                f"Expression validation failed: {'; '.join(self.errors)}"
            )

    def visit_Name(self, node: ast.Name) -> None:
        if _is_dunder(node.id):
            self.errors.append(f"Name '{node.id}' is not allowed")

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith("_") or node.attr in BLOCKED_ATTRIBUTES:
            self.errors.append(f"Attribute '{node.attr}' access is not allowed")
        elif node.attr in FORMAT_METHODS:
            self._check_format_receiver(node)
        self.generic_visit(node)

    def _check_format_receiver(self, node: ast.Attribute) -> None:
        receiver = node.value
        if not (isinstance(receiver, ast.Constant) and isinstance(receiver.value, str)):
            self.errors.append(f"'{node.attr}' is only allowed on string literals")
        elif not _format_fields_are_plain(receiver.value):
            self.errors.append(
                f"Format string {receiver.value!r} may only use positional or named fields"
            )

    def visit_Subscript(self, node: ast.Subscript) -> None:
        key = node.slice
        if isinstance(key, ast.Constant) and isinstance(key.value, str) and _is_dunder(key.value):
            self.errors.append(f"Subscript key '{key.value}' is not allowed")
        self.generic_visit(node)

    def visit_NamedExpr(self, node: ast.AST) -> None:
        self.errors.append("Assignment expressions are not allowed")

    def visit_Await(self, node: ast.AST) -> None:
        self.errors.append("Await expressions are not allowed")

    def visit_Yield(self, node: ast.AST) -> None:
        self.errors.append("Yield expressions are not allowed")

    visit_YieldFrom = visit_Yield

    def visit_comprehension(self, node: ast.comprehension) -> None:
        if node.is_async:
            self.errors.append("Async comprehensions are not allowed")
        for target in ast.walk(node.target):
            if isinstance(target, (ast.Attribute, ast.Subscript)):
                self.errors.append("Comprehension targets must be plain names")
                break
        self.generic_visit(node)


def _bound_names(target: ast.AST) -> Set[str]:
    return {node.id for node in ast.walk(target) if isinstance(node, ast.Name)}


class ScopeRewriter(ast.NodeTransformer):
    """Rewrites free name loads into ``__scope__('<name>')`` calls."""

    def __init__(self) -> None:
        self._locals: List[Set[str]] = []

    def _is_local(self, name: str) -> bool:
        return any(name in names for names in self._locals)

    def visit_Name(self, node: ast.Name) -> ast.AST:
        if not isinstance(node.ctx, ast.Load) or self._is_local(node.id):
            return node
        call = ast.Call(
            func=ast.Name(id=RESERVED_KEY, ctx=ast.Load()),
            args=[ast.Constant(value=node.id)],
            keywords=[],
        )
        return ast.copy_location(call, node)

    def visit_Lambda(self, node: ast.Lambda) -> ast.AST:
        arguments = node.args
        # Defaults are evaluated where the lambda is defined
        arguments.defaults = [self.visit(d) for d in arguments.defaults]
        arguments.kw_defaults = [
            self.visit(d) if d is not None else None for d in arguments.kw_defaults
        ]
        names = {
            arg.arg
            for arg in arguments.posonlyargs + arguments.args + arguments.kwonlyargs
        }
        if arguments.vararg is not None:
            names.add(arguments.vararg.arg)
        if arguments.kwarg is not None:
            names.add(arguments.kwarg.arg)

        self._locals.append(names)
        node.body = self.visit(node.body)
        self._locals.pop()
        return node

    def _visit_comprehension(self, node: ast.AST, element_fields: List[str]) -> ast.AST:
        generators = node.generators  # type: ignore[attr-defined]
        # The first iterable is evaluated in the enclosing scope
        generators[0].iter = self.visit(generators[0].iter)

        bound: Set[str] = set()
        self._locals.append(bound)
        for index, generator in enumerate(generators):
            if index:
                generator.iter = self.visit(generator.iter)
            bound.update(_bound_names(generator.target))
            generator.ifs = [self.visit(condition) for condition in generator.ifs]
        for name in element_fields:
            setattr(node, name, self.visit(getattr(node, name)))
        self._locals.pop()
        return node

    def visit_ListComp(self, node: ast.ListComp) -> ast.AST:
        return self._visit_comprehension(node, ["elt"])

    def visit_SetComp(self, node: ast.SetComp) -> ast.AST:
        return self._visit_comprehension(node, ["elt"])

    def visit_GeneratorExp(self, node: ast.GeneratorExp) -> ast.AST:
        return self._visit_comprehension(node, ["elt"])

    def visit_DictComp(self, node: ast.DictComp) -> ast.AST:
        return self._visit_comprehension(node, ["key", "value"])
