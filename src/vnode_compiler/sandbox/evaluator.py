"""Restricted evaluation of generated render expressions.

The expression is compiled into ``lambda __scope__: <expr>`` where every
free name has been rewritten into a ``__scope__('<name>')`` call, and the
lambda is created with empty builtins. Names can therefore only ever resolve
through the scope resolver handed to the function at call time.
"""

import ast
import weakref
from typing import Any, Dict, Optional, Tuple

from vnode_compiler.shared import (
    EvaluatorSyntaxError,
    SandboxViolationError,
    UndefinedNameError,
    get_logger,
)

from .scope import RESERVED_KEY, Scope, as_scope, lookup_in_layers
from .transform import ExpressionValidator, ScopeRewriter

_MISSING = object()
_FILENAME = "<render>"


class ScopeResolver:
    """Name lookup over a snapshot of a scope's layer chain."""

    def __init__(self, layers: Tuple[Any, ...], strict_undefined: bool = True) -> None:
        self.layers = layers
        self.strict_undefined = strict_undefined

    def lookup(self, name: str) -> Any:
        """Resolve ``name``; the reserved resolver key always yields None.

        Raises:
            UndefinedNameError: If ``name`` is missing and lookups are strict
        """
        if name == RESERVED_KEY:
            return None
        value = lookup_in_layers(self.layers, name, _MISSING)
        if value is _MISSING:
            if self.strict_undefined:
                raise UndefinedNameError(name)
            return None
        return value


class RestrictedFunction:
    """Compiled expression evaluated against explicit scopes.

    Resolvers for ``Scope`` objects are cached by ``scope_id`` for as long as
    the scope lives; plain mappings and objects get a fresh resolver per
    call.
    """

    def __init__(
        self,
        code: str,
        strict_undefined: bool = True,
        correlation_id: Optional[str] = None
    ) -> None:
        """Compile ``code``.

        Args:
            code: A Python expression, optionally written as ``return <expr>``
            strict_undefined: Raise for names missing from the scope
            correlation_id: Optional correlation ID for log tracking

        Raises:
            EvaluatorSyntaxError: If ``code`` is not a valid expression
            SandboxViolationError: If ``code`` uses a forbidden construct
        """
        self.code = code
        self.strict_undefined = strict_undefined
        self.logger = get_logger(__name__, correlation_id, "restricted_evaluator")
        self._resolvers: Dict[int, ScopeResolver] = {}
        self._function = self._compile(code)

    def _compile(self, code: str) -> Any:
        try:
            module = ast.parse(code, filename=_FILENAME, mode="exec")
        except SyntaxError as e:
            raise EvaluatorSyntaxError(
                f"Generated code is not valid Python: {e.msg}", code, e.lineno, e.offset
            ) from e

        if len(module.body) != 1 or not isinstance(module.body[0], (ast.Expr, ast.Return)):
            raise SandboxViolationError("Code must be a single expression")
        expression = module.body[0].value
        if expression is None:
            raise SandboxViolationError("Code must return a value")

        ExpressionValidator().validate(expression)
        expression = ScopeRewriter().visit(expression)

        wrapper = ast.parse(f"lambda {RESERVED_KEY}: None", mode="eval")
        wrapper.body.body = expression  # type: ignore[attr-defined]
        ast.fix_missing_locations(wrapper)

        try:
            compiled = compile(wrapper, _FILENAME, "eval")
        except SyntaxError as e:
            raise EvaluatorSyntaxError(
                f"Generated code is not valid Python: {e.msg}", code, e.lineno, e.offset
            ) from e

        self.logger.debug("Expression compiled", extra={"code_length": len(code)})
        return eval(compiled, {"__builtins__": {}})

    def resolver_for(self, scope: Any) -> ScopeResolver:
        """Return the resolver for ``scope``, building it at most once per Scope."""
        if not isinstance(scope, Scope):
            return ScopeResolver(as_scope(scope).layers(), self.strict_undefined)

        resolver = self._resolvers.get(scope.scope_id)
        if resolver is None:
            resolver = ScopeResolver(scope.layers(), self.strict_undefined)
            self._resolvers[scope.scope_id] = resolver
            scope.on_close(
                weakref.finalize(scope, self._resolvers.pop, scope.scope_id, None)
            )
        return resolver

    @property
    def cache_size(self) -> int:
        """Number of scopes with a cached resolver."""
        return len(self._resolvers)

    def __call__(self, scope: Any = None) -> Any:
        """Evaluate the expression against ``scope``."""
        return self._function(self.resolver_for(scope if scope is not None else {}).lookup)


def safer_eval(
    code: str,
    strict_undefined: bool = True,
    correlation_id: Optional[str] = None
) -> RestrictedFunction:
    """Compile ``code`` into a function evaluated against explicit scopes.

    Example:
        >>> evaluate = safer_eval("price * quantity")
        >>> evaluate({"price": 3, "quantity": 4})
        12
    """
    return RestrictedFunction(code, strict_undefined, correlation_id)
