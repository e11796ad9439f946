"""Restricted evaluation of generated render code.

Key Components:
    safer_eval: Compiles an expression into a RestrictedFunction
    RestrictedFunction: Expression evaluated against explicit scopes
    Scope: Data context with own values and an inherited parent chain
    ScopeRewriter: AST pass confining name lookups to the scope
"""

from .evaluator import RestrictedFunction, ScopeResolver, safer_eval
from .scope import RESERVED_KEY, Scope, as_scope
from .transform import ExpressionValidator, ScopeRewriter

__all__ = [
    "RestrictedFunction",
    "ScopeResolver",
    "safer_eval",
    "RESERVED_KEY",
    "Scope",
    "as_scope",
    "ExpressionValidator",
    "ScopeRewriter",
]
