"""Shared utilities for the template compiler.

This module provides configuration objects, the exception hierarchy,
diagnostic and metrics types, and logging helpers used by every stage.
"""

from .config import (
    CompilerConfig,
    ConfigError,
    ConfigValidationError,
)
from .exceptions import (
    CodeGenerationError,
    CompilerError,
    DirectiveConflictError,
    EmptyTemplateError,
    EvaluatorSyntaxError,
    MultipleRootsError,
    SandboxError,
    SandboxViolationError,
    TagMismatchError,
    TemplateSyntaxError,
    TemplateTooLargeError,
    UndefinedNameError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    CompileMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "CompilerConfig",
    "ConfigError",
    "ConfigValidationError",
    "CodeGenerationError",
    "CompilerError",
    "DirectiveConflictError",
    "EmptyTemplateError",
    "EvaluatorSyntaxError",
    "MultipleRootsError",
    "SandboxError",
    "SandboxViolationError",
    "TagMismatchError",
    "TemplateSyntaxError",
    "TemplateTooLargeError",
    "UndefinedNameError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "CompileMetrics",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
