"""Compiler options: the collaborators a template is compiled against."""

import re
import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Pattern, Union

from vnode_compiler.codegen.directives import DirectiveHandler, DirectiveRegistry
from vnode_compiler.shared import CompilerConfig, ConfigValidationError
from vnode_compiler.tokenization import (
    DEFAULT_DATA_BINDING,
    DEFAULT_INTERPOLATION,
    ensure_pattern,
)
from vnode_compiler.tree import create_node

NodeFactory = Callable[..., Any]


@dataclass
class CompilerOptions:
    """Options for compiling a template.

    Attributes:
        h: Node-construction function used to build the parse tree and, unless
            a render call supplies another, the rendered tree
        directives: Registry, or plain mapping of prop name to handler
        interpolation_regex: Pattern capturing the expression of a marker in
            group 1
        data_binding_regex: Pattern matching bound prop keys and capturing the
            target prop name in group 1
        config: Serializable compiler settings
        key_factory: Optional override producing synthetic ``key`` values
    """

    h: NodeFactory = create_node
    directives: Union[DirectiveRegistry, Mapping[str, DirectiveHandler], None] = None
    interpolation_regex: Union[str, Pattern[str]] = DEFAULT_INTERPOLATION
    data_binding_regex: Union[str, Pattern[str]] = DEFAULT_DATA_BINDING
    config: CompilerConfig = field(default_factory=CompilerConfig)
    key_factory: Optional[Callable[[], str]] = None

    def __post_init__(self) -> None:
        """Normalize directives and patterns."""
        if not callable(self.h):
            raise ConfigValidationError("h must be callable", field_name="h")
        self.directives = DirectiveRegistry.coerce(self.directives)
        self.interpolation_regex = self._pattern(
            self.interpolation_regex, "interpolation_regex"
        )
        self.data_binding_regex = self._pattern(
            self.data_binding_regex, "data_binding_regex"
        )

    @staticmethod
    def _pattern(value: Union[str, Pattern[str]], field_name: str) -> Pattern[str]:
        try:
            return ensure_pattern(value)
        except (re.error, ValueError, TypeError) as e:
            raise ConfigValidationError(str(e), field_name=field_name) from e

    def new_key(self) -> str:
        """Produce a unique value for a synthetic ``key`` prop."""
        if self.key_factory is not None:
            return self.key_factory()
        length = self.config.key_length
        return self.config.key_prefix + secrets.token_hex((length + 1) // 2)[:length]
