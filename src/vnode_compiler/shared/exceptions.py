"""Exception hierarchy for template compilation and rendering."""

from typing import List, Optional


class CompilerError(Exception):
    """Base exception for every failure raised by the compiler pipeline."""


class TemplateSyntaxError(CompilerError):
    """Raised when the template markup cannot be turned into a single tree."""


class TagMismatchError(TemplateSyntaxError):
    """Raised when a closing tag has no matching unclosed opening tag."""

    def __init__(self, tag: str, offset: Optional[int] = None) -> None:
        message = f"No corresponding opening tag found for {tag}"
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)
        self.tag = tag
        self.offset = offset


class MultipleRootsError(TemplateSyntaxError):
    """Raised when a template produces more than one root node."""

    def __init__(self, root_types: List[str]) -> None:
        super().__init__(
            f"Template must have exactly one root node, found {len(root_types)} "
            f"({', '.join(root_types)})"
        )
        self.root_types = root_types


class EmptyTemplateError(TemplateSyntaxError):
    """Raised when a template contains no nodes at all."""


class TemplateTooLargeError(CompilerError):
    """Raised when a template exceeds the configured maximum length."""


class CodeGenerationError(CompilerError):
    """Raised when code cannot be generated for a node."""


class DirectiveConflictError(CodeGenerationError):
    """Raised when a node carries several directives and chaining is disabled."""

    def __init__(self, node_type: str, directives: List[str]) -> None:
        super().__init__(
            f"Element <{node_type}> uses multiple directives: {', '.join(directives)}"
        )
        self.node_type = node_type
        self.directives = directives


class SandboxError(CompilerError):
    """Base exception for restricted evaluation failures."""


class EvaluatorSyntaxError(SandboxError):
    """Raised when generated code is not a valid Python expression."""

    def __init__(self, message: str, code: str, lineno: Optional[int] = None,
                 offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.lineno = lineno
        self.offset = offset


class SandboxViolationError(SandboxError):
    """Raised when an expression uses a construct the sandbox does not allow."""


class UndefinedNameError(CompilerError, NameError):
    """Raised at render time when a name is missing from the scope."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Name '{name}' is not defined in the render scope")
        self.name = name
