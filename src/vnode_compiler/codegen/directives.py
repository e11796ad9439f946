"""Directive registry and built-in control-flow directives.

A directive is a prop name that turns code generation for its element into a
transform. Its handler receives the prop value and a continuation rendering
the element without that directive, and returns the code that replaces the
element's own code.

Directives are resolved by ascending priority, ties broken by registration
order, so resolution never depends on the order props appear in the markup.
The first resolved directive is the outermost transform.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Union

from vnode_compiler.shared import CodeGenerationError

DirectiveHandler = Callable[[str, Callable[[], str]], str]

DEFAULT_PRIORITY = 100
FOR_PRIORITY = 10
IF_PRIORITY = 20

_FOR_EXPRESSION = re.compile(r"^\s*(.+?)\s+in\s+(.+?)\s*$", re.DOTALL)


@dataclass(frozen=True)
class Directive:
    """A registered directive."""

    name: str
    handler: DirectiveHandler
    priority: int = DEFAULT_PRIORITY
    order: int = 0

    @property
    def sort_key(self) -> tuple:
        return (self.priority, self.order)


class DirectiveRegistry:
    """Ordered collection of directives keyed by prop name."""

    def __init__(self, directives: Optional[Mapping[str, DirectiveHandler]] = None) -> None:
        """Initialize registry.

        Args:
            directives: Optional mapping of prop name to handler; entries get
                the default priority, so their insertion order decides
        """
        self._directives: Dict[str, Directive] = {}
        self._counter = 0
        for name, handler in (directives or {}).items():
            self.register(name, handler)

    @classmethod
    def coerce(
        cls, directives: Union["DirectiveRegistry", Mapping[str, DirectiveHandler], None]
    ) -> "DirectiveRegistry":
        """Return ``directives`` as a registry, wrapping plain mappings."""
        if isinstance(directives, DirectiveRegistry):
            return directives
        return cls(directives)

    def register(
        self, name: str, handler: DirectiveHandler, priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Register ``handler`` for the prop ``name``, replacing any previous one."""
        if not name:
            raise ValueError("Directive name cannot be empty")
        if not callable(handler):
            raise TypeError(f"Handler for directive '{name}' must be callable")
        self._directives[name] = Directive(name, handler, priority, self._counter)
        self._counter += 1

    def unregister(self, name: str) -> bool:
        """Remove the directive ``name``; returns whether it was registered."""
        return self._directives.pop(name, None) is not None

    def get(self, name: str) -> Optional[Directive]:
        return self._directives.get(name)

    def resolve(self, props: Mapping[str, object]) -> List[Directive]:
        """Directives present among ``props``, in resolution order."""
        found = [self._directives[key] for key in props if key in self._directives]
        return sorted(found, key=lambda directive: directive.sort_key)

    def names(self) -> List[str]:
        """Registered names in resolution order."""
        return [directive.name for directive in self]

    def __contains__(self, name: object) -> bool:
        return name in self._directives

    def __iter__(self) -> Iterator[Directive]:
        return iter(sorted(self._directives.values(), key=lambda d: d.sort_key))

    def __len__(self) -> int:
        return len(self._directives)


def if_directive(value: str, render_rest: Callable[[], str]) -> str:
    """Render the element only when ``value`` is truthy, otherwise ``None``."""
    return f"({render_rest()}) if ({value}) else None"


def for_directive(value: str, render_rest: Callable[[], str]) -> str:
    """Repeat the element for every item of ``target in iterable``.

    The result is a starred list comprehension, so it can only appear inside
    a parent's children list.
    """
    match = _FOR_EXPRESSION.match(value)
    if match is None:
        raise CodeGenerationError(
            f"Invalid loop expression {value!r}, expected 'target in iterable'"
        )
    target, iterable = match.groups()
    return f"*[{render_rest()} for {target} in {iterable}]"


def default_directives() -> DirectiveRegistry:
    """Create a registry holding the built-in ``for`` and ``if`` directives."""
    registry = DirectiveRegistry()
    registry.register("for", for_directive, FOR_PRIORITY)
    registry.register("if", if_directive, IF_PRIORITY)
    return registry
