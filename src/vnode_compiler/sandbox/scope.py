"""Render scopes: the data a compiled template's expressions resolve against."""

import itertools
import weakref
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple

RESERVED_KEY = "__scope__"

_MISSING = object()
_scope_ids = itertools.count(1)


class Scope:
    """Data context with own values and an inherited parent chain.

    A parent may be another ``Scope``, any mapping, or any object; object
    parents are read through attribute access, so methods come back bound to
    their object. Each scope has a stable ``scope_id`` used to key evaluator
    caches, and those cache entries are dropped when the scope is closed or
    garbage collected.

    Example:
        >>> base = Scope({"title": "Inbox"})
        >>> with base.child(count=3) as scope:
        ...     scope.lookup("title"), scope.lookup("count")
        ('Inbox', 3)
    """

    def __init__(
        self,
        values: Optional[Mapping] = None,
        parent: Any = None,
        **kwargs: Any
    ) -> None:
        self._values: Dict[str, Any] = dict(values or {})
        self._values.update(kwargs)
        self.parent = parent
        self.scope_id = next(_scope_ids)
        self._finalizers: List[weakref.finalize] = []

    def __repr__(self) -> str:
        return f"Scope(id={self.scope_id}, names={sorted(self._values)})"

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __getitem__(self, name: str) -> Any:
        value = self.get(name, _MISSING)
        if value is _MISSING:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name, _MISSING) is not _MISSING

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def set(self, name: str, value: Any) -> None:
        """Set an own value, shadowing any inherited one."""
        self._values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        """Look ``name`` up through own values and parents."""
        return lookup_in_layers(self.layers(), name, default)

    def lookup(self, name: str) -> Any:
        """Look ``name`` up, raising ``KeyError`` when it is missing."""
        return self[name]

    def layers(self) -> Tuple[Any, ...]:
        """Own values followed by every ancestor layer, nearest first."""
        layers: List[Any] = [self._values]
        parent = self.parent
        while parent is not None:
            if isinstance(parent, Scope):
                layers.append(parent._values)
                parent = parent.parent
            else:
                layers.append(parent)
                break
        return tuple(layers)

    def child(self, values: Optional[Mapping] = None, **kwargs: Any) -> "Scope":
        """Create a scope inheriting from this one."""
        return Scope(values, parent=self, **kwargs)

    def on_close(self, finalizer: weakref.finalize) -> None:
        """Register a finalizer to run when this scope is closed."""
        self._finalizers.append(finalizer)

    def close(self) -> None:
        """Release everything cached for this scope."""
        finalizers, self._finalizers = self._finalizers, []
        for finalizer in finalizers:
            finalizer()

    def __enter__(self) -> "Scope":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def lookup_in_layers(layers: Tuple[Any, ...], name: str, default: Any = None) -> Any:
    """Resolve ``name`` against scope layers, nearest first."""
    if name == RESERVED_KEY:
        return default
    for layer in layers:
        if isinstance(layer, Mapping):
            if name in layer:
                return layer[name]
        else:
            value = getattr(layer, name, _MISSING)
            if value is not _MISSING:
                return value
    return default


def as_scope(data: Any) -> Scope:
    """Wrap ``data`` in a ``Scope`` unless it already is one."""
    if isinstance(data, Scope):
        return data
    return Scope(parent=data)
