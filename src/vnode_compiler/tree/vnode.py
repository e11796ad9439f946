"""Virtual node data model and the default node-construction function."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

TEXT_NODE = "#text"


@dataclass(eq=False)
class VNode:
    """Lightweight description of an element or a text run.

    Element nodes hold their children as a list; text nodes hold the text
    itself in ``children`` and keep the raw value in ``node_value``.
    """

    type: str
    props: Optional[Dict[str, Any]] = None
    children: Union[List["VNode"], str] = field(default_factory=list)
    node_value: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.type:
            raise ValueError("Node type cannot be empty")

    @property
    def is_text(self) -> bool:
        """Check if this node is a text run."""
        return self.type == TEXT_NODE

    def append(self, child: "VNode") -> None:
        """Append a child node in document order."""
        if self.is_text:
            raise TypeError("Text nodes cannot have child nodes")
        self.children.append(child)  # type: ignore[union-attr]

    def iter_nodes(self) -> Iterator["VNode"]:
        """Iterate over this node and all descendants in document order."""
        yield self
        if not self.is_text:
            for child in self.children:
                yield from child.iter_nodes()

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        if self.is_text:
            return {"type": self.type, "props": None, "children": self.children}
        return {
            "type": self.type,
            "props": dict(self.props or {}),
            "children": [child.to_dict() for child in self.children],
        }


def _field(node: Any, name: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def node_type(node: Any) -> Any:
    """Type of a node built by any node-construction function.

    Nodes may be objects exposing ``type``, ``props`` and ``children``
    attributes or mappings holding those keys.
    """
    return _field(node, "type")


def node_props(node: Any) -> Dict[str, Any]:
    """Props of a node, empty when it has none."""
    return _field(node, "props") or {}


def node_children(node: Any) -> List[Any]:
    """Child nodes of an element node, empty when it has none."""
    children = _field(node, "children")
    if children is None or isinstance(children, str):
        return []
    return list(children)


def append_child(container: Any, child: Any) -> None:
    """Append ``child`` to an element node built by any factory."""
    append = getattr(container, "append", None)
    if append is not None and not isinstance(container, Mapping):
        append(child)
        return
    children = _field(container, "children")
    if children is None:
        children = []
        if isinstance(container, Mapping):
            container["children"] = children  # type: ignore[index]
        else:
            container.children = children
    children.append(child)


def text_of(node: Any) -> str:
    """Raw text of a text node built by any node-construction function."""
    value = _field(node, "node_value")
    if value is None:
        children = _field(node, "children")
        value = children if isinstance(children, str) else ""
    return value


def create_node(
    type: str,
    props: Optional[Dict[str, Any]] = None,
    children: Union[List[VNode], str, None] = None,
) -> VNode:
    """Default ``h``: build a ``VNode`` from a type, props and children.

    Args:
        type: Tag name, or ``"#text"`` for a text run
        props: Attribute mapping; ignored for text nodes
        children: Child nodes, or the text of a text node

    Returns:
        New VNode instance
    """
    if type == TEXT_NODE:
        text = "" if children is None else str(children)
        return VNode(type=TEXT_NODE, props=None, children=text, node_value=text)

    flat: List[VNode] = []
    for child in children or []:
        # Loop directives may splice lists of nodes into the children list
        if isinstance(child, list):
            flat.extend(c for c in child if c is not None)
        elif child is not None:
            flat.append(child)
    return VNode(type=type, props=dict(props or {}), children=flat)
