"""Tree building and static analysis for template markup.

Key Components:
    VNode: Virtual node with type, props and children
    create_node: Default node-construction function
    TagTreeBuilder: Builds node forests from template text
    parse: Module-level shortcut for TagTreeBuilder
    detect_static_nodes: Pure static/dynamic classification pass
    StaticAnalysis: Classification keyed by node position
"""

from .analysis import NodePath, StaticAnalysis, detect_static_nodes, format_path
from .builder import TagTreeBuilder, parse
from .vnode import (
    TEXT_NODE,
    VNode,
    append_child,
    create_node,
    node_children,
    node_props,
    node_type,
    text_of,
)

__all__ = [
    "NodePath",
    "StaticAnalysis",
    "detect_static_nodes",
    "format_path",
    "TagTreeBuilder",
    "parse",
    "TEXT_NODE",
    "VNode",
    "append_child",
    "create_node",
    "node_children",
    "node_props",
    "node_type",
    "text_of",
]
