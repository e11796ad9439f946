"""Static subtree detection.

A subtree is static when its rendered output cannot change between renders:
no directives, no bound props, no interpolated prop values and no
interpolated text anywhere below it. The classification is conservative; any
dynamic signal makes the node and all of its ancestors dynamic.

The pass is pure. Results are keyed by node position, a tuple of child
indexes from the analysed root (``()`` is the root itself, ``(0, 2)`` the
third child of its first child), so they stay meaningful after the parse
tree is discarded.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Tuple

from .vnode import TEXT_NODE, node_children, node_props, node_type, text_of

if TYPE_CHECKING:
    from vnode_compiler.api.options import CompilerOptions

NodePath = Tuple[int, ...]


def format_path(path: NodePath) -> str:
    """Render a node path as ``/``, ``/0``, ``/0/2``..."""
    return "/" + "/".join(str(index) for index in path)


@dataclass
class StaticAnalysis:
    """Static/dynamic classification of every node in one tree."""

    classification: Dict[NodePath, bool] = field(default_factory=dict)

    def is_static(self, path: NodePath = ()) -> bool:
        """Check whether the node at ``path`` is static.

        Raises:
            KeyError: If no node was analysed at ``path``
        """
        return self.classification[tuple(path)]

    def static_paths(self) -> List[NodePath]:
        """Paths of static nodes in document order."""
        return sorted(path for path, static in self.classification.items() if static)

    def dynamic_paths(self) -> List[NodePath]:
        """Paths of dynamic nodes in document order."""
        return sorted(
            path for path, static in self.classification.items() if not static
        )

    @property
    def static_count(self) -> int:
        return sum(1 for static in self.classification.values() if static)

    def __len__(self) -> int:
        return len(self.classification)

    def __contains__(self, path: object) -> bool:
        return path in self.classification

    def __iter__(self) -> Iterator[NodePath]:
        return iter(sorted(self.classification))

    def to_dict(self) -> Dict[str, bool]:
        """Convert to a JSON-friendly mapping of formatted paths."""
        return {format_path(path): self.classification[path] for path in self}


def detect_static_nodes(node: Any, options: "CompilerOptions") -> StaticAnalysis:
    """Classify ``node`` and every descendant as static or dynamic.

    Args:
        node: Root of the subtree to analyse
        options: Compiler options supplying directive names and the
            interpolation and data-binding patterns

    Returns:
        StaticAnalysis keyed by position relative to ``node``
    """
    analysis = StaticAnalysis()
    _classify(node, (), options, analysis)
    return analysis


def _classify(
    node: Any, path: NodePath, options: "CompilerOptions", analysis: StaticAnalysis
) -> bool:
    if node_type(node) == TEXT_NODE:
        static = options.interpolation_regex.search(text_of(node)) is None
    else:
        props = node_props(node)
        # Every child is visited so that the whole subtree gets classified
        children_static = [
            _classify(child, path + (index,), options, analysis)
            for index, child in enumerate(node_children(node))
        ]
        static = (
            not any(key in options.directives for key in props)
            and all(children_static)
            and not any(options.data_binding_regex.search(key) for key in props)
            and not any(
                isinstance(value, str) and options.interpolation_regex.search(value)
                for value in props.values()
            )
        )

    analysis.classification[path] = static
    return static
