"""Tag tree builder turning template text into a forest of virtual nodes.

The builder keeps a stack of in-progress nodes. Opening tags and text runs
are pushed; a closing tag pops everything above its matching unclosed
opener and appends it, in document order, as that opener's children.
Whatever is left on the stack at the end is the forest.
"""

from typing import Any, Callable, List, Optional, Set

from vnode_compiler.shared import TagMismatchError, get_logger
from vnode_compiler.tokenization import TagToken, next_tag

from .vnode import TEXT_NODE, append_child, create_node, node_type

NodeFactory = Callable[..., Any]


class TagTreeBuilder:
    """Builds node forests from template text.

    Nodes are never instantiated directly: every node comes from the
    node-construction function, and the builder only manages containment.
    """

    def __init__(
        self,
        h: NodeFactory = create_node,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            h: Node-construction function ``h(type, props, children=None)``
            correlation_id: Optional correlation ID for log tracking
        """
        self.h = h
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tag_tree_builder")

        # Statistics of the most recent build
        self.nodes_created = 0
        self.text_nodes_created = 0
        self.tags_closed = 0

    def build(self, template: str) -> List[Any]:
        """Parse ``template`` into an ordered list of root nodes.

        Args:
            template: Template markup, comments already removed

        Returns:
            Root-level nodes in document order

        Raises:
            TagMismatchError: If a closing tag has no matching unclosed opener
        """
        self._reset_state()
        stack: List[Any] = []
        closed: Set[int] = set()
        pos = 0

        while pos < len(template):
            tag = next_tag(template, pos)
            text_end = tag.start if tag is not None else len(template)
            if text_end > pos:
                self._push_text(stack, closed, template[pos:text_end])

            if tag is None:
                break

            if tag.is_closing:
                self._close(stack, closed, tag)
            else:
                node = self.h(tag.name, tag.props)
                self.nodes_created += 1
                if tag.is_self_closing:
                    closed.add(id(node))
                stack.append(node)

            pos = tag.end

        self.logger.debug(
            "Template parsed",
            extra={
                "root_count": len(stack),
                "nodes_created": self.nodes_created,
                "text_nodes_created": self.text_nodes_created,
            }
        )
        return stack

    def _reset_state(self) -> None:
        self.nodes_created = 0
        self.text_nodes_created = 0
        self.tags_closed = 0

    def _push_text(self, stack: List[Any], closed: Set[int], text: str) -> None:
        content = text.strip()
        if content:
            node = self.h(TEXT_NODE, None, content)
            closed.add(id(node))
            stack.append(node)
            self.nodes_created += 1
            self.text_nodes_created += 1

    def _close(self, stack: List[Any], closed: Set[int], tag: TagToken) -> None:
        content: List[Any] = []
        while stack and (node_type(stack[-1]) != tag.name or id(stack[-1]) in closed):
            content.append(stack.pop())

        if not stack:
            self.logger.error(
                "Closing tag without opening tag",
                extra={"tag": tag.raw, "offset": tag.start}
            )
            raise TagMismatchError(tag.raw, tag.start)

        container = stack[-1]
        for child in reversed(content):
            append_child(container, child)
        closed.add(id(container))
        self.tags_closed += 1


def parse(template: str, h: NodeFactory = create_node) -> List[Any]:
    """Parse template text into a forest of nodes built with ``h``.

    Example:
        >>> roots = parse('<ul><li>one</li><li>two</li></ul>')
        >>> [child.type for child in roots[0].children]
        ['li', 'li']
    """
    return TagTreeBuilder(h).build(template)
