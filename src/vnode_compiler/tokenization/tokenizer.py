"""Tag scanning over template text.

The scanner does not build a token list up front; the tree builder pulls one
tag at a time with ``next_tag`` and treats everything between two tags as a
text run.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Tuple, Union

from .patterns import ANY_TAG, ATTRIBUTES, COMMENTS, END_TAG, OPENING_TAG

PropValue = Union[str, bool]


class TagKind(Enum):
    """Kinds of tags recognised by the scanner."""

    OPENING = auto()        # <div ...>
    SELF_CLOSING = auto()   # <br ... />
    CLOSING = auto()        # </div>


@dataclass(frozen=True)
class TagToken:
    """A tag located in the template text.

    ``start`` and ``end`` are offsets into the scanned text; ``raw`` is the
    exact matched markup.
    """

    kind: TagKind
    name: str
    raw: str
    start: int
    end: int
    attributes: str = ""

    @property
    def is_closing(self) -> bool:
        return self.kind is TagKind.CLOSING

    @property
    def is_self_closing(self) -> bool:
        return self.kind is TagKind.SELF_CLOSING

    @property
    def props(self) -> Dict[str, PropValue]:
        """Attributes of an opening tag parsed into a props mapping."""
        return parse_props(self.attributes)


def next_tag(text: str, pos: int = 0) -> Optional[TagToken]:
    """Find the next tag in ``text`` at or after ``pos``.

    Args:
        text: Template text
        pos: Offset to start scanning from

    Returns:
        The located tag, or None when the rest of the text holds no tag
    """
    match = ANY_TAG.search(text, pos)
    if match is None:
        return None

    raw = match.group(0)
    opening = OPENING_TAG.fullmatch(raw)
    if opening is not None:
        kind = TagKind.SELF_CLOSING if opening.group(3) else TagKind.OPENING
        return TagToken(
            kind=kind,
            name=opening.group(1),
            raw=raw,
            start=match.start(),
            end=match.end(),
            attributes=(opening.group(2) or "").strip(),
        )

    closing = END_TAG.fullmatch(raw)
    name = closing.group(1) if closing is not None else match.group(1)
    return TagToken(
        kind=TagKind.CLOSING,
        name=name,
        raw=raw,
        start=match.start(),
        end=match.end(),
    )


def parse_props(source: str) -> Dict[str, PropValue]:
    """Create a props mapping from a raw attribute string.

    Keys without a value, or with an empty one, become ``True`` flags. A key
    repeated later in the string overrides the earlier value.

    Example:
        >>> parse_props('id="main" hidden')
        {'id': 'main', 'hidden': True}
    """
    props: Dict[str, PropValue] = {}
    for match in ATTRIBUTES.finditer(source):
        props[match.group(1)] = match.group(2) or True
    return props


def strip_comments(text: str) -> Tuple[str, int]:
    """Remove comment regions from ``text``.

    Returns:
        Tuple of the stripped text and the number of comments removed
    """
    return COMMENTS.subn("", text)
