"""Pattern library and tag scanning for template markup.

Key Components:
    patterns: Compiled regular expressions for tags, attributes and comments
    next_tag: Locates the next tag in template text
    parse_props: Turns a raw attribute string into a props mapping
    TagToken: A located tag with kind, name and offsets
"""

from .patterns import (
    ANY_TAG,
    ATTRIBUTES,
    COMMENTS,
    DEFAULT_DATA_BINDING,
    DEFAULT_INTERPOLATION,
    END_TAG,
    OPENING_TAG,
    ensure_pattern,
)
from .tokenizer import (
    TagKind,
    TagToken,
    next_tag,
    parse_props,
    strip_comments,
)

__all__ = [
    "ANY_TAG",
    "ATTRIBUTES",
    "COMMENTS",
    "DEFAULT_DATA_BINDING",
    "DEFAULT_INTERPOLATION",
    "END_TAG",
    "OPENING_TAG",
    "ensure_pattern",
    "TagKind",
    "TagToken",
    "next_tag",
    "parse_props",
    "strip_comments",
]
