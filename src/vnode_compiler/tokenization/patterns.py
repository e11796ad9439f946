"""Regular expressions recognising template markup.

Attribute runs inside a tag require leading whitespace before every key, so
a tag that never closes cannot send the matcher into exponential
backtracking.
"""

import re
from typing import Pattern, Union

# Characters allowed in tag names and attribute keys
_NAME = r"""[^\s/<>="']+"""
_ATTRIBUTE_RUN = r"""((?:\s+""" + _NAME + r"""(?:="[^"]*")?)*)"""

# Any opening, self-closing or closing tag: name, raw attributes, self-closing slash
ANY_TAG = re.compile(r"<\s*/?\s*(" + _NAME + r")" + _ATTRIBUTE_RUN + r"\s*(/)?\s*>")

# Closing tag: name
END_TAG = re.compile(r"<\s*/\s*(" + _NAME + r")\s*>")

# Opening tag: name, raw attributes, self-closing slash
OPENING_TAG = re.compile(r"<\s*(" + _NAME + r")" + _ATTRIBUTE_RUN + r"\s*(/)?\s*>")

# A single key or key="value" pair
ATTRIBUTES = re.compile(r"""([^\s/"'=]+)(?:="([^"]*)")?""")

# HTML comment, possibly spanning lines
COMMENTS = re.compile(r"<!--.*?-->", re.DOTALL)

# {{ expression }} markers in text and attribute values
DEFAULT_INTERPOLATION = re.compile(r"\{\{\s*(.+?)\s*\}\}")

# :name="expression" bound props
DEFAULT_DATA_BINDING = re.compile(r"^:(.+)$")

PatternLike = Union[str, Pattern[str]]


def ensure_pattern(pattern: PatternLike) -> Pattern[str]:
    """Compile ``pattern`` unless it already is a compiled expression.

    Raises:
        ValueError: If the pattern has no capture group
    """
    compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    if compiled.groups < 1:
        raise ValueError(
            f"Pattern {compiled.pattern!r} must capture the expression in group 1"
        )
    return compiled
