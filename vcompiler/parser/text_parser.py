"""
vcompiler Text Parser
=====================

Extracts interpolation segments from text.

    "Hello {{ name | upper }}!"
    -> expression: "Hello " + _s(_f("upper")(name)) + "!"
       tokens:     ["Hello ", {"@binding": '_f("upper")(name)'}, "!"]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Union

from vcompiler.codegen.literals import quote
from vcompiler.parser.filter_parser import parse_filters
from vcompiler.utils.helpers import cached

DEFAULT_DELIMITERS = ("{{", "}}")

Token = Union[str, Dict[str, str]]


@dataclass
class TextParseResult:
    """Combined display expression plus raw tokens."""

    expression: str
    tokens: List[Token]


@cached
def build_tag_pattern(delimiters: Sequence[str]) -> Pattern[str]:
    """Compile the interpolation pattern for a delimiter pair."""
    open_, close = delimiters
    return re.compile(re.escape(open_) + r"(.+?)" + re.escape(close), re.DOTALL)


def parse_text(
    text: str,
    delimiters: Optional[Sequence[str]] = None,
) -> Optional[TextParseResult]:
    """
    Parse interpolations out of ``text``.

    Args:
        text: Text node or attribute content
        delimiters: Interpolation delimiters

    Returns:
        The parse result, or None when ``text`` has no interpolation
    """
    pattern = build_tag_pattern(tuple(delimiters or DEFAULT_DELIMITERS))

    tokens: List[str] = []
    raw_tokens: List[Token] = []
    last_index = 0
    found = False

    for match in pattern.finditer(text):
        found = True
        index = match.start()
        if index > last_index:
            literal = text[last_index:index]
            raw_tokens.append(literal)
            tokens.append(quote(literal))

        exp = parse_filters(match.group(1).strip())
        tokens.append(f"_s({exp})")
        raw_tokens.append({"@binding": exp})
        last_index = match.end()

    if not found:
        return None

    if last_index < len(text):
        literal = text[last_index:]
        raw_tokens.append(literal)
        tokens.append(quote(literal))

    return TextParseResult(expression=" + ".join(tokens), tokens=raw_tokens)
