"""
vcompiler Filter Parser
=======================

Splits ``value | filter | other(arg)`` pipelines.

The scan tracks string literals, bracket nesting and a division-vs-regex
heuristic so that only top-level single ``|`` characters separate filters.
Each filter wraps the previous result as its first argument:

    msg | upper | truncate(3)
    -> _f("truncate")(_f("upper")(msg), 3)
"""

from __future__ import annotations

import re
from typing import List, Optional

from vcompiler.codegen.literals import quote

# Characters after which "/" is a division operator rather than a regex start.
_valid_division_char = re.compile(r"[\w).+\-\]/]")


def parse_filters(exp: str) -> str:
    """
    Compile a filter pipeline into nested filter calls.

    Args:
        exp: Expression text, possibly with ``|`` filters

    Returns:
        The base expression wrapped by each filter call
    """
    in_single = in_double = in_regex = False
    curly = square = paren = 0
    last_filter_index = 0
    expression: Optional[str] = None
    filters: List[str] = []
    c = ""

    i = 0
    length = len(exp)
    while i < length:
        prev = c
        c = exp[i]

        if in_single:
            if c == "'" and prev != "\\":
                in_single = False
        elif in_double:
            if c == '"' and prev != "\\":
                in_double = False
        elif in_regex:
            if c == "/" and prev != "\\":
                in_regex = False
        elif (
            c == "|"
            and (i + 1 >= length or exp[i + 1] != "|")
            and (i == 0 or exp[i - 1] != "|")
            and not curly
            and not square
            and not paren
        ):
            if expression is None:
                last_filter_index = i + 1
                expression = exp[:i].strip()
            else:
                filters.append(exp[last_filter_index:i].strip())
                last_filter_index = i + 1
        else:
            if c == '"':
                in_double = True
            elif c == "'":
                in_single = True
            elif c == "(":
                paren += 1
            elif c == ")":
                paren -= 1
            elif c == "[":
                square += 1
            elif c == "]":
                square -= 1
            elif c == "{":
                curly += 1
            elif c == "}":
                curly -= 1

            if c == "/":
                j = i - 1
                p = ""
                while j >= 0:
                    p = exp[j]
                    if p != " ":
                        break
                    j -= 1
                if not p or not _valid_division_char.match(p):
                    in_regex = True
        i += 1

    if expression is None:
        expression = exp.strip()
    elif last_filter_index != 0:
        filters.append(exp[last_filter_index:].strip())

    for filter_exp in filters:
        expression = wrap_filter(expression, filter_exp)

    return expression


def wrap_filter(exp: str, filter_exp: str) -> str:
    """Wrap ``exp`` in one filter call."""
    i = filter_exp.find("(")
    if i < 0:
        return f"_f({quote(filter_exp)})({exp})"

    name = filter_exp[:i]
    args = filter_exp[i + 1:]
    if args == ")":
        return f"_f({quote(name)})({exp})"
    return f"_f({quote(name)})({exp}, {args}"
