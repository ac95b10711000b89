"""
vcompiler Source Literals
=========================

Rendering of Python values as source text inside generated code.
"""

from __future__ import annotations

from typing import Any

import orjson


def transform_special_newlines(code: str) -> str:
    """Escape the line and paragraph separators (U+2028, U+2029)."""
    return code.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def quote(value: str) -> str:
    """
    Quote a string as a Python string literal.

    JSON string escapes are a subset of Python's, so the JSON encoding is
    also a valid Python literal.

    Example:
        >>> quote('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    return transform_special_newlines(orjson.dumps(value).decode())


def to_source(value: Any) -> str:
    """
    Render a literal value (str, number, bool, None, list, dict).

    Example:
        >>> to_source({"stop": True, "keys": [8, 46]})
        '{"stop": True, "keys": [8, 46]}'
    """
    if value is None:
        return "None"
    if value is True:
        return "True"
    if value is False:
        return "False"
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_source(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(
            f"{quote(str(key))}: {to_source(item)}" for key, item in value.items()
        ) + "}"
    raise TypeError(f"cannot render {type(value).__name__} as source")
