"""
vcompiler Helpers
=================

Small string and lookup helpers shared by the parser and code generator.
"""

from __future__ import annotations

import functools
import re
from typing import Any, Callable, Iterable, TypeVar, Union


F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# String Helpers
# =============================================================================

_camelize_re = re.compile(r"-(\w)")
_hyphenate_re = re.compile(r"\B([A-Z])")


@functools.lru_cache(maxsize=512)
def camelize(text: str) -> str:
    """
    Convert a hyphen-delimited name to camelCase.

    Example:
        >>> camelize("foo-bar")
        'fooBar'
    """
    return _camelize_re.sub(lambda m: m.group(1).upper(), text)


@functools.lru_cache(maxsize=512)
def hyphenate(text: str) -> str:
    """
    Convert a camelCase name to hyphen-delimited form.

    Example:
        >>> hyphenate("fooBar")
        'foo-bar'
    """
    return _hyphenate_re.sub(r"-\1", text).lower()


@functools.lru_cache(maxsize=512)
def capitalize(text: str) -> str:
    """Uppercase the first character only."""
    return text[:1].upper() + text[1:]


# =============================================================================
# Lookup Helpers
# =============================================================================

def make_map(
    names: Union[str, Iterable[str]],
    expects_lower_case: bool = False,
) -> Callable[[str], bool]:
    """
    Build a fast membership predicate.

    Args:
        names: Comma separated names or an iterable of names
        expects_lower_case: Lowercase the probe before the lookup

    Returns:
        Predicate returning True for members

    Example:
        >>> is_void = make_map("br,hr,img")
        >>> is_void("br")
        True
    """
    if isinstance(names, str):
        names = names.split(",")
    members = frozenset(names)

    if expects_lower_case:
        return lambda value: bool(value) and value.lower() in members
    return lambda value: value in members


def no(*args: Any) -> bool:
    """Predicate that always answers False."""
    return False


def cached(func: F) -> F:
    """Memoize a single-argument pure function."""
    return functools.lru_cache(maxsize=None)(func)  # type: ignore[return-value]


is_builtin_tag = make_map("slot,component", expects_lower_case=True)
