"""
vcompiler Base Directives
=========================

Platform-independent compile-time directive handlers.

A handler receives ``(el, dir, warn)`` and returns True when the directive
still needs a runtime directive object.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from vcompiler.codegen.literals import quote
from vcompiler.parser.nodes import ASTDirective, ASTElement


def on(el: ASTElement, dir: ASTDirective, warn: Optional[Callable[..., None]] = None) -> bool:
    """``v-on="listeners"``: merge an object of listeners."""
    if warn and dir.modifiers:
        warn("v-on without argument does not support modifiers.")
    el.wrap_listeners = lambda code: f"_g({code}, {dir.value})"
    return False


def bind(el: ASTElement, dir: ASTDirective, warn: Optional[Callable[..., None]] = None) -> bool:
    """``v-bind="attrs"``: merge an object of attributes or props."""
    modifiers = dir.modifiers or {}
    as_prop = "True" if modifiers.get("prop") else "False"
    sync = ", True" if modifiers.get("sync") else ""
    el.wrap_data = lambda code: f"_b({code}, {quote(el.tag)}, {dir.value}, {as_prop}{sync})"
    return False


def cloak(el: ASTElement, dir: ASTDirective, warn: Optional[Callable[..., None]] = None) -> bool:
    return False


BASE_DIRECTIVES: Dict[str, Callable[..., Optional[bool]]] = {
    "on": on,
    "bind": bind,
    "cloak": cloak,
}
