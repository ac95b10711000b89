"""
vcompiler Element Helpers
=========================

Helpers shared by the builder, the platform modules and directive handlers
for reading raw attributes and recording bindings on an element.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Pattern

from vcompiler.codegen.literals import quote
from vcompiler.parser.filter_parser import parse_filters
from vcompiler.parser.nodes import (
    ASTAttr,
    ASTDirective,
    ASTElement,
    ASTHandler,
    Modifiers,
)


def _ranged(item: Any, range: Any = None) -> Any:
    """Copy ``start``/``end`` from ``range`` onto ``item`` when present."""
    if range is not None:
        start = getattr(range, "start", None)
        end = getattr(range, "end", None)
        if start is not None:
            item.start = start
        if end is not None:
            item.end = end
    return item


# =============================================================================
# Recording bindings
# =============================================================================

def add_prop(
    el: ASTElement,
    name: str,
    value: str,
    range: Any = None,
    dynamic: Optional[bool] = None,
) -> None:
    """Record a DOM property binding."""
    if el.props is None:
        el.props = []
    el.props.append(_ranged(ASTAttr(name, value, dynamic), range))
    el.plain = False


def add_attr(
    el: ASTElement,
    name: str,
    value: Any,
    range: Any = None,
    dynamic: Optional[bool] = None,
) -> None:
    """Record an attribute binding; dynamic names go to ``dynamic_attrs``."""
    if dynamic:
        if el.dynamic_attrs is None:
            el.dynamic_attrs = []
        target = el.dynamic_attrs
    else:
        if el.attrs is None:
            el.attrs = []
        target = el.attrs
    target.append(_ranged(ASTAttr(name, value, dynamic), range))
    el.plain = False


def add_raw_attr(el: ASTElement, name: str, value: Any, range: Any = None) -> None:
    """Add an attribute as if it had been written in the template."""
    el.attrs_map[name] = value
    el.attrs_list.append(_ranged(ASTAttr(name, value), range))


def add_directive(
    el: ASTElement,
    name: str,
    raw_name: str,
    value: str,
    arg: Optional[str] = None,
    is_dynamic_arg: bool = False,
    modifiers: Optional[Modifiers] = None,
    range: Any = None,
) -> ASTDirective:
    """Record a generic directive and return its descriptor."""
    directive = _ranged(
        ASTDirective(
            name=name,
            raw_name=raw_name,
            value=value,
            arg=arg,
            is_dynamic_arg=is_dynamic_arg,
            modifiers=modifiers,
        ),
        range,
    )
    if el.directives is None:
        el.directives = []
    el.directives.append(directive)
    el.plain = False
    return directive


def _prepend_modifier_marker(symbol: str, name: str, dynamic: bool) -> str:
    if dynamic:
        return f"_p({name}, {quote(symbol)})"
    return symbol + name


def add_handler(
    el: ASTElement,
    name: str,
    value: str,
    modifiers: Optional[Modifiers] = None,
    important: bool = False,
    warn: Optional[Callable[..., None]] = None,
    range: Any = None,
    dynamic: bool = False,
) -> None:
    """
    Register an event handler on ``el``.

    The ``capture``, ``once`` and ``passive`` modifiers become name sigils
    (``!``, ``~``, ``&``); ``native`` routes the handler to
    ``native_events``. ``.right``/``.middle`` clicks are rewritten to
    ``contextmenu``/``mouseup``. An ``important`` handler is placed before
    existing handlers for the same event.

    Args:
        el: Target element
        name: Event name, or an expression when ``dynamic``
        value: Handler expression or statement
        modifiers: Parsed modifiers; copied, never mutated
        important: Run before handlers already registered
        warn: Diagnostic sink
        range: Source location of the binding
        dynamic: ``name`` is an expression
    """
    mods: Optional[Modifiers] = dict(modifiers) if modifiers is not None else None
    flags: Modifiers = mods if mods is not None else {}

    if warn and flags.get("prevent") and flags.get("passive"):
        warn(
            "passive and prevent can't be used together. "
            "Passive handler can't prevent default event.",
            range,
        )

    if flags.get("right"):
        if dynamic:
            name = f'("contextmenu" if ({name}) == "click" else ({name}))'
        elif name == "click":
            name = "contextmenu"
            flags.pop("right")
    elif flags.get("middle"):
        if dynamic:
            name = f'("mouseup" if ({name}) == "click" else ({name}))'
        elif name == "click":
            name = "mouseup"

    for modifier, symbol in (("capture", "!"), ("once", "~"), ("passive", "&")):
        if flags.get(modifier):
            flags.pop(modifier)
            name = _prepend_modifier_marker(symbol, name, dynamic)

    if flags.get("native"):
        flags.pop("native")
        if el.native_events is None:
            el.native_events = {}
        events = el.native_events
    else:
        if el.events is None:
            el.events = {}
        events = el.events

    handler = _ranged(ASTHandler(value=value.strip(), dynamic=dynamic, modifiers=mods), range)

    existing = events.get(name)
    if isinstance(existing, list):
        if important:
            existing.insert(0, handler)
        else:
            existing.append(handler)
    elif existing is not None:
        events[name] = [handler, existing] if important else [existing, handler]
    else:
        events[name] = handler

    el.plain = False


# =============================================================================
# Reading attributes
# =============================================================================

def get_raw_binding_attr(el: ASTElement, name: str) -> Optional[ASTAttr]:
    """Raw attribute record for ``:name``, ``v-bind:name`` or ``name``."""
    raw = el.raw_attrs_map
    return raw.get(":" + name) or raw.get("v-bind:" + name) or raw.get(name)


def get_binding_attr(
    el: ASTElement,
    name: str,
    get_static: bool = True,
) -> Optional[str]:
    """
    Consume a bound attribute and return its code.

    Looks for ``:name`` / ``v-bind:name`` first (returned with filters
    applied), then for a plain ``name`` (returned quoted) unless
    ``get_static`` is False.
    """
    dynamic_value = get_and_remove_attr(el, ":" + name) or get_and_remove_attr(
        el, "v-bind:" + name
    )
    if dynamic_value is not None:
        return parse_filters(dynamic_value)
    if get_static:
        static_value = get_and_remove_attr(el, name)
        if static_value is not None:
            return quote(static_value)
    return None


def get_and_remove_attr(
    el: ASTElement,
    name: str,
    remove_from_map: bool = False,
) -> Optional[str]:
    """
    Remove ``name`` from the attribute list and return its value.

    ``attrs_map`` keeps the entry (the code generator still consults it)
    unless ``remove_from_map`` is set.
    """
    value = el.attrs_map.get(name)
    if value is not None:
        for i, attr in enumerate(el.attrs_list):
            if attr.name == name:
                del el.attrs_list[i]
                break
    if remove_from_map:
        el.attrs_map.pop(name, None)
    return value


def get_and_remove_attr_by_regex(el: ASTElement, pattern: Pattern[str]) -> Optional[ASTAttr]:
    """Remove and return the first attribute whose name matches ``pattern``."""
    for i, attr in enumerate(el.attrs_list):
        if pattern.search(attr.name):
            del el.attrs_list[i]
            return attr
    return None
