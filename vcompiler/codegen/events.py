"""
vcompiler Event Handler Codegen
===============================

Generates the ``"on"`` / ``"nativeOn"`` entries of a data object.

Handler values are classified as:
    method path      ``save``, ``form.submit``        used as-is
    lambda           ``lambda e: save(e)``            used as-is
    invocation       ``save(item)``                   wrapped in ``lambda event:``
    inline statement ``count += 1; done = True``      translated, then wrapped

Modifiers fold into a single expression around the handler call. Guards
(``.self``, ``.ctrl``, key filters) short-circuit to None, effects
(``.stop``, ``.prevent``) run first:

    @keyup.enter.stop="submit"
    -> lambda event, *args: None if (event.type.startswith("key") and
           _k(event.keyCode, "enter", 13, event.key, "Enter")) else
           (event.stopPropagation(), submit(event, *args))[-1]
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple, Union

from vcompiler.codegen.literals import quote, to_source
from vcompiler.codegen.params import find_top_level, split_top_level
from vcompiler.directives.model import gen_assignment_code
from vcompiler.parser.nodes import ASTHandler, Handlers

fn_exp_re = re.compile(r"^lambda\b")
fn_invoke_re = re.compile(r"\([^)]*?\);*$")
simple_path_re = re.compile(
    r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*|\['[^']*?'\]|\[\"[^\"]*?\"\]|\[\d+\]|\[[A-Za-z_]\w*\])*$"
)
_leading_int_re = re.compile(r"^\s*([+-]?\d+)")
_augmented_ops = frozenset({"+", "-", "*", "/", "//", "%", "**", "&", "|", "^", "<<", ">>", "@"})

KEY_CODES: Dict[str, Union[int, List[int]]] = {
    "esc": 27,
    "tab": 9,
    "enter": 13,
    "space": 32,
    "up": 38,
    "left": 37,
    "right": 39,
    "down": 40,
    "delete": [8, 46],
}

KEY_NAMES: Dict[str, Union[str, List[str]]] = {
    "esc": ["Esc", "Escape"],
    "tab": "Tab",
    "enter": "Enter",
    "space": [" ", "Spacebar"],
    "up": ["Up", "ArrowUp"],
    "left": ["Left", "ArrowLeft"],
    "right": ["Right", "ArrowRight"],
    "down": ["Down", "ArrowDown"],
    "delete": ["Backspace", "Delete", "Del"],
}

# (kind, code): "guard" skips the handler when code is truthy,
# "effect" is evaluated before the handler.
Step = Tuple[str, str]

MODIFIER_CODE: Dict[str, Step] = {
    "stop": ("effect", "event.stopPropagation()"),
    "prevent": ("effect", "event.preventDefault()"),
    "self": ("guard", "event.target is not event.currentTarget"),
    "ctrl": ("guard", "not event.ctrlKey"),
    "shift": ("guard", "not event.shiftKey"),
    "alt": ("guard", "not event.altKey"),
    "meta": ("guard", "not event.metaKey"),
    "left": ("guard", 'hasattr(event, "button") and event.button != 0'),
    "middle": ("guard", 'hasattr(event, "button") and event.button != 1'),
    "right": ("guard", 'hasattr(event, "button") and event.button != 2'),
}

EMPTY_HANDLER = "lambda *args: None"


def gen_handlers(events: Handlers, is_native: bool) -> str:
    """
    Generate the ``"on"`` (or ``"nativeOn"``) data entry.

    Dynamic event names are merged at runtime through ``_d``.
    """
    prefix = '"nativeOn": ' if is_native else '"on": '
    static_handlers: List[str] = []
    dynamic_handlers: List[str] = []

    for name, handler in events.items():
        code = gen_handler(handler)
        if isinstance(handler, ASTHandler) and handler.dynamic:
            dynamic_handlers.append(f"{name}, {code}")
        else:
            static_handlers.append(f"{quote(name)}: {code}")

    static_code = "{" + ", ".join(static_handlers) + "}"
    if dynamic_handlers:
        return f"{prefix}_d({static_code}, [{', '.join(dynamic_handlers)}])"
    return prefix + static_code


def gen_handler(handler: Union[ASTHandler, List[ASTHandler], None]) -> str:
    if not handler:
        return EMPTY_HANDLER
    if isinstance(handler, list):
        return "[" + ", ".join(gen_handler(h) for h in handler) + "]"

    value = handler.value
    is_method_path = bool(simple_path_re.match(value))
    is_function_expression = bool(fn_exp_re.match(value))
    is_function_invocation = bool(simple_path_re.match(fn_invoke_re.sub("", value, count=1)))

    if handler.modifiers is None:
        if is_method_path or is_function_expression:
            return value
        if is_function_invocation:
            return f"lambda event: {value}"
        return f"lambda event: {translate_statement(value)}"

    steps: List[Step] = []
    keys: List[str] = []
    for key in handler.modifiers:
        if key in MODIFIER_CODE:
            steps.append(MODIFIER_CODE[key])
            if key in KEY_CODES:
                keys.append(key)
        elif key == "exact":
            pressed = [
                f"event.{modifier}Key"
                for modifier in ("ctrl", "shift", "alt", "meta")
                if not handler.modifiers.get(modifier)
            ]
            if pressed:
                steps.append(("guard", " or ".join(pressed)))
        else:
            keys.append(key)

    if keys:
        steps.insert(0, ("guard", gen_key_filter(keys)))

    if is_method_path:
        code = f"{value}(event, *args)"
    elif is_function_expression:
        code = f"({value})(event, *args)"
    elif is_function_invocation:
        code = value
    else:
        code = translate_statement(value)

    for kind, step in reversed(steps):
        if kind == "guard":
            code = f"None if ({step}) else ({code})"
        else:
            code = f"({step}, {code})[-1]"
    return f"lambda event, *args: {code}"


def gen_key_filter(keys: List[str]) -> str:
    conditions = " and ".join(gen_filter_code(key) for key in keys)
    return f'event.type.startswith("key") and {conditions}'


def gen_filter_code(key: str) -> str:
    match = _leading_int_re.match(key)
    if match and int(match.group(1)):
        return f"event.keyCode != {int(match.group(1))}"

    key_code = KEY_CODES.get(key)
    key_name = KEY_NAMES.get(key)
    return (
        f"_k(event.keyCode, {quote(key)}, {to_source(key_code)}, "
        f"event.key, {to_source(key_name)})"
    )


def translate_statement(statement: str) -> str:
    """
    Express an inline handler statement as a single expression.

    ``;`` separated parts are evaluated in order and the last value is
    returned. Assignments (plain and augmented) go through ``_set``.

    Example:
        >>> translate_statement("count += 1; log(count)")
        '(_set(_self, "count", count + (1)), log(count))[-1]'
    """
    parts = [part.strip() for part in split_top_level(statement, ";")]
    parts = [part for part in parts if part]
    if not parts:
        return "None"

    translated = [_translate_part(part) for part in parts]
    if len(translated) == 1:
        return translated[0]
    return "(" + ", ".join(translated) + ")[-1]"


def _translate_part(part: str) -> str:
    assignment = _split_assignment(part)
    if assignment is None:
        return part
    target, op, value = assignment
    if op:
        value = f"{target} {op} ({value})"
    return gen_assignment_code(target, value)


def _split_assignment(part: str) -> Optional[Tuple[str, str, str]]:
    index = find_top_level(part, "=")
    if index <= 0:
        return None

    op_start = index
    while op_start > 0 and part[op_start - 1] in "+-*/%&|^<>@":
        op_start -= 1
    op = part[op_start:index]
    if op and op not in _augmented_ops:
        return None

    target = part[:op_start].strip()
    value = part[index + 1:].strip()
    if not target or not value or target.startswith("lambda"):
        return None
    return target, op, value
