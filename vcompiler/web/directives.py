"""
vcompiler Web Directives
========================

Compile-time ``v-model``, ``v-text`` and ``v-html`` for the web platform.

``v-model`` expands into a DOM property plus a change listener, chosen by
element and input type:

    <input v-model="msg">
    -> "domProps": {"value": (msg)},
       "on": {"input": lambda event: None if event.target.composing
                                      else _set(_self, "msg", event.target.value)}

Generated listener bodies are single expressions; temporaries are bound
through immediately invoked lambdas.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from vcompiler.directives.model import gen_assignment_code, gen_component_model
from vcompiler.parser.attrs import add_handler, add_prop, get_binding_attr
from vcompiler.parser.nodes import ASTDirective, ASTElement, Modifiers
from vcompiler.web.tags import is_reserved_tag

# Event name the runtime maps to the range input event.
RANGE_TOKEN = "__r"

FORCE_UPDATE = "_self.force_update()"

Warn = Callable[..., None]


def model(el: ASTElement, dir: ASTDirective, warn: Warn) -> bool:
    value = dir.value
    modifiers = dir.modifiers or {}
    tag = el.tag
    type = el.attrs_map.get("type")

    if tag == "input" and type == "file":
        warn(
            f'<{el.tag} v-model="{value}" type="file">:\n'
            "File inputs are read only. Use a v-on:change listener instead.",
            el.raw_attrs_map.get("v-model"),
        )

    if el.component:
        gen_component_model(el, value, modifiers)
        # component v-model needs no runtime directive
        return False
    elif tag == "select":
        gen_select(el, value, modifiers)
    elif tag == "input" and type == "checkbox":
        gen_checkbox_model(el, value, modifiers)
    elif tag == "input" and type == "radio":
        gen_radio_model(el, value, modifiers)
    elif tag in ("input", "textarea"):
        gen_default_model(el, value, modifiers, warn)
    elif not is_reserved_tag(tag):
        gen_component_model(el, value, modifiers)
        return False
    else:
        warn(
            f'<{el.tag} v-model="{value}">: '
            "v-model is not supported on this element type. "
            "If you are working with contenteditable, it's recommended to "
            "wrap a library dedicated for that purpose inside a custom component.",
            el.raw_attrs_map.get("v-model"),
        )

    return True


def gen_checkbox_model(el: ASTElement, value: str, modifiers: Modifiers) -> None:
    value_binding = get_binding_attr(el, "value") or "None"
    true_value_binding = get_binding_attr(el, "true-value") or "True"
    false_value_binding = get_binding_attr(el, "false-value") or "False"

    if true_value_binding == "True":
        unchecked_list = f"({value})"
    else:
        unchecked_list = f"_q({value}, {true_value_binding})"
    add_prop(
        el,
        "checked",
        f"(_i({value}, {value_binding}) > -1) if isinstance({value}, list) else {unchecked_list}",
    )

    item = f"_n({value_binding})" if modifiers.get("number") else value_binding
    add_to_list = gen_assignment_code(value, "_a + [_item]")
    remove_from_list = gen_assignment_code(value, "_a[:_ix] + _a[_ix + 1:]")
    assign_flag = gen_assignment_code(
        value, f"({true_value_binding}) if _el.checked else ({false_value_binding})"
    )
    update_list = (
        f"(lambda _item: (lambda _ix: "
        f"(({add_to_list}) if _ix < 0 else None) if _el.checked "
        f"else (({remove_from_list}) if _ix > -1 else None))(_i(_a, _item)))({item})"
    )
    code = (
        f"(lambda _a, _el: {update_list} if isinstance(_a, list) else {assign_flag})"
        f"({value}, event.target)"
    )
    add_handler(el, "change", code, None, True)


def gen_radio_model(el: ASTElement, value: str, modifiers: Modifiers) -> None:
    value_binding = get_binding_attr(el, "value") or "None"
    if modifiers.get("number"):
        value_binding = f"_n({value_binding})"
    add_prop(el, "checked", f"_q({value}, {value_binding})")
    add_handler(el, "change", gen_assignment_code(value, value_binding), None, True)


def gen_select(el: ASTElement, value: str, modifiers: Modifiers) -> None:
    option_value = 'getattr(o, "_value", o.value)'
    if modifiers.get("number"):
        option_value = f"_n({option_value})"
    selected_values = f"[{option_value} for o in event.target.options if o.selected]"
    assignment = gen_assignment_code(
        value, "_sv if event.target.multiple else (_sv[0] if _sv else None)"
    )
    add_handler(el, "change", f"(lambda _sv: {assignment})({selected_values})", None, True)


def gen_default_model(
    el: ASTElement,
    value: str,
    modifiers: Modifiers,
    warn: Warn,
) -> None:
    type = el.attrs_map.get("type")

    value_bound = el.attrs_map.get("v-bind:value") or el.attrs_map.get(":value")
    type_bound = el.attrs_map.get("v-bind:type") or el.attrs_map.get(":type")
    if value_bound and not type_bound:
        binding = "v-bind:value" if el.attrs_map.get("v-bind:value") else ":value"
        warn(
            f'{binding}="{value_bound}" conflicts with v-model on the same element '
            "because the latter already expands to a value binding internally",
            el.raw_attrs_map.get(binding),
        )

    lazy = modifiers.get("lazy")
    number = modifiers.get("number")
    trim = modifiers.get("trim")
    need_composition_guard = not lazy and type != "range"
    if lazy:
        event = "change"
    elif type == "range":
        event = RANGE_TOKEN
    else:
        event = "input"

    value_expression = "event.target.value"
    if trim:
        value_expression = "event.target.value.strip()"
    if number:
        value_expression = f"_n({value_expression})"

    code = gen_assignment_code(value, value_expression)
    if need_composition_guard:
        code = f"None if event.target.composing else {code}"

    add_prop(el, "value", f"({value})")
    add_handler(el, event, code, None, True)
    if trim or number:
        add_handler(el, "blur", FORCE_UPDATE)


def text(el: ASTElement, dir: ASTDirective, warn: Optional[Warn] = None) -> None:
    if dir.value:
        add_prop(el, "textContent", f"_s({dir.value})", dir)


def html(el: ASTElement, dir: ASTDirective, warn: Optional[Warn] = None) -> None:
    if dir.value:
        add_prop(el, "innerHTML", f"_s({dir.value})", dir)


WEB_DIRECTIVES: Dict[str, Callable[..., Optional[bool]]] = {
    "model": model,
    "text": text,
    "html": html,
}
