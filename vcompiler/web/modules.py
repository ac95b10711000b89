"""
vcompiler Web Modules
=====================

Compiler modules of the web platform.

ClassModule:
    class="a  b" :class="{ active: on }"
    -> "staticClass": "a b", "class": {active: on}

StyleModule:
    style="color: red" :style="s"
    -> "staticStyle": {"color": "red"}, "style": (s)

ModelModule:
    <input v-model="v" :type="t"> is expanded into a checkbox / radio /
    other ``v-if`` chain, so each branch gets the matching v-model code.
"""

from __future__ import annotations

import re
from typing import List, Optional

from vcompiler.codegen.literals import quote, to_source
from vcompiler.core.config import CompilerOptions
from vcompiler.parser.attrs import (
    add_raw_attr,
    get_and_remove_attr,
    get_binding_attr,
)
from vcompiler.parser.builder import (
    add_if_condition,
    base_warn,
    process_element,
    process_for,
)
from vcompiler.parser.nodes import ASTElement, IfCondition, create_ast_element
from vcompiler.parser.text_parser import parse_text
from vcompiler.plugins.hooks import CompilerModule
from vcompiler.web.tags import parse_style_text

_whitespace_re = re.compile(r"\s+")


def _interpolation_warning(name: str, value: str) -> str:
    return (
        f'{name}="{value}": '
        "Interpolation inside attributes has been removed. "
        "Use v-bind or the colon shorthand instead. For example, "
        f'instead of <div {name}="{{{{ val }}}}">, use <div :{name}="val">.'
    )


class ClassModule(CompilerModule):
    """Static and bound ``class``."""

    name = "class"
    static_keys = ("static_class",)

    def transform_node(self, el: ASTElement, options: CompilerOptions) -> None:
        static_class = get_and_remove_attr(el, "class")
        if static_class:
            if options.dev and parse_text(static_class, options.delimiters):
                (options.warn or base_warn)(
                    _interpolation_warning("class", static_class),
                    el.raw_attrs_map.get("class"),
                )
            el.module_data["static_class"] = quote(_whitespace_re.sub(" ", static_class).strip())

        class_binding = get_binding_attr(el, "class", False)
        if class_binding:
            el.module_data["class_binding"] = class_binding

    def gen_data(self, el: ASTElement) -> List[str]:
        data = []
        if "static_class" in el.module_data:
            data.append(f'"staticClass": {el.module_data["static_class"]}')
        if "class_binding" in el.module_data:
            data.append(f'"class": {el.module_data["class_binding"]}')
        return data


class StyleModule(CompilerModule):
    """Static and bound ``style``."""

    name = "style"
    static_keys = ("static_style",)

    def transform_node(self, el: ASTElement, options: CompilerOptions) -> None:
        static_style = get_and_remove_attr(el, "style")
        if static_style:
            if options.dev and parse_text(static_style, options.delimiters):
                (options.warn or base_warn)(
                    _interpolation_warning("style", static_style),
                    el.raw_attrs_map.get("style"),
                )
            el.module_data["static_style"] = to_source(parse_style_text(static_style))

        style_binding = get_binding_attr(el, "style", False)
        if style_binding:
            el.module_data["style_binding"] = style_binding

    def gen_data(self, el: ASTElement) -> List[str]:
        data = []
        if "static_style" in el.module_data:
            data.append(f'"staticStyle": {el.module_data["static_style"]}')
        if "style_binding" in el.module_data:
            data.append(f'"style": ({el.module_data["style_binding"]})')
        return data


class ModelModule(CompilerModule):
    """Expands ``<input v-model>`` with a dynamic ``type`` into three branches."""

    name = "model"

    def pre_transform_node(
        self,
        el: ASTElement,
        options: CompilerOptions,
    ) -> Optional[ASTElement]:
        if el.tag != "input":
            return None
        attrs = el.attrs_map
        if not attrs.get("v-model"):
            return None

        type_binding = None
        if attrs.get(":type") or attrs.get("v-bind:type"):
            type_binding = get_binding_attr(el, "type")
        if not attrs.get("type") and not type_binding and attrs.get("v-bind"):
            type_binding = f"({attrs['v-bind']}).type"
        if not type_binding:
            return None

        if_condition = get_and_remove_attr(el, "v-if", True)
        if_condition_extra = f" and ({if_condition})" if if_condition else ""
        has_else = get_and_remove_attr(el, "v-else", True) is not None
        else_if_condition = get_and_remove_attr(el, "v-else-if", True)

        # 1. checkbox
        branch0 = clone_ast_element(el)
        process_for(branch0, options)
        add_raw_attr(branch0, "type", "checkbox")
        branch0 = process_element(branch0, options)
        branch0.if_exp = f'({type_binding}) == "checkbox"' + if_condition_extra
        add_if_condition(branch0, IfCondition(exp=branch0.if_exp, block=branch0))

        # 2. radio
        branch1 = clone_ast_element(el)
        get_and_remove_attr(branch1, "v-for", True)
        add_raw_attr(branch1, "type", "radio")
        branch1 = process_element(branch1, options)
        add_if_condition(
            branch0,
            IfCondition(exp=f'({type_binding}) == "radio"' + if_condition_extra, block=branch1),
        )

        # 3. other
        branch2 = clone_ast_element(el)
        get_and_remove_attr(branch2, "v-for", True)
        add_raw_attr(branch2, ":type", type_binding)
        branch2 = process_element(branch2, options)
        add_if_condition(branch0, IfCondition(exp=if_condition, block=branch2))

        if has_else:
            branch0.is_else = True
        elif else_if_condition:
            branch0.elseif_exp = else_if_condition

        return branch0


def clone_ast_element(el: ASTElement) -> ASTElement:
    """Fresh, unprocessed element with a copy of ``el``'s raw attributes."""
    clone = create_ast_element(el.tag, list(el.attrs_list), el.parent)
    clone.raw_attrs_map = el.raw_attrs_map
    clone.start, clone.end = el.start, el.end
    clone.ns = el.ns
    return clone


def web_modules() -> List[CompilerModule]:
    return [ClassModule(), StyleModule(), ModelModule()]


__all__ = [
    "ClassModule",
    "ModelModule",
    "StyleModule",
    "clone_ast_element",
    "web_modules",
]
