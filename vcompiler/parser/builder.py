"""
vcompiler AST Builder
=====================

Turns scanner events into an element tree.

Responsibilities:
- Element creation, namespace inheritance and forbidden tags
- Structural directives: v-pre, v-for, v-if / v-else-if / v-else, v-once
- Keys, refs, slots (slot, slot-scope, v-slot, #name), slot outlets,
  dynamic components and inline templates
- Attribute bindings, event handlers and generic directives
- Whitespace handling, entity decoding and interpolation parsing of text

Template problems are reported through the ``warn`` sink and never raise.

Example:
    root = parse('<ul><li v-for="item in items">{{ item }}</li></ul>', options)
    root.children[0].for_exp   # "items"
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from vcompiler.codegen.literals import quote
from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import SourceRange
from vcompiler.directives.base import BASE_DIRECTIVES
from vcompiler.directives.model import gen_assignment_code
from vcompiler.parser.attrs import (
    add_attr,
    add_directive,
    add_handler,
    add_prop,
    get_and_remove_attr,
    get_and_remove_attr_by_regex,
    get_binding_attr,
    get_raw_binding_attr,
)
from vcompiler.parser.filter_parser import parse_filters
from vcompiler.parser.html_scanner import (
    Comment,
    ElementEnd,
    ElementStart,
    HTMLScanner,
    Text,
)
from vcompiler.parser.nodes import (
    ASTAttr,
    ASTElement,
    ASTExpression,
    ASTNode,
    ASTText,
    IfCondition,
    Modifiers,
    NodeState,
    NodeType,
    create_ast_element,
)
from vcompiler.parser.text_parser import parse_text
from vcompiler.utils.helpers import cached, camelize, hyphenate, no
from vcompiler.utils.logger import get_logger

logger = get_logger("vcompiler.parser")


# =============================================================================
# Attribute grammar
# =============================================================================

on_re = re.compile(r"^@|^v-on:")
dir_re = re.compile(r"^v-|^@|^:|^#")
for_alias_re = re.compile(r"([\s\S]*?)\s+(?:in|of)\s+([\s\S]*)")
for_iterator_re = re.compile(r",([^,\}\]]*)(?:,([^,\}\]]*))?$")
strip_parens_re = re.compile(r"^\(|\)$")
dynamic_arg_re = re.compile(r"^\[.*\]$")
arg_re = re.compile(r":(.*)$")
bind_re = re.compile(r"^:|^\.|^v-bind:")
modifier_re = re.compile(r"\.[^.\]]+(?=[^\]]*$)")
slot_re = re.compile(r"^v-slot(:|$)|^#")
line_break_re = re.compile(r"[\r\n]")
whitespace_re = re.compile(r"[ \f\t\r\n]+")
invalid_attribute_re = re.compile(r"[\s\"'<>/=]")

EMPTY_SLOT_SCOPE_TOKEN = "_empty_"

decode_html = cached(html.unescape)


def base_warn(message: str, range: Any = None, tip: bool = False) -> None:
    """Default diagnostic sink: log through the compiler logger."""
    logger.error(f"[vcompiler] {message}")


def _warn_of(options: CompilerOptions) -> Callable[..., None]:
    return options.warn or base_warn


# =============================================================================
# Structural directives
# =============================================================================

@dataclass
class ForParseResult:
    """Parsed ``v-for`` expression."""

    for_exp: str
    alias: str
    iterator1: Optional[str] = None
    iterator2: Optional[str] = None


def parse_for(exp: str) -> Optional[ForParseResult]:
    """
    Parse ``alias in source`` / ``(alias, i, j) of source``.

    Example:
        >>> parse_for("(item, index) in items")
        ForParseResult(for_exp='items', alias='item', iterator1='index', iterator2=None)
    """
    in_match = for_alias_re.search(exp)
    if not in_match:
        return None

    alias = strip_parens_re.sub("", in_match.group(1).strip())
    result = ForParseResult(for_exp=in_match.group(2).strip(), alias=alias)

    iterator_match = for_iterator_re.search(alias)
    if iterator_match:
        result.alias = for_iterator_re.sub("", alias, count=1).strip()
        result.iterator1 = iterator_match.group(1).strip()
        if iterator_match.group(2):
            result.iterator2 = iterator_match.group(2).strip()
    return result


def process_for(el: ASTElement, options: Optional[CompilerOptions] = None) -> None:
    exp = get_and_remove_attr(el, "v-for")
    if not exp:
        return

    result = parse_for(exp)
    if result:
        el.for_exp = result.for_exp
        el.alias = result.alias
        el.iterator1 = result.iterator1
        el.iterator2 = result.iterator2
    elif options is not None and options.dev:
        _warn_of(options)(f"Invalid v-for expression: {exp}", el.raw_attrs_map.get("v-for"))


def process_if(el: ASTElement) -> None:
    exp = get_and_remove_attr(el, "v-if")
    if exp:
        el.if_exp = exp
        add_if_condition(el, IfCondition(exp=exp, block=el))
    else:
        if get_and_remove_attr(el, "v-else") is not None:
            el.is_else = True
        elseif = get_and_remove_attr(el, "v-else-if")
        if elseif:
            el.elseif_exp = elseif


def add_if_condition(el: ASTElement, condition: IfCondition) -> None:
    """Append a branch to ``el``'s v-if chain."""
    if el.if_conditions is None:
        el.if_conditions = []
    el.if_conditions.append(condition)


def process_once(el: ASTElement) -> None:
    if get_and_remove_attr(el, "v-once") is not None:
        el.once = True


def process_pre(el: ASTElement) -> None:
    if get_and_remove_attr(el, "v-pre") is not None:
        el.pre = True


def process_raw_attrs(el: ASTElement) -> None:
    """Inside v-pre every attribute is kept as a literal."""
    if el.attrs_list:
        el.attrs = []
        for attr in el.attrs_list:
            el.attrs.append(ASTAttr(attr.name, quote(attr.value), start=attr.start, end=attr.end))
    elif not el.pre:
        el.plain = True


# =============================================================================
# Generic processing
# =============================================================================

def process_element(el: ASTElement, options: CompilerOptions) -> ASTElement:
    """
    Consume key, ref, slots, component markers and attributes of ``el``.

    Runs the module ``transform_node`` hooks between component processing
    and attribute processing.
    """
    warn = _warn_of(options)

    process_key(el, options)
    el.plain = not el.key and not el.scoped_slots and not el.attrs_list
    process_ref(el)
    process_slot_content(el, options)
    process_slot_outlet(el, options)
    process_component(el)

    for transform in options.modules.pluck("transform_node"):
        el = transform(el, options) or el

    process_attrs(el, options, warn)
    el.advance(NodeState.PROCESSED)
    return el


def process_key(el: ASTElement, options: CompilerOptions) -> None:
    exp = get_binding_attr(el, "key")
    if not exp:
        return

    if options.dev:
        warn = _warn_of(options)
        if el.tag == "template":
            warn(
                "<template> cannot be keyed. Place the key on real elements instead.",
                get_raw_binding_attr(el, "key"),
            )
        if el.for_exp:
            iterator = el.iterator2 or el.iterator1
            parent = el.parent
            if iterator and iterator == exp and parent and parent.tag == "transition-group":
                warn(
                    "Do not use v-for index as key on <transition-group> children, "
                    "this is the same as not using keys.",
                    get_raw_binding_attr(el, "key"),
                    True,
                )
    el.key = exp


def process_ref(el: ASTElement) -> None:
    ref = get_binding_attr(el, "ref")
    if ref:
        el.ref = ref
        el.ref_in_for = check_in_for(el)


def check_in_for(el: ASTElement) -> bool:
    """Whether ``el`` or an ancestor carries v-for."""
    node: Optional[ASTElement] = el
    while node is not None:
        if node.for_exp is not None:
            return True
        node = node.parent
    return False


def maybe_component(el: ASTElement, options: CompilerOptions) -> bool:
    is_value = el.attrs_map.get("is")
    reserved = options.is_reserved_tag(is_value) if is_value else options.is_reserved_tag(el.tag)
    return bool(
        el.component
        or el.attrs_map.get(":is")
        or el.attrs_map.get("v-bind:is")
        or not reserved
    )


def process_slot_content(el: ASTElement, options: CompilerOptions) -> None:
    """Handle ``slot``, ``slot-scope``, ``scope`` and ``v-slot`` / ``#name``."""
    warn = _warn_of(options)
    dev = options.dev

    if el.tag == "template":
        slot_scope = get_and_remove_attr(el, "scope")
        if dev and slot_scope:
            warn(
                'the "scope" attribute for scoped slots have been deprecated and '
                'replaced by "slot-scope" since 2.5. The new "slot-scope" attribute '
                "can also be used on plain elements in addition to <template> to "
                "denote scoped slots.",
                el.raw_attrs_map.get("scope"),
                True,
            )
        el.slot_scope = slot_scope or get_and_remove_attr(el, "slot-scope")
    else:
        slot_scope = get_and_remove_attr(el, "slot-scope")
        if slot_scope:
            if dev and el.attrs_map.get("v-for"):
                warn(
                    f"Ambiguous combined usage of slot-scope and v-for on <{el.tag}> "
                    "(v-for takes higher priority). Use a wrapper <template> for the "
                    "scoped slot to make it clearer.",
                    el.raw_attrs_map.get("slot-scope"),
                    True,
                )
            el.slot_scope = slot_scope

    slot_target = get_binding_attr(el, "slot")
    if slot_target:
        el.slot_target = '"default"' if slot_target == '""' else slot_target
        el.slot_target_dynamic = bool(el.attrs_map.get(":slot") or el.attrs_map.get("v-bind:slot"))
        if el.tag != "template" and not el.slot_scope:
            add_attr(el, "slot", slot_target, get_raw_binding_attr(el, "slot"))

    slot_binding = get_and_remove_attr_by_regex(el, slot_re)
    if not slot_binding:
        return

    if el.tag == "template":
        if dev:
            if el.slot_target or el.slot_scope:
                warn("Unexpected mixed usage of different slot syntaxes.", el)
            if el.parent and not maybe_component(el.parent, options):
                warn(
                    "<template v-slot> can only appear at the root level inside "
                    "the receiving component",
                    el,
                )
        name, dynamic = get_slot_name(slot_binding, options)
        el.slot_target = name
        el.slot_target_dynamic = dynamic
        el.slot_scope = slot_binding.value or EMPTY_SLOT_SCOPE_TOKEN
        return

    if dev:
        if not maybe_component(el, options):
            warn("v-slot can only be used on components or <template>.", slot_binding)
        if el.slot_scope or el.slot_target:
            warn("Unexpected mixed usage of different slot syntaxes.", el)
        if el.scoped_slots:
            warn(
                "To avoid scope ambiguity, the default slot should also use "
                "<template> syntax when there are other named slots.",
                slot_binding,
            )

    if el.scoped_slots is None:
        el.scoped_slots = {}
    name, dynamic = get_slot_name(slot_binding, options)
    container = create_ast_element("template", [], el)
    el.scoped_slots[name] = container
    container.slot_target = name
    container.slot_target_dynamic = dynamic

    kept: List[ASTNode] = []
    for child in el.children:
        if not getattr(child, "slot_scope", None):
            if isinstance(child, ASTElement):
                child.parent = container
            kept.append(child)
    container.children = kept
    container.slot_scope = slot_binding.value or EMPTY_SLOT_SCOPE_TOKEN

    el.children = []
    el.plain = False


def get_slot_name(binding: ASTAttr, options: CompilerOptions) -> Tuple[str, bool]:
    """Slot name code and dynamic flag of a ``v-slot`` attribute."""
    name = slot_re.sub("", binding.name, count=1)
    if not name:
        if binding.name[:1] != "#":
            name = "default"
        elif options.dev:
            _warn_of(options)("v-slot shorthand syntax requires a slot name.", binding)

    if dynamic_arg_re.match(name):
        return name[1:-1], True
    return f'"{name}"', False


def process_slot_outlet(el: ASTElement, options: CompilerOptions) -> None:
    if el.tag != "slot":
        return
    el.slot_name = get_binding_attr(el, "name")
    if options.dev and el.key:
        _warn_of(options)(
            "`key` does not work on <slot> because slots are abstract outlets "
            "and can possibly expand into multiple elements. "
            "Use the key on a wrapping element instead.",
            get_raw_binding_attr(el, "key"),
        )


def process_component(el: ASTElement) -> None:
    binding = get_binding_attr(el, "is")
    if binding:
        el.component = binding
    if get_and_remove_attr(el, "inline-template") is not None:
        el.inline_template = True


def parse_modifiers(name: str) -> Optional[Modifiers]:
    """``"click.stop.prevent"`` -> ``{"stop": True, "prevent": True}``"""
    found = modifier_re.findall(name)
    if not found:
        return None
    return {m[1:]: True for m in found}


def process_attrs(el: ASTElement, options: CompilerOptions, warn: Callable[..., None]) -> None:
    """
    Turn the remaining raw attributes into bindings, handlers and directives.

    Compile-time directive handlers run once every attribute of the element
    has been seen; their return value decides whether the directive still
    needs a runtime object.
    """
    first_directive = len(el.directives or ())

    for attr in list(el.attrs_list):
        name = raw_name = attr.name
        value = attr.value

        if not dir_re.search(name):
            if options.dev and parse_text(value, options.delimiters):
                warn(
                    f'{name}="{value}": '
                    "Interpolation inside attributes has been removed. "
                    "Use v-bind or the colon shorthand instead. For example, "
                    'instead of <div id="{{ val }}">, use <div :id="val">.',
                    attr,
                )
            add_attr(el, name, quote(value), attr)
            if (
                not el.component
                and name == "muted"
                and options.must_use_prop(el.tag, el.attrs_map.get("type"), name)
            ):
                add_prop(el, name, "True", attr)
            continue

        el.has_bindings = True
        modifiers = parse_modifiers(dir_re.sub("", name, count=1))
        if modifiers:
            name = modifier_re.sub("", name)

        if bind_re.search(name):
            _process_bind(el, attr, name, value, modifiers, options, warn)
        elif on_re.search(name):
            name = on_re.sub("", name, count=1)
            is_dynamic = bool(dynamic_arg_re.match(name))
            if is_dynamic:
                name = name[1:-1]
            add_handler(el, name, value, modifiers, False, warn, attr, is_dynamic)
        else:
            name = dir_re.sub("", name, count=1)
            arg_match = arg_re.search(name)
            arg = arg_match.group(1) if arg_match else None
            is_dynamic = False
            if arg:
                name = name[: -(len(arg) + 1)]
                if dynamic_arg_re.match(arg):
                    arg = arg[1:-1]
                    is_dynamic = True
            add_directive(el, name, raw_name, value, arg, is_dynamic, modifiers, attr)
            if options.dev and name == "model":
                check_for_alias_model(el, value, warn)

    directive_warn = warn if options.dev else no
    for directive in (el.directives or [])[first_directive:]:
        handler = options.directives.get(directive.name) or BASE_DIRECTIVES.get(directive.name)
        if handler is not None:
            directive.needs_runtime = bool(handler(el, directive, directive_warn))


def _process_bind(
    el: ASTElement,
    attr: ASTAttr,
    name: str,
    value: str,
    modifiers: Optional[Modifiers],
    options: CompilerOptions,
    warn: Callable[..., None],
) -> None:
    name = bind_re.sub("", name, count=1)
    value = parse_filters(value)
    is_dynamic = bool(dynamic_arg_re.match(name))
    if is_dynamic:
        name = name[1:-1]

    if options.dev and not value.strip():
        warn(f'The value for a v-bind expression cannot be empty. Found in "v-bind:{name}"')

    if modifiers:
        if modifiers.get("prop") and not is_dynamic:
            name = camelize(name)
            if name == "innerHtml":
                name = "innerHTML"
        if modifiers.get("camel") and not is_dynamic:
            name = camelize(name)
        if modifiers.get("sync"):
            sync_gen = gen_assignment_code(value, "event")
            if not is_dynamic:
                add_handler(el, f"update:{camelize(name)}", sync_gen, None, False, warn, attr)
                if hyphenate(name) != camelize(name):
                    add_handler(el, f"update:{hyphenate(name)}", sync_gen, None, False, warn, attr)
            else:
                add_handler(el, f'"update:" + ({name})', sync_gen, None, False, warn, attr, True)

    if (modifiers and modifiers.get("prop")) or (
        not el.component and options.must_use_prop(el.tag, el.attrs_map.get("type"), name)
    ):
        add_prop(el, name, value, attr, is_dynamic)
    else:
        add_attr(el, name, value, attr, is_dynamic)


def check_for_alias_model(el: ASTElement, value: str, warn: Callable[..., None]) -> None:
    node: Optional[ASTElement] = el
    while node is not None:
        if node.for_exp and node.alias == value:
            warn(
                f'<{el.tag} v-model="{value}">: '
                "You are binding v-model directly to a v-for iteration alias. "
                "This will not be able to modify the v-for source array because "
                "writing to the alias is like modifying a function local variable. "
                "Consider using an array of objects and use v-model on an object property instead.",
                el.raw_attrs_map.get("v-model"),
            )
        node = node.parent


def is_text_tag(el: ASTElement) -> bool:
    return el.tag in ("script", "style")


def is_forbidden_tag(el: ASTElement) -> bool:
    type_ = el.attrs_map.get("type")
    return el.tag == "style" or (
        el.tag == "script" and (not type_ or type_ == "text/javascript")
    )


# =============================================================================
# Builder
# =============================================================================

@dataclass
class BuilderState:
    """
    Mutable builder state.

    Attributes:
        root: First element seen
        current_parent: Element receiving children
        stack: Open elements
        in_v_pre: Inside a v-pre subtree
        in_pre: Inside a whitespace-preserving tag
        warned: A one-time root warning was already emitted
    """

    root: Optional[ASTElement] = None
    current_parent: Optional[ASTElement] = None
    stack: List[ASTElement] = field(default_factory=list)
    in_v_pre: bool = False
    in_pre: bool = False
    warned: bool = False


class ASTBuilder:
    """
    Builds the AST for one template.

    Args:
        template: Template source
        options: Compiler options
    """

    def __init__(self, template: str, options: CompilerOptions):
        self.template = template
        self.options = options
        self.warn = _warn_of(options)
        self.state = BuilderState()

        modules = options.modules
        self.pre_transforms = modules.pluck("pre_transform_node")
        self.post_transforms = modules.pluck("post_transform_node")

    def build(self) -> Optional[ASTElement]:
        """Consume the scanner and return the root element."""
        scanner = HTMLScanner(self.template, self.options, self.warn)
        for event in scanner.scan():
            if isinstance(event, ElementStart):
                self.start(event)
            elif isinstance(event, ElementEnd):
                self.end(event)
            elif isinstance(event, Text):
                self.chars(event)
            elif isinstance(event, Comment):
                self.comment(event)
        return self.state.root

    def warn_once(self, message: str, range: Any = None) -> None:
        if not self.state.warned:
            self.state.warned = True
            self.warn(message, range)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def start(self, event: ElementStart) -> None:
        state = self.state
        options = self.options
        parent = state.current_parent

        ns = (parent.ns if parent else None) or options.get_tag_namespace(event.tag)

        element = create_ast_element(event.tag, event.attrs, parent)
        if ns:
            element.ns = ns

        if options.output_source_range:
            element.start = event.start
            element.end = event.end
            element.raw_attrs_map = {attr.name: attr for attr in element.attrs_list}

        if options.dev:
            seen = set()
            for attr in event.attrs:
                if attr.name in seen:
                    self.warn(f"duplicate attribute: {attr.name}", attr)
                seen.add(attr.name)
                if invalid_attribute_re.search(attr.name):
                    self.warn(
                        "Invalid dynamic argument expression: attribute names cannot contain "
                        "spaces, quotes, <, >, / or =.",
                        SourceRange(attr.start + attr.name.find("["), attr.start + len(attr.name))
                        if options.output_source_range and attr.start is not None
                        else None,
                    )

        if is_forbidden_tag(element):
            element.forbidden = True
            if options.dev:
                self.warn(
                    "Templates should only be responsible for mapping the state to the "
                    "UI. Avoid placing tags with side-effects in your templates, such as "
                    f"<{event.tag}>, as they will not be parsed.",
                    SourceRange(element.start),
                )

        for transform in self.pre_transforms:
            element = transform(element, options) or element

        if not state.in_v_pre:
            process_pre(element)
            if element.pre:
                state.in_v_pre = True

        if options.is_pre_tag(element.tag):
            state.in_pre = True

        if state.in_v_pre:
            process_raw_attrs(element)
        elif not element.processed:
            process_for(element, options)
            process_if(element)
            process_once(element)
            element.advance(NodeState.STRUCTURAL)

        if state.root is None:
            state.root = element
            if options.dev:
                self.check_root_constraints(element)

        if not event.unary:
            state.current_parent = element
            state.stack.append(element)
        else:
            self.close_element(element)

    def end(self, event: ElementEnd) -> None:
        state = self.state
        element = state.stack.pop()
        state.current_parent = state.stack[-1] if state.stack else None
        if self.options.output_source_range:
            element.end = event.end
        self.close_element(element)

    def chars(self, event: Text) -> None:
        state = self.state
        options = self.options
        text = event.text
        parent = state.current_parent

        if parent is None:
            if options.dev:
                if text == self.template:
                    self.warn_once(
                        "Component template requires a root element, rather than just text.",
                        SourceRange(event.start),
                    )
                else:
                    text = text.strip()
                    if text:
                        self.warn_once(
                            f'text "{text}" outside root element will be ignored.',
                            SourceRange(event.start),
                        )
            return

        children = parent.children
        whitespace = options.whitespace
        if state.in_pre or text.strip():
            text = text if is_text_tag(parent) else decode_html(text)
        elif not children:
            text = ""
        elif whitespace:
            if whitespace == "condense":
                text = "" if line_break_re.search(text) else " "
            else:
                text = " "
        else:
            text = " " if options.preserve_whitespace else ""

        if not text:
            return

        if not state.in_pre and whitespace == "condense":
            text = whitespace_re.sub(" ", text)

        child: Optional[ASTNode] = None
        result = None
        if not state.in_v_pre and text != " ":
            result = parse_text(text, options.delimiters)
        if result:
            child = ASTExpression(expression=result.expression, tokens=result.tokens, text=text)
        elif text != " " or not children or getattr(children[-1], "text", None) != " ":
            child = ASTText(text=text)

        if child is not None:
            if options.output_source_range:
                child.start = event.start
                child.end = event.end
            children.append(child)

    def comment(self, event: Comment) -> None:
        parent = self.state.current_parent
        if parent is None:
            return
        child = ASTText(text=event.text, is_comment=True)
        if self.options.output_source_range:
            child.start = event.start
            child.end = event.end
        parent.children.append(child)

    # -------------------------------------------------------------------------
    # Closing
    # -------------------------------------------------------------------------

    def close_element(self, element: ASTElement) -> None:
        state = self.state
        options = self.options

        self.trim_ending_whitespace(element)
        if not state.in_v_pre and not element.processed:
            element = process_element(element, options)

        if not state.stack and element is not state.root:
            root = state.root
            if root is not None and root.if_exp and (element.elseif_exp or element.is_else):
                if options.dev:
                    self.check_root_constraints(element)
                add_if_condition(root, IfCondition(exp=element.elseif_exp, block=element))
            elif options.dev:
                self.warn_once(
                    "Component template should contain exactly one root element. "
                    "If you are using v-if on multiple elements, "
                    "use v-else-if to chain them instead.",
                    SourceRange(element.start),
                )

        parent = state.current_parent
        if parent is not None and not element.forbidden:
            if element.elseif_exp or element.is_else:
                self.process_if_conditions(element, parent)
            else:
                if element.slot_scope:
                    name = element.slot_target or '"default"'
                    if parent.scoped_slots is None:
                        parent.scoped_slots = {}
                    parent.scoped_slots[name] = element
                parent.children.append(element)
                element.parent = parent

        element.children = [c for c in element.children if not getattr(c, "slot_scope", None)]
        self.trim_ending_whitespace(element)

        if element.pre:
            state.in_v_pre = False
        if options.is_pre_tag(element.tag):
            state.in_pre = False

        for transform in self.post_transforms:
            transform(element, options)

    def trim_ending_whitespace(self, el: ASTElement) -> None:
        if self.state.in_pre:
            return
        children = el.children
        while (
            children
            and children[-1].type is NodeType.TEXT
            and children[-1].text == " "  # type: ignore[union-attr]
        ):
            children.pop()

    def process_if_conditions(self, el: ASTElement, parent: ASTElement) -> None:
        prev = self.find_prev_element(parent.children)
        if prev is not None and prev.if_exp:
            add_if_condition(prev, IfCondition(exp=el.elseif_exp, block=el))
        elif self.options.dev:
            label = f'else-if="{el.elseif_exp}"' if el.elseif_exp else "else"
            self.warn(
                f"v-{label} used on element <{el.tag}> without corresponding v-if.",
                el.raw_attrs_map.get("v-else-if" if el.elseif_exp else "v-else"),
            )

    def find_prev_element(self, children: List[ASTNode]) -> Optional[ASTElement]:
        """Pop text nodes off ``children`` until an element is found."""
        while children:
            last = children[-1]
            if isinstance(last, ASTElement):
                return last
            if self.options.dev and last.text != " ":
                self.warn(
                    f'text "{last.text.strip()}" between v-if and v-else(-if) will be ignored.',
                    last,
                )
            children.pop()
        return None

    def check_root_constraints(self, el: ASTElement) -> None:
        if el.tag in ("slot", "template"):
            self.warn_once(
                f"Cannot use <{el.tag}> as component root element because it may "
                "contain multiple nodes.",
                SourceRange(el.start),
            )
        if "v-for" in el.attrs_map:
            self.warn_once(
                "Cannot use v-for on stateful component root element because "
                "it renders multiple elements.",
                el.raw_attrs_map.get("v-for"),
            )


def parse(template: str, options: Optional[CompilerOptions] = None) -> Optional[ASTElement]:
    """
    Build the AST of ``template``.

    Args:
        template: Template source (already trimmed by the driver)
        options: Compiler options

    Returns:
        The root element, or None when the template holds no element
    """
    return ASTBuilder(template, options or CompilerOptions()).build()
