"""
vcompiler Code Generator
========================

Generates render source from an optimized AST.

The render source is one Python expression over the runtime helpers
(``_c``, ``_v``, ``_l``, ...). Static roots are hoisted into
``static_render_fns`` and referenced with ``_m(index)``.

Example:
    <ul><li v-for="item in items" :key="item.id">{{ item.name }}</li></ul>

    _c("ul", _l((items), lambda item: _c("li", {"key": item.id},
        [_v(_s(item.name))])), 0)

The AST is treated as read-only. Which structural stages (static, once,
for, if) have already been expanded for a node is tracked on the
``CodegenState``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from vcompiler.codegen.events import gen_handlers
from vcompiler.codegen.literals import quote, to_source, transform_special_newlines
from vcompiler.codegen.params import gen_lambda
from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import CompilerStateError, SourceRange
from vcompiler.parser.builder import EMPTY_SLOT_SCOPE_TOKEN, base_warn
from vcompiler.parser.nodes import (
    ASTAttr,
    ASTElement,
    ASTExpression,
    ASTNode,
    ASTText,
    IfCondition,
)
from vcompiler.utils.helpers import camelize, capitalize

# Binding metadata types that resolve a component tag to a setup binding.
SETUP_CONST = "setup-const"
SETUP_REACTIVE_CONST = "setup-reactive-const"
SETUP_LET = "setup-let"
SETUP_REF = "setup-ref"
SETUP_MAYBE_REF = "setup-maybe-ref"


class Stage(Enum):
    """Structural expansions applied at most once per node."""

    STATIC = "static"
    ONCE = "once"
    FOR = "for"
    IF = "if"


@dataclass
class CodegenResult:
    """Render source plus hoisted static render sources."""

    render: str
    static_render_fns: List[str] = field(default_factory=list)


class CodegenState:
    """
    Per-generation state.

    Attributes:
        options: Compiler options
        warn: Diagnostic sink
        transforms: Module ``transform_code`` hooks
        data_gen_fns: Module ``gen_data`` hooks
        once_id: Next ``_o`` id
        static_render_fns: Hoisted static render sources
        pre: Generating inside a v-pre static root
    """

    def __init__(self, options: CompilerOptions):
        self.options = options
        self.warn = options.warn or base_warn
        self.transforms = options.modules.pluck("transform_code")
        self.data_gen_fns = options.modules.pluck("gen_data")
        self.once_id = 0
        self.static_render_fns: List[str] = []
        self.pre = False
        self._consumed: Dict[int, Set[Stage]] = {}

    def maybe_component(self, el: ASTElement) -> bool:
        return bool(el.component) or not self.options.is_reserved_tag(el.tag)

    def is_consumed(self, el: ASTElement, stage: Stage) -> bool:
        return stage in self._consumed.get(id(el), ())

    def consume(self, el: ASTElement, stage: Stage) -> None:
        """
        Mark ``stage`` as expanded for ``el``.

        Raises:
            CompilerStateError: If the stage was already expanded
        """
        stages = self._consumed.setdefault(id(el), set())
        if stage in stages:
            raise CompilerStateError(f"<{el.tag}> {stage.value} stage generated twice")
        stages.add(stage)


def generate(ast: Optional[ASTElement], options: CompilerOptions) -> CodegenResult:
    """
    Generate render source for ``ast``.

    Returns ``_c("div")`` for an empty template and ``None`` for a
    ``<script>`` root.
    """
    state = CodegenState(options)
    if ast is None:
        code = '_c("div")'
    elif ast.tag == "script":
        code = "None"
    else:
        code = gen_element(ast, state)
    return CodegenResult(render=code, static_render_fns=state.static_render_fns)


def effective_pre(el: ASTElement) -> bool:
    """Whether ``el`` or an ancestor carries v-pre."""
    node: Optional[ASTElement] = el
    while node is not None:
        if node.pre:
            return True
        node = node.parent
    return False


# =============================================================================
# Elements
# =============================================================================

def gen_element(el: ASTElement, state: CodegenState) -> str:
    if el.static_root and not state.is_consumed(el, Stage.STATIC):
        return gen_static(el, state)
    if el.once and not state.is_consumed(el, Stage.ONCE):
        return gen_once(el, state)
    if el.for_exp and not state.is_consumed(el, Stage.FOR):
        return gen_for(el, state)
    if el.if_exp and not state.is_consumed(el, Stage.IF):
        return gen_if(el, state)
    if el.tag == "template" and not el.slot_target and not state.pre:
        return gen_children(el, state) or "None"
    if el.tag == "slot":
        return gen_slot(el, state)

    if el.component:
        code = gen_component(el.component, el, state)
    else:
        data = None
        maybe_component = state.maybe_component(el)
        if not el.plain or (effective_pre(el) and maybe_component):
            data = gen_data(el, state)

        tag = None
        bindings = state.options.bindings
        if maybe_component and bindings and bindings.get("__isScriptSetup") is not False:
            tag = check_binding_type(bindings, el.tag)
        if not tag:
            tag = quote(el.tag)

        children = None if el.inline_template else gen_children(el, state, True)
        args = [tag]
        if data:
            args.append(data)
        if children:
            args.append(children)
        code = f"_c({', '.join(args)})"

    for transform in state.transforms:
        code = transform(el, code)
    return code


def check_binding_type(bindings: Dict[str, str], key: str) -> Optional[str]:
    """Name of the setup binding a component tag resolves to, if any."""
    camel_name = camelize(key)
    pascal_name = capitalize(camel_name)

    def check(binding_type: str) -> Optional[str]:
        for name in (key, camel_name, pascal_name):
            if bindings.get(name) == binding_type:
                return name
        return None

    for binding_type in (SETUP_CONST, SETUP_REACTIVE_CONST, SETUP_LET, SETUP_REF, SETUP_MAYBE_REF):
        found = check(binding_type)
        if found:
            return found
    return None


def gen_static(el: ASTElement, state: CodegenState) -> str:
    state.consume(el, Stage.STATIC)
    original_pre = state.pre
    if effective_pre(el):
        state.pre = True
    state.static_render_fns.append(gen_element(el, state))
    state.pre = original_pre
    index = len(state.static_render_fns) - 1
    return f"_m({index}, True)" if el.static_in_for else f"_m({index})"


def gen_once(el: ASTElement, state: CodegenState) -> str:
    if not state.is_consumed(el, Stage.ONCE):
        state.consume(el, Stage.ONCE)

    if el.if_exp and not state.is_consumed(el, Stage.IF):
        return gen_if(el, state)

    if el.static_in_for:
        key = ""
        parent = el.parent
        while parent is not None:
            if parent.for_exp:
                key = parent.key or ""
                break
            parent = parent.parent
        if not key:
            if state.options.dev:
                state.warn(
                    "v-once can only be used inside v-for that is keyed. ",
                    el.raw_attrs_map.get("v-once"),
                )
            return gen_element(el, state)
        code = f"_o({gen_element(el, state)}, {state.once_id}, {key})"
        state.once_id += 1
        return code

    return gen_static(el, state)


AltGen = Callable[[ASTElement, CodegenState], str]


def gen_if(
    el: ASTElement,
    state: CodegenState,
    alt_gen: Optional[AltGen] = None,
    alt_empty: Optional[str] = None,
) -> str:
    state.consume(el, Stage.IF)
    return gen_if_conditions(list(el.if_conditions or []), state, alt_gen, alt_empty)


def gen_if_conditions(
    conditions: List[IfCondition],
    state: CodegenState,
    alt_gen: Optional[AltGen] = None,
    alt_empty: Optional[str] = None,
) -> str:
    """Fold a v-if chain into nested conditional expressions."""
    if not conditions:
        return alt_empty or "_e()"

    condition = conditions[0]
    block = condition.block
    if alt_gen is not None:
        branch = alt_gen(block, state)
    elif block.once:
        branch = gen_once(block, state)
    else:
        branch = gen_element(block, state)

    if condition.exp:
        rest = gen_if_conditions(conditions[1:], state, alt_gen, alt_empty)
        return f"({branch}) if ({condition.exp}) else {rest}"
    return branch


def gen_for(
    el: ASTElement,
    state: CodegenState,
    alt_gen: Optional[AltGen] = None,
    alt_helper: Optional[str] = None,
) -> str:
    exp = el.for_exp
    alias = el.alias or ""

    if (
        state.options.dev
        and state.maybe_component(el)
        and el.tag not in ("slot", "template")
        and not el.key
    ):
        state.warn(
            f'<{el.tag} v-for="{alias} in {exp}">: component lists rendered with '
            "v-for should have explicit keys. "
            "See https://vuejs.org/guide/list.html#key for more info.",
            el.raw_attrs_map.get("v-for"),
            True,
        )

    state.consume(el, Stage.FOR)
    params = ", ".join(p for p in (alias, el.iterator1, el.iterator2) if p)
    body = (alt_gen or gen_element)(el, state)
    return f"{alt_helper or '_l'}(({exp}), {gen_lambda(params, body)})"


# =============================================================================
# Data object
# =============================================================================

def gen_data(el: ASTElement, state: CodegenState) -> str:
    """Assemble the data dict literal of ``el``."""
    entries: List[str] = []

    dirs = gen_directives(el)
    if dirs:
        entries.append(dirs)

    if el.key:
        entries.append(f'"key": {el.key}')
    if el.ref:
        entries.append(f'"ref": {el.ref}')
    if el.ref_in_for:
        entries.append('"refInFor": True')
    if effective_pre(el):
        entries.append('"pre": True')
    if el.component:
        entries.append(f'"tag": {quote(el.tag)}')

    for gen in state.data_gen_fns:
        entries.extend(gen(el))

    if el.attrs:
        entries.append(f'"attrs": {gen_props(el.attrs)}')
    if el.props:
        entries.append(f'"domProps": {gen_props(el.props)}')
    if el.events:
        entries.append(gen_handlers(el.events, False))
    if el.native_events:
        entries.append(gen_handlers(el.native_events, True))
    if el.slot_target and not el.slot_scope:
        entries.append(f'"slot": {el.slot_target}')
    if el.scoped_slots:
        entries.append(gen_scoped_slots(el, el.scoped_slots, state))
    if el.model:
        entries.append(
            f'"model": {{"value": {el.model["value"]}, '
            f'"callback": {el.model["callback"]}, '
            f'"expression": {el.model["expression"]}}}'
        )
    if el.inline_template:
        inline_template = gen_inline_template(el, state)
        if inline_template:
            entries.append(inline_template)

    data = "{" + ", ".join(entries) + "}"

    if el.dynamic_attrs:
        data = f"_b({data}, {quote(el.tag)}, {gen_props(el.dynamic_attrs)})"
    if el.wrap_data:
        data = el.wrap_data(data)
    if el.wrap_listeners:
        data = el.wrap_listeners(data)
    return data


def gen_directives(el: ASTElement) -> Optional[str]:
    """Runtime directive objects; compile-time-only directives are skipped."""
    if not el.directives:
        return None

    objects: List[str] = []
    for directive in el.directives:
        if not directive.needs_runtime:
            continue
        parts = [f'"name": {quote(directive.name)}', f'"rawName": {quote(directive.raw_name)}']
        if directive.value:
            parts.append(f'"value": ({directive.value})')
            parts.append(f'"expression": {quote(directive.value)}')
        if directive.arg:
            arg = directive.arg if directive.is_dynamic_arg else quote(directive.arg)
            parts.append(f'"arg": {arg}')
        if directive.modifiers:
            parts.append(f'"modifiers": {to_source(directive.modifiers)}')
        objects.append("{" + ", ".join(parts) + "}")

    if not objects:
        return None
    return '"directives": [' + ", ".join(objects) + "]"


def gen_inline_template(el: ASTElement, state: CodegenState) -> Optional[str]:
    ast = el.children[0] if el.children else None
    if state.options.dev and (len(el.children) != 1 or not isinstance(ast, ASTElement)):
        state.warn(
            "Inline-template components must have exactly one child element.",
            SourceRange(el.start),
        )
    if isinstance(ast, ASTElement):
        result = generate(ast, state.options)
        fns = ", ".join(quote(code) for code in result.static_render_fns)
        return (
            f'"inlineTemplate": {{"render": {quote(result.render)}, '
            f'"staticRenderFns": [{fns}]}}'
        )
    return None


def gen_scoped_slots(
    el: ASTElement,
    slots: Dict[str, ASTElement],
    state: CodegenState,
) -> str:
    needs_force_update = bool(el.for_exp) or any(
        slot.slot_target_dynamic or slot.if_exp or slot.for_exp or contains_slot_child(slot)
        for slot in slots.values()
    )
    needs_key = bool(el.if_exp)

    if not needs_force_update:
        parent = el.parent
        while parent is not None:
            if (parent.slot_scope and parent.slot_scope != EMPTY_SLOT_SCOPE_TOKEN) or parent.for_exp:
                needs_force_update = True
                break
            if parent.if_exp:
                needs_key = True
            parent = parent.parent

    generated = ", ".join(gen_scoped_slot(slot, state) for slot in slots.values())
    if needs_force_update:
        return f'"scopedSlots": _u([{generated}], None, True)'
    if needs_key:
        return f'"scopedSlots": _u([{generated}], None, False, {content_hash(generated)})'
    return f'"scopedSlots": _u([{generated}])'


def content_hash(text: str) -> int:
    """djb2 hash over UTF-16 code units, as an unsigned 32-bit integer."""
    encoded = text.encode("utf-16-le", "surrogatepass")
    units = [int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)]
    h = 5381
    for unit in reversed(units):
        h = _to_int32(h * 33) ^ unit
    return h & 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def contains_slot_child(node: ASTNode) -> bool:
    if isinstance(node, ASTElement):
        if node.tag == "slot":
            return True
        return any(contains_slot_child(child) for child in node.children)
    return False


def gen_scoped_slot(el: ASTElement, state: CodegenState) -> str:
    is_legacy_syntax = el.attrs_map.get("slot-scope")
    if el.if_exp and not state.is_consumed(el, Stage.IF) and not is_legacy_syntax:
        return gen_if(el, state, gen_scoped_slot, "None")
    if el.for_exp and not state.is_consumed(el, Stage.FOR):
        return gen_for(el, state, gen_scoped_slot)

    slot_scope = "" if el.slot_scope == EMPTY_SLOT_SCOPE_TOKEN else str(el.slot_scope)
    if el.tag == "template":
        children = gen_children(el, state) or "None"
        if el.if_exp and is_legacy_syntax:
            body = f"({children}) if ({el.if_exp}) else None"
        else:
            body = children
    else:
        body = gen_element(el, state)

    fn = gen_lambda(slot_scope, body)
    proxy = "" if slot_scope else ', "proxy": True'
    return f'{{"key": {el.slot_target or quote("default")}, "fn": {fn}{proxy}}}'


# =============================================================================
# Children and leaves
# =============================================================================

def gen_children(
    el: ASTElement,
    state: CodegenState,
    check_skip: bool = False,
) -> Optional[str]:
    """Children list source, with the normalization hint when ``check_skip``."""
    children = el.children
    if not children:
        return None

    first = children[0]
    if (
        len(children) == 1
        and isinstance(first, ASTElement)
        and first.for_exp
        and first.tag not in ("template", "slot")
    ):
        code = gen_element(first, state)
        if check_skip:
            return f"{code}, {1 if state.maybe_component(first) else 0}"
        return code

    normalization = get_normalization_type(children, state) if check_skip else 0
    code = "[" + ", ".join(gen_node(child, state) for child in children) + "]"
    if normalization:
        return f"{code}, {normalization}"
    return code


def get_normalization_type(children: List[ASTNode], state: CodegenState) -> int:
    """
    0: no normalization needed
    1: simple normalization (possible component children)
    2: full normalization (v-for, <template> or <slot> children)
    """
    result = 0
    for node in children:
        if not isinstance(node, ASTElement):
            continue
        blocks = [c.block for c in node.if_conditions or ()]
        if needs_normalization(node) or any(needs_normalization(b) for b in blocks):
            return 2
        if state.maybe_component(node) or any(state.maybe_component(b) for b in blocks):
            result = 1
    return result


def needs_normalization(el: ASTElement) -> bool:
    return el.for_exp is not None or el.tag in ("template", "slot")


def gen_node(node: ASTNode, state: CodegenState) -> str:
    if isinstance(node, ASTElement):
        return gen_element(node, state)
    if isinstance(node, ASTText) and node.is_comment:
        return gen_comment(node)
    return gen_text(node)


def gen_text(node: ASTNode) -> str:
    if isinstance(node, ASTExpression):
        return f"_v({node.expression})"
    assert isinstance(node, ASTText)
    return f"_v({quote(node.text)})"


def gen_comment(comment: ASTText) -> str:
    return f"_e({quote(comment.text)})"


def gen_slot(el: ASTElement, state: CodegenState) -> str:
    slot_name = el.slot_name or quote("default")
    children = gen_children(el, state)
    args = [slot_name]
    if children:
        args.append(f"lambda: {children}")

    attrs = None
    if el.attrs or el.dynamic_attrs:
        attrs = gen_props([
            ASTAttr(name=camelize(attr.name), value=attr.value, dynamic=attr.dynamic)
            for attr in (el.attrs or []) + (el.dynamic_attrs or [])
        ])
    bind = el.attrs_map.get("v-bind")

    if (attrs or bind) and not children:
        args.append("None")
    if attrs:
        args.append(attrs)
    if bind:
        if not attrs:
            args.append("None")
        args.append(bind)
    return f"_t({', '.join(args)})"


def gen_component(component_name: str, el: ASTElement, state: CodegenState) -> str:
    children = None if el.inline_template else gen_children(el, state, True)
    args = [component_name, gen_data(el, state)]
    if children:
        args.append(children)
    return f"_c({', '.join(args)})"


def gen_props(props: List[ASTAttr]) -> str:
    """Static props as a dict literal; dynamic names merged through ``_d``."""
    static_props: List[str] = []
    dynamic_props: List[str] = []
    for prop in props:
        value = transform_special_newlines(prop.value)
        if prop.dynamic:
            dynamic_props.append(f"{prop.name}, {value}")
        else:
            static_props.append(f"{quote(prop.name)}: {value}")

    static_code = "{" + ", ".join(static_props) + "}"
    if dynamic_props:
        return f"_d({static_code}, [{', '.join(dynamic_props)}])"
    return static_code
