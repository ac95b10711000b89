"""
vcompiler AST Nodes
===================

The element/text/comment tree produced by the builder.

Node kinds:
    ELEMENT     a tag with attributes, directives and children
    EXPRESSION  text containing interpolations
    TEXT        literal text, or a comment when ``is_comment`` is set

Lifecycle of an element (``NodeState``):
    UNPROCESSED  created from a start tag
    STRUCTURAL   v-for / v-if / v-once consumed
    PROCESSED    key, ref, slots, attributes and directives consumed

Nodes are mutated only while the tree is being built. The optimizer sets
the ``static*`` flags and the code generator treats the tree as read-only.
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Union

from vcompiler.core.errors import CompilerStateError


class NodeType(Enum):
    """AST node types."""

    ELEMENT = 1
    EXPRESSION = 2
    TEXT = 3


class NodeState(IntEnum):
    """Processing state of an element; only ever moves forward."""

    UNPROCESSED = 0
    STRUCTURAL = 1
    PROCESSED = 2


Modifiers = Dict[str, bool]


@dataclass
class ASTAttr:
    """An attribute as written in the template, or a generated binding."""

    name: str
    value: Any
    dynamic: Optional[bool] = None
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class ASTDirective:
    """
    A generic directive descriptor (``v-show``, ``v-model``, custom ones).

    Attributes:
        name: Directive name without prefix (``"model"``)
        raw_name: Attribute name as written (``"v-model.trim"``)
        value: Expression text
        arg: Argument (``v-dir:arg``); an expression when ``is_dynamic_arg``
        modifiers: Ordered modifier flags
        needs_runtime: Whether a runtime directive object is emitted;
            decided by the compile-time handler, if any
    """

    name: str
    raw_name: str
    value: str
    arg: Optional[str] = None
    is_dynamic_arg: bool = False
    modifiers: Optional[Modifiers] = None
    start: Optional[int] = None
    end: Optional[int] = None
    needs_runtime: bool = True


@dataclass
class ASTHandler:
    """A single event handler."""

    value: str
    dynamic: bool = False
    modifiers: Optional[Modifiers] = None
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class IfCondition:
    """One branch of a v-if chain; ``exp`` is None for the ``v-else`` arm."""

    exp: Optional[str]
    block: "ASTElement"


@dataclass
class ASTText:
    """Literal text or a comment."""

    text: str
    is_comment: bool = False
    start: Optional[int] = None
    end: Optional[int] = None
    static: bool = False
    type: NodeType = NodeType.TEXT


@dataclass
class ASTExpression:
    """
    Text with interpolations.

    Attributes:
        expression: Combined display expression (``"a" + _s(b)``)
        tokens: Literal strings and ``{"@binding": exp}`` entries
        text: Source text
    """

    expression: str
    tokens: List[Union[str, Dict[str, str]]]
    text: str
    start: Optional[int] = None
    end: Optional[int] = None
    static: bool = False
    type: NodeType = NodeType.EXPRESSION


Handlers = Dict[str, Union[ASTHandler, List[ASTHandler]]]

# Fields that never make a node dynamic, before module contributions.
BASE_STATIC_KEYS = (
    "type", "tag", "attrs_list", "attrs_map", "plain", "parent",
    "children", "attrs", "start", "end", "raw_attrs_map",
)

# Bookkeeping fields excluded from the static-key check.
_BOOKKEEPING_FIELDS = frozenset({
    "state", "static", "static_root", "static_in_for", "module_data",
})


@dataclass(eq=False)
class ASTElement:
    """
    Element node.

    Raw attributes live in ``attrs_list`` (consumed as processed) and
    ``attrs_map`` (kept intact, last duplicate wins). Directive-derived
    fields stay at their defaults until the matching directive is seen.
    """

    tag: str
    attrs_list: List[ASTAttr] = field(default_factory=list)
    attrs_map: Dict[str, Any] = field(default_factory=dict)
    raw_attrs_map: Dict[str, ASTAttr] = field(default_factory=dict)
    parent: Optional["ASTElement"] = None
    children: List["ASTNode"] = field(default_factory=list)
    type: NodeType = NodeType.ELEMENT
    ns: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None

    plain: bool = False
    pre: bool = False
    forbidden: bool = False
    has_bindings: bool = False

    # v-for
    for_exp: Optional[str] = None
    alias: Optional[str] = None
    iterator1: Optional[str] = None
    iterator2: Optional[str] = None

    # v-if / v-else-if / v-else
    if_exp: Optional[str] = None
    elseif_exp: Optional[str] = None
    is_else: bool = False
    if_conditions: Optional[List[IfCondition]] = None

    once: bool = False

    key: Optional[str] = None
    ref: Optional[str] = None
    ref_in_for: bool = False

    # slots
    slot_scope: Optional[str] = None
    slot_target: Optional[str] = None
    slot_target_dynamic: bool = False
    slot_name: Optional[str] = None
    scoped_slots: Optional[Dict[str, "ASTElement"]] = None

    component: Optional[str] = None
    inline_template: bool = False

    # bindings
    attrs: Optional[List[ASTAttr]] = None
    dynamic_attrs: Optional[List[ASTAttr]] = None
    props: Optional[List[ASTAttr]] = None
    events: Optional[Handlers] = None
    native_events: Optional[Handlers] = None
    directives: Optional[List[ASTDirective]] = None
    model: Optional[Dict[str, str]] = None
    wrap_data: Optional[Callable[[str], str]] = None
    wrap_listeners: Optional[Callable[[str], str]] = None

    # fields contributed by compiler modules (static_class, style_binding, ...)
    module_data: Dict[str, str] = field(default_factory=dict)

    state: NodeState = NodeState.UNPROCESSED
    static: bool = False
    static_root: bool = False
    static_in_for: bool = False

    def advance(self, state: NodeState) -> None:
        """
        Move to a later processing state.

        Raises:
            CompilerStateError: If ``state`` is not after the current one
        """
        if state <= self.state:
            raise CompilerStateError(
                f"<{self.tag}> cannot move from {self.state.name} to {state.name}"
            )
        self.state = state

    @property
    def processed(self) -> bool:
        return self.state is NodeState.PROCESSED

    def own_fields(self) -> List[str]:
        """Names of the fields populated on this node, module fields included."""
        names = []
        for f in fields(self):
            if f.name in _BOOKKEEPING_FIELDS:
                continue
            if f.default is not MISSING:
                default: Any = f.default
            elif f.default_factory is not MISSING:
                default = f.default_factory()
            else:
                # required fields are always populated
                names.append(f.name)
                continue
            if getattr(self, f.name) != default:
                names.append(f.name)
        names.extend(self.module_data)
        return names

    def to_dict(self) -> Dict[str, Any]:
        """Debug representation of the subtree."""
        skipped = {
            "parent", "children", "type", "tag", "raw_attrs_map", "attrs_list",
            "if_conditions", "scoped_slots", "wrap_data", "wrap_listeners",
        }
        data: Dict[str, Any] = {"type": self.type.name, "tag": self.tag}
        for name in self.own_fields():
            if name in self.module_data:
                data[name] = self.module_data[name]
            elif name not in skipped:
                data[name] = getattr(self, name)
        if self.if_conditions:
            data["if_conditions"] = [c.exp for c in self.if_conditions]
        if self.scoped_slots:
            data["scoped_slots"] = {
                name: node_to_dict(slot) for name, slot in self.scoped_slots.items()
            }
        data["children"] = [node_to_dict(child) for child in self.children]
        return data

    def __repr__(self) -> str:
        return f"<ASTElement {self.tag!r} children={len(self.children)} state={self.state.name}>"


ASTNode = Union[ASTElement, ASTExpression, ASTText]


def node_to_dict(node: ASTNode) -> Dict[str, Any]:
    if isinstance(node, ASTElement):
        return node.to_dict()
    if isinstance(node, ASTExpression):
        return {"type": node.type.name, "expression": node.expression, "text": node.text}
    return {"type": node.type.name, "text": node.text, "is_comment": node.is_comment}


def create_ast_element(
    tag: str,
    attrs: List[ASTAttr],
    parent: Optional[ASTElement] = None,
) -> ASTElement:
    """Create an element; ``attrs_map`` is built with last-write-wins."""
    return ASTElement(
        tag=tag,
        attrs_list=attrs,
        attrs_map={attr.name: attr.value for attr in attrs},
        parent=parent,
    )
