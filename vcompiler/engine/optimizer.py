"""
vcompiler Static Optimizer
==========================

Marks subtrees that never change between renders.

Two post-order passes:
1. ``mark_static``: a node is static when it has no bindings, no
   structural directives, is a platform tag, and carries only static keys.
2. ``mark_static_roots``: static elements with meaningful children become
   static roots, rendered once and hoisted by the code generator.
"""

from __future__ import annotations

from typing import Callable, Optional

from vcompiler.core.config import CompilerOptions
from vcompiler.parser.nodes import (
    BASE_STATIC_KEYS,
    ASTElement,
    ASTNode,
    NodeState,
    NodeType,
)
from vcompiler.utils.helpers import is_builtin_tag, make_map


class StaticOptimizer:
    """
    Static analysis over a built tree.

    Args:
        options: Compiler options (reserved-tag predicate, module static keys)
    """

    def __init__(self, options: CompilerOptions):
        self.is_static_key = make_map(BASE_STATIC_KEYS + tuple(options.static_keys))
        self.is_reserved_tag: Callable[[str], bool] = options.is_reserved_tag

    def run(self, root: ASTElement) -> None:
        self.mark_static(root)
        self.mark_static_roots(root, False)

    def mark_static(self, node: ASTNode) -> None:
        node.static = self.is_static(node)
        if not isinstance(node, ASTElement):
            return

        # component slot content stays dynamic
        if (
            not self.is_reserved_tag(node.tag)
            and node.tag != "slot"
            and node.attrs_map.get("inline-template") is None
        ):
            return

        for child in node.children:
            self.mark_static(child)
            if not child.static:
                node.static = False

        for condition in (node.if_conditions or [])[1:]:
            self.mark_static(condition.block)
            if not condition.block.static:
                node.static = False

    def mark_static_roots(self, node: ASTNode, in_for: bool) -> None:
        if not isinstance(node, ASTElement):
            return

        if node.static or node.once:
            node.static_in_for = in_for

        children = node.children
        if node.static and children and not (
            len(children) == 1 and children[0].type is NodeType.TEXT
        ):
            node.static_root = True
            return
        node.static_root = False

        for child in children:
            self.mark_static_roots(child, in_for or bool(node.for_exp))
        for condition in (node.if_conditions or [])[1:]:
            self.mark_static_roots(condition.block, in_for)

    def is_static(self, node: ASTNode) -> bool:
        if node.type is NodeType.EXPRESSION:
            return False
        if node.type is NodeType.TEXT:
            return True

        assert isinstance(node, ASTElement)
        if node.pre:
            return True
        return bool(
            not node.has_bindings
            and not node.if_exp
            and not node.for_exp
            and not is_builtin_tag(node.tag)
            and self.is_reserved_tag(node.tag)
            and not is_direct_child_of_template_for(node)
            and not (node.tag == "template" and node.state is NodeState.PROCESSED)
            and all(self.is_static_key(name) for name in node.own_fields())
        )


def is_direct_child_of_template_for(node: ASTElement) -> bool:
    """Whether ``node`` sits under ``<template v-for>`` with only templates between."""
    current: Optional[ASTElement] = node
    while current is not None and current.parent is not None:
        current = current.parent
        if current.tag != "template":
            return False
        if current.for_exp:
            return True
    return False


def optimize(root: Optional[ASTElement], options: CompilerOptions) -> None:
    """Set ``static``, ``static_root`` and ``static_in_for`` across the tree."""
    if root is None:
        return
    StaticOptimizer(options).run(root)
