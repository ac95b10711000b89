"""
vcompiler Error Detector
========================

Re-validates every directive value and interpolation of a finished AST
by compiling it as a standalone Python expression.

Checks per attribute:
    v-for        source expression, alias and iterators as parameters
    v-slot / #   scope as a parameter list
    v-on / @     word operators used as attribute names, then the handler
    others       plain expression

Keyword misuse (``a.class``, ``item.import``) gets a dedicated message;
any other failure is reported as an invalid expression.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from vcompiler.codegen.events import translate_statement
from vcompiler.codegen.params import gen_lambda
from vcompiler.parser.builder import dir_re, on_re
from vcompiler.parser.nodes import ASTElement, ASTExpression, ASTNode

Warn = Callable[..., None]

# Keywords that can never appear inside an expression.
prohibited_keyword_re = re.compile(
    r"\b(?:"
    + "|".join(
        "assert,break,class,continue,def,del,except,finally,from,global,"
        "import,nonlocal,pass,raise,return,try,while,with,yield".split(",")
    )
    + r")\b"
)

unary_operators_re = re.compile(r"\b(?:not|await)\s*\([^)]*\)")

strip_string_re = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"")


def detect_errors(ast: Optional[ASTNode], warn: Warn) -> None:
    """Walk ``ast`` and report every expression that fails to compile."""
    if ast is not None:
        check_node(ast, warn)


def check_node(node: ASTNode, warn: Warn) -> None:
    if isinstance(node, ASTElement):
        for name, value in node.attrs_map.items():
            if not dir_re.search(name) or not value:
                continue
            range = node.raw_attrs_map.get(name)
            text = f'{name}="{value}"'
            if name == "v-for":
                check_for(node, text, warn, range)
            elif name == "v-slot" or name.startswith("#"):
                check_function_parameter_expression(value, text, warn, range)
            elif on_re.search(name):
                check_event(value, text, warn, range)
            else:
                check_expression(value, text, warn, range)

        for child in node.children:
            check_node(child, warn)
        # else branches and slot templates are detached from children
        for condition in (node.if_conditions or [])[1:]:
            check_node(condition.block, warn)
        for slot in (node.scoped_slots or {}).values():
            check_node(slot, warn)
    elif isinstance(node, ASTExpression):
        check_expression(node.expression, node.text, warn, node)


def check_event(exp: str, text: str, warn: Warn, range: Any = None) -> None:
    stripped = strip_string_re.sub("", exp)
    match = unary_operators_re.search(stripped)
    if match and stripped[match.start() - 1:match.start()] == ".":
        warn(
            "avoid using Python unary operator as property name: "
            f'"{match.group(0)}" in expression {text.strip()}',
            range,
        )
    check_expression(translate_statement(exp), text, warn, range)


def check_for(node: ASTElement, text: str, warn: Warn, range: Any = None) -> None:
    check_expression(node.for_exp or "", text, warn, range)
    check_identifier(node.alias, "v-for alias", text, warn, range)
    check_identifier(node.iterator1, "v-for iterator", text, warn, range)
    check_identifier(node.iterator2, "v-for iterator", text, warn, range)


def check_identifier(
    ident: Optional[str],
    type: str,
    text: str,
    warn: Warn,
    range: Any = None,
) -> None:
    if ident is None:
        return
    try:
        compile(gen_lambda(ident, "None"), "<identifier>", "eval")
    except (SyntaxError, ValueError):
        warn(f'invalid {type} "{ident}" in expression: {text.strip()}', range)


def check_expression(exp: str, text: str, warn: Warn, range: Any = None) -> None:
    try:
        compile(exp, "<expression>", "eval")
    except (SyntaxError, ValueError) as e:
        keyword_match = prohibited_keyword_re.search(strip_string_re.sub("", exp))
        if keyword_match:
            warn(
                "avoid using Python keyword as property name: "
                f'"{keyword_match.group(0)}"\n  Raw expression: {text.strip()}',
                range,
            )
        else:
            warn(
                f"invalid expression: {getattr(e, 'msg', e)} in\n\n"
                f"    {exp}\n\n"
                f"  Raw expression: {text.strip()}\n",
                range,
            )


def check_function_parameter_expression(
    exp: str,
    text: str,
    warn: Warn,
    range: Any = None,
) -> None:
    try:
        compile(gen_lambda(exp, "None"), "<parameters>", "eval")
    except (SyntaxError, ValueError) as e:
        warn(
            f"invalid function parameter expression: {getattr(e, 'msg', e)} in\n\n"
            f"    {exp}\n\n"
            f"  Raw expression: {text.strip()}\n",
            range,
        )
