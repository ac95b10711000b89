"""
vcompiler Model Helpers
=======================

Assignment code generation shared by ``v-model`` and ``.sync``.

Assignments are expressions built on the ``_set`` helper:

    msg          ->  _set(_self, "msg", value)
    form.name    ->  _set(form, "name", value)
    rows[i].cell ->  _set(rows[i], "cell", value)
    rows[i]      ->  _set(rows, i, value)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vcompiler.codegen.literals import quote
from vcompiler.parser.nodes import ASTElement, Modifiers

# Parameter name of generated model callbacks.
MODEL_VALUE = "_mv"


@dataclass
class ModelParseResult:
    """Target object expression and key code; ``key`` is None for a bare name."""

    exp: str
    key: Optional[str]


class _ModelScanner:
    """Locates the last top-level ``[...]`` member access."""

    def __init__(self, value: str):
        self.text = value
        self.length = len(value)
        self.index = 0
        self.expression_pos = 0
        self.expression_end_pos = 0

    def eof(self) -> bool:
        return self.index >= self.length

    def next(self) -> str:
        self.index += 1
        return self.text[self.index] if self.index < self.length else ""

    def scan(self) -> None:
        while not self.eof():
            ch = self.next()
            if ch in ("'", '"'):
                self.skip_string(ch)
            elif ch == "[":
                self.skip_bracket()

    def skip_bracket(self) -> None:
        depth = 1
        self.expression_pos = self.index
        while not self.eof():
            ch = self.next()
            if ch in ("'", '"'):
                self.skip_string(ch)
                continue
            if ch == "[":
                depth += 1
            if ch == "]":
                depth -= 1
            if depth == 0:
                self.expression_end_pos = self.index
                break

    def skip_string(self, quote_char: str) -> None:
        while not self.eof():
            if self.next() == quote_char:
                break


def parse_model(value: str) -> ModelParseResult:
    """
    Split a model target into object expression and key.

    Example:
        >>> parse_model("test[idx].name")
        ModelParseResult(exp='test[idx]', key='"name"')
        >>> parse_model("test[test1[idx]]")
        ModelParseResult(exp='test', key='test1[idx]')
    """
    value = value.strip()
    length = len(value)

    if "[" not in value or value.rfind("]") < length - 1:
        index = value.rfind(".")
        if index > -1:
            return ModelParseResult(exp=value[:index], key=f'"{value[index + 1:]}"')
        return ModelParseResult(exp=value, key=None)

    scanner = _ModelScanner(value)
    scanner.scan()
    return ModelParseResult(
        exp=value[: scanner.expression_pos],
        key=value[scanner.expression_pos + 1: scanner.expression_end_pos],
    )


def gen_assignment_code(value: str, assignment: str) -> str:
    """Expression assigning ``assignment`` to the model target ``value``."""
    res = parse_model(value)
    if res.key is None:
        return f"_set(_self, {quote(res.exp)}, {assignment})"
    return f"_set({res.exp}, {res.key}, {assignment})"


def gen_component_model(
    el: ASTElement,
    value: str,
    modifiers: Optional[Modifiers] = None,
) -> None:
    """Record ``v-model`` on a component as a value/callback pair."""
    modifiers = modifiers or {}
    value_expression = MODEL_VALUE
    if modifiers.get("trim"):
        value_expression = (
            f"({MODEL_VALUE}.strip() if isinstance({MODEL_VALUE}, str) else {MODEL_VALUE})"
        )
    if modifiers.get("number"):
        value_expression = f"_n({value_expression})"

    assignment = gen_assignment_code(value, value_expression)
    el.model = {
        "value": f"({value})",
        "expression": quote(value),
        "callback": f"lambda {MODEL_VALUE}: {assignment}",
    }
