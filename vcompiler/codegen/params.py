"""
vcompiler Callback Parameters
=============================

Builds ``lambda`` callbacks from template parameter lists.

Loop aliases and slot scopes may destructure their argument. Python
lambdas cannot, so each pattern becomes a plain parameter and the names
are bound by an inner lambda:

    {a, b: c, d = 1}  ->  lambda _p0: (lambda a, c, d: body)(
                              _p0.get("a"), _p0.get("b"), _p0.get("d", 1))
    [x, y]            ->  lambda _p0: (lambda x, y: body)(_p0[0], _p0[1])
    ...rest           ->  lambda *rest: body
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from vcompiler.codegen.literals import quote

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())


def split_top_level(text: str, separator: str) -> List[str]:
    """
    Split on ``separator`` outside brackets and string literals.

    Example:
        >>> split_top_level("a, {b, c}, d", ",")
        ['a', ' {b, c}', ' d']
    """
    parts: List[str] = []
    depth = 0
    quote_char: Optional[str] = None
    last = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if quote_char:
            if ch == "\\":
                i += 1
            elif ch == quote_char:
                quote_char = None
        elif ch in ("'", '"'):
            quote_char = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == separator and depth == 0:
            parts.append(text[last:i])
            last = i + 1
        i += 1
    parts.append(text[last:])
    return parts


def find_top_level(text: str, target: str) -> int:
    """Index of the first top-level single ``target`` character, or -1."""
    offset = 0
    for part in split_top_level(text, target)[:-1]:
        index = offset + len(part)
        following = text[index + 1:index + 2]
        preceding = text[index - 1:index] if index else ""
        if target != "=" or (following != "=" and preceding not in ("=", "!", "<", ">")):
            return index
        offset = index + 1
    return -1


@dataclass
class ParamList:
    """
    Translated parameter list.

    Attributes:
        params: Plain lambda parameters
        bindings: ``(name, value_code)`` pairs bound by an inner lambda
    """

    params: List[str] = field(default_factory=list)
    bindings: List[Tuple[str, str]] = field(default_factory=list)

    def signature(self) -> str:
        return ", ".join(self.params)

    def wrap(self, body: str) -> str:
        """Bind destructured names around ``body``."""
        if not self.bindings:
            return body
        names = ", ".join(name for name, _ in self.bindings)
        values = ", ".join(value for _, value in self.bindings)
        return f"(lambda {names}: {body})({values})"


def translate_params(source: str) -> ParamList:
    """
    Translate a comma separated parameter list.

    Args:
        source: Parameters as written (``"item, index"``, ``"{ row }"``)

    Returns:
        The translated parameter list
    """
    result = ParamList()
    for raw in split_top_level(source, ","):
        param = raw.strip()
        if not param:
            continue
        if param.startswith("..."):
            result.params.append("*" + param[3:].strip())
        elif param[0] in "{[":
            name = f"_p{len(result.params)}"
            pattern, default = _split_default(param)
            result.params.append(f"{name}={default}" if default else name)
            result.bindings.extend(_destructure(pattern, name))
        else:
            target, default = _split_default(param)
            result.params.append(f"{target}={default}" if default else target)
    return result


def gen_lambda(params: Optional[str], body: str) -> str:
    """``lambda`` with ``params`` (destructuring allowed) returning ``body``."""
    translated = translate_params(params or "")
    signature = translated.signature()
    head = f"lambda {signature}" if signature else "lambda"
    return f"{head}: {translated.wrap(body)}"


def _split_default(text: str) -> Tuple[str, Optional[str]]:
    index = find_top_level(text, "=")
    if index < 0:
        return text.strip(), None
    return text[:index].strip(), text[index + 1:].strip()


def _destructure(pattern: str, source: str) -> List[Tuple[str, str]]:
    """Bindings introduced by ``pattern`` matched against ``source``."""
    pattern = pattern.strip()
    if pattern.startswith("{") and pattern.endswith("}"):
        return _destructure_object(pattern[1:-1], source)
    if pattern.startswith("[") and pattern.endswith("]"):
        return _destructure_array(pattern[1:-1], source)
    return [(pattern, source)]


def _destructure_object(body: str, source: str) -> List[Tuple[str, str]]:
    bindings: List[Tuple[str, str]] = []
    taken: List[str] = []
    for raw in split_top_level(body, ","):
        entry = raw.strip()
        if not entry:
            continue
        if entry.startswith("..."):
            excluded = ", ".join(taken) + ("," if len(taken) == 1 else "")
            bindings.append((
                entry[3:].strip(),
                f"{{k: v for k, v in {source}.items() if k not in ({excluded})}}",
            ))
            continue

        colon = find_top_level(entry, ":")
        if colon < 0:
            target, default = _split_default(entry)
            key_code = quote(target)
        else:
            key = entry[:colon].strip()
            target, default = _split_default(entry[colon + 1:])
            if key[:1] in ("'", '"'):
                key_code = key
            elif key.startswith("[") and key.endswith("]"):
                key_code = key[1:-1].strip()
            else:
                key_code = quote(key)

        taken.append(key_code)
        value = f"{source}.get({key_code}, {default})" if default else f"{source}.get({key_code})"
        bindings.extend(_destructure(target, value))
    return bindings


def _destructure_array(body: str, source: str) -> List[Tuple[str, str]]:
    bindings: List[Tuple[str, str]] = []
    for index, raw in enumerate(split_top_level(body, ",")):
        entry = raw.strip()
        if not entry:
            continue
        if entry.startswith("..."):
            bindings.append((entry[3:].strip(), f"{source}[{index}:]"))
            continue
        target, default = _split_default(entry)
        if default:
            value = f"({source}[{index}] if len({source}) > {index} else {default})"
        else:
            value = f"{source}[{index}]"
        bindings.extend(_destructure(target, value))
    return bindings
