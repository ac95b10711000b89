"""
vcompiler Parser Module
=======================

Template source to AST.

Components:
- HTML Scanner: start/end tag, text and comment events
- Text Parser: ``{{ }}`` interpolation
- Filter Parser: ``value | filter(arg)`` chains
- Builder: the element tree with directives applied
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vcompiler.parser.builder import ASTBuilder, parse
    from vcompiler.parser.filter_parser import parse_filters
    from vcompiler.parser.html_scanner import HTMLScanner
    from vcompiler.parser.nodes import ASTElement, ASTExpression, ASTText
    from vcompiler.parser.text_parser import parse_text


def __getattr__(name: str):
    """Lazy loading; the builder and the code generator import each other's leaves."""
    _imports = {
        "ASTBuilder": "vcompiler.parser.builder",
        "parse": "vcompiler.parser.builder",
        "parse_filters": "vcompiler.parser.filter_parser",
        "HTMLScanner": "vcompiler.parser.html_scanner",
        "ASTElement": "vcompiler.parser.nodes",
        "ASTExpression": "vcompiler.parser.nodes",
        "ASTText": "vcompiler.parser.nodes",
        "parse_text": "vcompiler.parser.text_parser",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'vcompiler.parser' has no attribute '{name}'")


__all__ = [
    "ASTBuilder",
    "ASTElement",
    "ASTExpression",
    "ASTText",
    "HTMLScanner",
    "parse",
    "parse_filters",
    "parse_text",
]
