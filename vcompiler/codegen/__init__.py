"""
vcompiler Codegen Module
========================

Render source generation from an optimized AST.

Components:
- Generator: elements, control flow, slots and data objects
- Events: ``"on"`` / ``"nativeOn"`` handler code
- Params: ``lambda`` callbacks with destructuring parameters
- Literals: Python source rendering of strings and values
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vcompiler.codegen.events import gen_handlers
    from vcompiler.codegen.generator import CodegenResult, CodegenState, generate
    from vcompiler.codegen.literals import quote, to_source
    from vcompiler.codegen.params import gen_lambda


def __getattr__(name: str):
    """Lazy loading; the parser imports ``codegen.literals`` during its own import."""
    _imports = {
        "CodegenResult": "vcompiler.codegen.generator",
        "CodegenState": "vcompiler.codegen.generator",
        "generate": "vcompiler.codegen.generator",
        "gen_handlers": "vcompiler.codegen.events",
        "gen_lambda": "vcompiler.codegen.params",
        "quote": "vcompiler.codegen.literals",
        "to_source": "vcompiler.codegen.literals",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'vcompiler.codegen' has no attribute '{name}'")


__all__ = [
    "CodegenResult",
    "CodegenState",
    "gen_handlers",
    "gen_lambda",
    "generate",
    "quote",
    "to_source",
]
