"""
██╗   ██╗ ██████╗ ██████╗ ███╗   ███╗██████╗ ██╗██╗     ███████╗██████╗
██║   ██║██╔════╝██╔═══██╗████╗ ████║██╔══██╗██║██║     ██╔════╝██╔══██╗
██║   ██║██║     ██║   ██║██╔████╔██║██████╔╝██║██║     █████╗  ██████╔╝
╚██╗ ██╔╝██║     ██║   ██║██║╚██╔╝██║██╔═══╝ ██║██║     ██╔══╝  ██╔══██╗
 ╚████╔╝ ╚██████╗╚██████╔╝██║ ╚═╝ ██║██║     ██║███████╗███████╗██║  ██║
  ╚═══╝   ╚═════╝ ╚═════╝ ╚═╝     ╚═╝╚═╝     ╚═╝╚══════╝╚══════╝╚═╝  ╚═╝

vcompiler - Template Compiler for Python Render Functions
=========================================================

Compiles HTML-like templates with directives (``v-if``, ``v-for``,
``v-model``, ``v-slot``, ``@event``, ``:prop``) and ``{{ }}``
interpolation into render functions built from Python expressions.

Features:
---------
- Forgiving HTML scanner with implicit end-tag rules
- AST builder with structural, slot and binding directives
- Static subtree hoisting
- Render source generation with event modifiers and scoped slots
- Expression re-validation with source ranges and code frames
- Pluggable compiler modules and directive handlers

Quick Start:
    from vcompiler import compile

    result = compile('<ul><li v-for="item in items" :key="item.id">{{ item.name }}</li></ul>')
    result.render
    result.errors
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from typing import TYPE_CHECKING

from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import (
    CompilerConfigError,
    CompilerError,
    CompilerStateError,
    FunctionGenerationError,
    WarningMessage,
)

if TYPE_CHECKING:
    from vcompiler.codegen.generator import generate
    from vcompiler.engine.codeframe import generate_code_frame
    from vcompiler.engine.driver import CompiledResult, Compiler, create_compiler
    from vcompiler.engine.optimizer import optimize
    from vcompiler.parser.builder import parse
    from vcompiler.plugins.hooks import CompilerModule, ModuleRegistry
    from vcompiler.web import base_options, compile, compile_to_functions


def __getattr__(name: str):
    """Lazy loading of the pipeline and the web platform."""
    _imports = {
        # Pipeline stages
        "parse": "vcompiler.parser.builder",
        "optimize": "vcompiler.engine.optimizer",
        "generate": "vcompiler.codegen.generator",
        # Driver
        "Compiler": "vcompiler.engine.driver",
        "CompiledResult": "vcompiler.engine.driver",
        "create_compiler": "vcompiler.engine.driver",
        "generate_code_frame": "vcompiler.engine.codeframe",
        # Modules
        "CompilerModule": "vcompiler.plugins.hooks",
        "ModuleRegistry": "vcompiler.plugins.hooks",
        # Web platform
        "base_options": "vcompiler.web",
        "compile": "vcompiler.web",
        "compile_to_functions": "vcompiler.web",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'vcompiler' has no attribute '{name}'")


__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Options and errors (always loaded)
    "CompilerOptions",
    "CompilerError",
    "CompilerConfigError",
    "CompilerStateError",
    "FunctionGenerationError",
    "WarningMessage",
    # Pipeline (lazy)
    "parse",
    "optimize",
    "generate",
    "Compiler",
    "CompiledResult",
    "create_compiler",
    "generate_code_frame",
    "CompilerModule",
    "ModuleRegistry",
    # Web platform (lazy)
    "base_options",
    "compile",
    "compile_to_functions",
]
