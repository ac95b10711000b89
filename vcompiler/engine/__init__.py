"""
vcompiler Engine Module
=======================

The compile pipeline around the parser and code generator.

Components:
- Optimizer: marks static subtrees
- Driver: option merging, diagnostics and the compile pipeline
- Error Detector: expression re-validation in dev mode
- Function Adapter: render source to callables, with caching
"""

from vcompiler.engine.codeframe import generate_code_frame
from vcompiler.engine.driver import (
    CompiledResult,
    Compiler,
    WarningCollector,
    create_compiler,
)
from vcompiler.engine.error_detector import detect_errors
from vcompiler.engine.optimizer import StaticOptimizer, optimize
from vcompiler.engine.to_function import (
    CompiledFunctionResult,
    TemplateCache,
    create_function,
)

__all__ = [
    "CompiledFunctionResult",
    "CompiledResult",
    "Compiler",
    "StaticOptimizer",
    "TemplateCache",
    "WarningCollector",
    "create_compiler",
    "create_function",
    "detect_errors",
    "generate_code_frame",
    "optimize",
]
