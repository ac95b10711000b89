"""
vcompiler Core Module
=====================

Compiler options and error types.
"""

from vcompiler.core.config import CompilerOptions, DirectiveHandler, WarnFunction
from vcompiler.core.errors import (
    CompilerConfigError,
    CompilerError,
    CompilerStateError,
    FunctionGenerationError,
    SourceRange,
    WarningMessage,
)

__all__ = [
    "CompilerOptions",
    "DirectiveHandler",
    "WarnFunction",
    "CompilerError",
    "CompilerConfigError",
    "CompilerStateError",
    "FunctionGenerationError",
    "SourceRange",
    "WarningMessage",
]
