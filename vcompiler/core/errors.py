"""
vcompiler Errors
================

Exception hierarchy and the diagnostic record.

Problems in a template never raise: they are collected as
``WarningMessage`` diagnostics next to a best-effort result. Exceptions
are reserved for misconfiguration and for compiler bugs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class CompilerError(Exception):
    """Base exception for compiler errors."""
    pass


class CompilerConfigError(CompilerError):
    """Raised when compiler options are invalid."""
    pass


class CompilerStateError(CompilerError):
    """
    Raised on an illegal internal state transition.

    Signals a bug in the compiler (or in a third-party module) rather
    than a problem with the template.
    """
    pass


class FunctionGenerationError(CompilerError):
    """
    A generated source string failed to materialize into a callable.

    Attributes:
        code: The offending generated source
    """

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


@dataclass
class WarningMessage:
    """
    A compile diagnostic.

    Attributes:
        message: Human readable text
        start: Source offset where the problem starts (if known)
        end: Source offset where the problem ends (if known)
    """

    message: str
    start: Optional[int] = None
    end: Optional[int] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class SourceRange:
    """A bare ``start``/``end`` pair passed as a warning location."""

    start: Optional[int] = None
    end: Optional[int] = None


def range_of(item: Any) -> SourceRange:
    """Extract the ``start``/``end`` of any located object."""
    if item is None:
        return SourceRange()
    return SourceRange(getattr(item, "start", None), getattr(item, "end", None))
