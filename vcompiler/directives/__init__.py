"""
vcompiler Directives Package
============================

Compile-time directive handlers and model assignment helpers.
"""

from vcompiler.directives.base import BASE_DIRECTIVES
from vcompiler.directives.model import (
    ModelParseResult,
    gen_assignment_code,
    gen_component_model,
    parse_model,
)

__all__ = [
    "BASE_DIRECTIVES",
    "ModelParseResult",
    "gen_assignment_code",
    "gen_component_model",
    "parse_model",
]
