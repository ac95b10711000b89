"""
vcompiler Plugins Module
========================

Module strategy objects and their registry.
"""

from vcompiler.plugins.hooks import (
    HOOK_NAMES,
    CompilerModule,
    HookPriority,
    ModuleRegistry,
)

__all__ = [
    "HOOK_NAMES",
    "CompilerModule",
    "HookPriority",
    "ModuleRegistry",
]
