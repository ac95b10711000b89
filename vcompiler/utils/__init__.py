"""
vcompiler Utils Package
=======================

Helpers, environment access and logging.
"""

from __future__ import annotations

from vcompiler.utils.env import Env, env, is_dev_mode, load_env
from vcompiler.utils.logger import (
    Logger,
    LogLevel,
    MemoryHandler,
    configure_logging,
    get_logger,
)
from vcompiler.utils.helpers import (
    camelize,
    capitalize,
    cached,
    hyphenate,
    is_builtin_tag,
    make_map,
    no,
)

__all__ = [
    # Environment
    "Env",
    "env",
    "is_dev_mode",
    "load_env",
    # Logging
    "Logger",
    "LogLevel",
    "MemoryHandler",
    "get_logger",
    "configure_logging",
    # String helpers
    "camelize",
    "capitalize",
    "hyphenate",
    # Lookup helpers
    "cached",
    "make_map",
    "no",
    "is_builtin_tag",
]
