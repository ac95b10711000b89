"""Pytest configuration and shared fixtures for vcompiler tests."""

from typing import Any, Callable, List

import pytest

from vcompiler.core.config import CompilerOptions
from vcompiler.engine.driver import CompiledResult, Compiler, create_compiler
from vcompiler.engine.optimizer import optimize
from vcompiler.engine.to_function import TemplateCache
from vcompiler.parser.builder import parse
from vcompiler.parser.nodes import ASTElement
from vcompiler.utils.logger import MemoryHandler, get_logger
from vcompiler.web.options import create_base_options


# ============================================================================
# Options
# ============================================================================


@pytest.fixture
def warnings() -> List[str]:
    """Messages passed to the warn sink of ``web_options``."""
    return []


@pytest.fixture
def web_options(warnings) -> CompilerOptions:
    """Web platform options in dev mode with a collecting warn sink."""

    def warn(message: Any, range: Any = None, tip: bool = False) -> None:
        warnings.append(str(message))

    return create_base_options().merge({"dev": True, "warn": warn})


@pytest.fixture
def build(web_options) -> Callable[..., ASTElement]:
    """Parse (and optimize) a template with the web options."""

    def _build(template: str, optimized: bool = True, **overrides: Any) -> ASTElement:
        options = web_options.merge(overrides) if overrides else web_options
        root = parse(template, options)
        if optimized:
            optimize(root, options)
        return root

    return _build


# ============================================================================
# Compiler
# ============================================================================


@pytest.fixture
def compiler() -> Compiler:
    """Web compiler with a private cache."""
    return create_compiler(create_base_options(), TemplateCache())


@pytest.fixture
def compile_template(compiler) -> Callable[..., CompiledResult]:
    """``compiler.compile`` with dev diagnostics on unless overridden."""

    def _compile(template: str, **options: Any) -> CompiledResult:
        options.setdefault("dev", True)
        return compiler.compile(template, options)

    return _compile


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture
def log_records():
    """Capture records of every ``vcompiler`` logger."""
    root = get_logger("vcompiler")
    handler = MemoryHandler()
    root.add_handler(handler)
    yield handler
    root.remove_handler(handler)
