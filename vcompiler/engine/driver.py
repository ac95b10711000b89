"""
vcompiler Compiler Driver
=========================

Runs the pipeline for one template:

    trim -> parse -> optimize -> generate -> detect errors

Diagnostics are collected instead of raised. With ``output_source_range``
each diagnostic carries ``start``/``end`` offsets into the untrimmed
template.

Example:
    compiler = create_compiler(base_options)
    result = compiler.compile('<div :id="id">{{ msg }}</div>')
    result.render   # '_c("div", {"attrs": {"id": id}}, [_v(_s(msg))])'
    result.errors   # []
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from vcompiler.codegen.generator import generate
from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import WarningMessage, range_of
from vcompiler.engine.error_detector import detect_errors
from vcompiler.engine.optimizer import optimize
from vcompiler.engine.to_function import (
    CompiledFunctionResult,
    TemplateCache,
    create_compile_to_functions_fn,
)
from vcompiler.parser.builder import parse
from vcompiler.parser.nodes import ASTElement
from vcompiler.utils.logger import get_logger

logger = get_logger("vcompiler.driver")

_leading_space_re = re.compile(r"^\s*")

OptionsLike = Union[CompilerOptions, Mapping[str, Any], None]


@dataclass
class CompiledResult:
    """
    Output of ``Compiler.compile``.

    Attributes:
        ast: Root element, None for an empty template
        render: Render source
        static_render_fns: Hoisted static render sources
        errors: Error diagnostics
        tips: Tip diagnostics
    """

    ast: Optional[ASTElement]
    render: str
    static_render_fns: List[str] = field(default_factory=list)
    errors: List[WarningMessage] = field(default_factory=list)
    tips: List[WarningMessage] = field(default_factory=list)


class WarningCollector:
    """
    Diagnostic sink installed as ``options.warn`` during a compile.

    Args:
        leading_space: Offset added to recorded ranges
        record_ranges: Record ``start``/``end`` on diagnostics
    """

    def __init__(self, leading_space: int = 0, record_ranges: bool = False):
        self.leading_space = leading_space
        self.record_ranges = record_ranges
        self.errors: List[WarningMessage] = []
        self.tips: List[WarningMessage] = []

    def __call__(self, message: Any, range: Any = None, tip: bool = False) -> None:
        if isinstance(message, WarningMessage):
            data = dataclasses.replace(message)
        else:
            data = WarningMessage(str(message))

        if self.record_ranges and range is not None:
            location = range_of(range)
            if location.start is not None:
                data.start = location.start + self.leading_space
            if location.end is not None:
                data.end = location.end + self.leading_space

        (self.tips if tip else self.errors).append(data)


class Compiler:
    """
    Template compiler bound to a set of base options.

    Args:
        base_options: Platform options that caller options are merged over
        cache: Cache used by ``compile_to_functions``
    """

    def __init__(
        self,
        base_options: CompilerOptions,
        cache: Optional[TemplateCache] = None,
    ):
        self.base_options = base_options
        self.cache = cache if cache is not None else TemplateCache()
        self._compile_to_functions = create_compile_to_functions_fn(self.compile, self.cache)

    def compile(self, template: str, options: OptionsLike = None) -> CompiledResult:
        """
        Compile ``template`` to render source.

        Args:
            template: Template source
            options: Caller overrides merged over the base options

        Returns:
            Render sources with collected diagnostics

        Raises:
            CompilerConfigError: On unknown or invalid options
        """
        final_options = self.base_options.merge(options)

        collector = WarningCollector()
        if final_options.dev and final_options.output_source_range:
            collector = WarningCollector(
                leading_space=len(_leading_space_re.match(template).group(0)),
                record_ranges=True,
            )
        final_options = dataclasses.replace(final_options, warn=collector)

        trimmed = template.strip()
        ast = parse(trimmed, final_options)
        if final_options.optimize:
            optimize(ast, final_options)
        code = generate(ast, final_options)

        if final_options.dev:
            detect_errors(ast, collector)

        logger.debug(
            "compiled template",
            size=len(template),
            errors=len(collector.errors),
            tips=len(collector.tips),
            static_roots=len(code.static_render_fns),
        )

        return CompiledResult(
            ast=ast,
            render=code.render,
            static_render_fns=code.static_render_fns,
            errors=collector.errors,
            tips=collector.tips,
        )

    def compile_to_functions(
        self,
        template: str,
        options: OptionsLike = None,
    ) -> CompiledFunctionResult:
        """Compile ``template`` and materialize callables; results are cached."""
        return self._compile_to_functions(template, options)


def create_compiler(
    base_options: CompilerOptions,
    cache: Optional[TemplateCache] = None,
) -> Compiler:
    """Create a compiler for a platform's base options."""
    return Compiler(base_options, cache)
