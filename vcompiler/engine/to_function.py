"""
vcompiler Function Adapter
==========================

Turns generated render source into callables and caches the result.

A render function takes the evaluation scope: the runtime helpers
(``_c``, ``_v``, ...), ``_self`` and whatever names the template uses.

Example:
    compiled = compile_to_functions("<p>{{ msg }}</p>")
    vnode = compiled.render({**helpers, "_self": vm, "msg": "hi"})
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import FunctionGenerationError
from vcompiler.engine.codeframe import generate_code_frame
from vcompiler.utils.env import is_dev_mode
from vcompiler.utils.logger import get_logger

logger = get_logger("vcompiler.compiler")

RenderFunction = Callable[[Mapping[str, Any]], Any]
OptionsLike = Union[CompilerOptions, Mapping[str, Any], None]
CacheKey = Tuple[Optional[Tuple[str, str]], str]


@dataclass
class CompiledFunctionResult:
    """Callable render function plus hoisted static render functions."""

    render: RenderFunction
    static_render_fns: List[RenderFunction] = field(default_factory=list)


def noop(*args: Any, **kwargs: Any) -> None:
    return None


def create_function(code: str, errors: List[FunctionGenerationError]) -> RenderFunction:
    """
    Compile a render expression into a ``render(scope)`` callable.

    A source that fails to compile is recorded in ``errors`` and replaced
    by a no-op so the other functions of the batch still materialize.
    """
    try:
        code_object = compile(code, "<render>", "eval")
    except (SyntaxError, ValueError) as e:
        errors.append(FunctionGenerationError(str(e), code))
        return noop

    def render(scope: Mapping[str, Any]) -> Any:
        # one namespace, so generated lambdas resolve scope names as globals
        return eval(code_object, dict(scope))

    return render


class TemplateCache:
    """
    Thread-safe LRU cache of compiled functions.

    Keyed by ``(delimiters, template)``; the least recently used entry is
    dropped once ``max_size`` is reached.
    """

    def __init__(self, max_size: int = 256) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[CacheKey, CompiledFunctionResult] = OrderedDict()
        self._guard = threading.RLock()

    def get(self, key: CacheKey) -> Optional[CompiledFunctionResult]:
        with self._guard:
            result = self._entries.get(key)
            if result is not None:
                self._entries.move_to_end(key)
            return result

    def set(self, key: CacheKey, result: CompiledFunctionResult) -> None:
        with self._guard:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._guard:
            self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _option(options: OptionsLike, name: str, default: Any = None) -> Any:
    if options is None:
        return default
    if isinstance(options, CompilerOptions):
        return getattr(options, name, default)
    return options.get(name, default)


def _without_warn(options: OptionsLike) -> OptionsLike:
    if isinstance(options, Mapping):
        return {key: value for key, value in options.items() if key != "warn"}
    return options


def create_compile_to_functions_fn(
    compile_template: Callable[..., Any],
    cache: Optional[TemplateCache] = None,
) -> Callable[..., CompiledFunctionResult]:
    """
    Wrap a ``compile(template, options)`` function into one returning callables.

    Args:
        compile_template: Source compiler (``Compiler.compile``)
        cache: Result cache; a private one is created when omitted

    Returns:
        ``compile_to_functions(template, options=None)``
    """
    cache = cache if cache is not None else TemplateCache()

    def compile_to_functions(template: str, options: OptionsLike = None) -> CompiledFunctionResult:
        warn = _option(options, "warn") or logger.error
        dev = _option(options, "dev", is_dev_mode())
        delimiters = _option(options, "delimiters")

        key: CacheKey = (tuple(delimiters) if delimiters else None, template)
        cached = cache.get(key)
        if cached is not None:
            return cached

        compiled = compile_template(template, _without_warn(options))

        if dev:
            if compiled.errors:
                if _option(options, "output_source_range"):
                    for error in compiled.errors:
                        warn(
                            f"Error compiling template:\n\n{error.message}\n\n"
                            + generate_code_frame(template, error.start or 0, error.end)
                        )
                else:
                    warn(
                        f"Error compiling template:\n\n{template}\n\n"
                        + "\n".join(f"- {error}" for error in compiled.errors)
                        + "\n"
                    )
            for tip in compiled.tips:
                logger.info(f"[vcompiler] {tip}")

        fn_gen_errors: List[FunctionGenerationError] = []
        result = CompiledFunctionResult(
            render=create_function(compiled.render, fn_gen_errors),
            static_render_fns=[
                create_function(code, fn_gen_errors) for code in compiled.static_render_fns
            ],
        )

        if dev and not compiled.errors and fn_gen_errors:
            warn(
                "Failed to generate render function:\n\n"
                + "\n".join(f"{error} in\n\n{error.code}\n" for error in fn_gen_errors)
            )

        cache.set(key, result)
        return result

    return compile_to_functions
