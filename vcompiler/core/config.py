"""
vcompiler Configuration
=======================

Compiler options and the merge rules used by the driver.

Merge rules (caller overrides applied over platform base options):
1. ``modules``: caller modules run after the base modules
2. ``directives``: caller handlers shadow base handlers (ChainMap)
3. every other option: the caller value replaces the base value

Example:
    options = base_options.merge({
        "delimiters": ("${", "}"),
        "whitespace": "condense",
    })
"""

from __future__ import annotations

import dataclasses
from collections import ChainMap
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from vcompiler.core.errors import CompilerConfigError
from vcompiler.plugins.hooks import CompilerModule, ModuleRegistry
from vcompiler.utils.env import is_dev_mode
from vcompiler.utils.helpers import no

if TYPE_CHECKING:
    from vcompiler.parser.nodes import ASTDirective, ASTElement

WarnFunction = Callable[..., None]
DirectiveHandler = Callable[["ASTElement", "ASTDirective", WarnFunction], Optional[bool]]
TagPredicate = Callable[..., bool]

WHITESPACE_MODES = ("preserve", "condense")


@dataclass
class CompilerOptions:
    """
    Options consumed by every compiler stage.

    Attributes:
        delimiters: Interpolation delimiters, ``("{{", "}}")`` when unset
        whitespace: ``"preserve"`` or ``"condense"``; None keeps the
            ``preserve_whitespace`` behavior
        preserve_whitespace: Keep whitespace-only text between elements
        comments: Keep HTML comments as comment nodes
        output_source_range: Record source offsets on nodes and diagnostics
        optimize: Run the static optimizer
        expect_html: Apply HTML implicit end-tag rules while scanning
        should_decode_newlines: Decode ``&#10;``/``&#9;`` in attribute values
        should_decode_newlines_for_href: Same, for ``<a href>`` only
        is_unary_tag: Void-element predicate
        can_be_left_open_tag: Omittable-end-tag predicate
        is_pre_tag: Whitespace-preserving element predicate
        must_use_prop: ``(tag, type, attr) -> bool`` for DOM-property routing
        is_reserved_tag: Platform (non-component) tag predicate
        get_tag_namespace: Namespace resolver (``"svg"``, ``"math"``)
        modules: Module registry
        directives: Compile-time directive handlers by name
        bindings: Binding metadata used to resolve component tags
        warn: Diagnostic sink ``warn(message, range=None, tip=False)``
        dev: Emit development diagnostics and run the error detector
    """

    delimiters: Optional[Tuple[str, str]] = None
    whitespace: Optional[str] = None
    preserve_whitespace: bool = True
    comments: bool = False
    output_source_range: bool = False
    optimize: bool = True
    expect_html: bool = False
    should_decode_newlines: bool = False
    should_decode_newlines_for_href: bool = False

    is_unary_tag: TagPredicate = no
    can_be_left_open_tag: TagPredicate = no
    is_pre_tag: TagPredicate = no
    must_use_prop: TagPredicate = no
    is_reserved_tag: TagPredicate = no
    get_tag_namespace: Callable[[str], Optional[str]] = lambda tag: None

    modules: ModuleRegistry = field(default_factory=ModuleRegistry)
    directives: Mapping[str, DirectiveHandler] = field(default_factory=dict)
    bindings: Optional[Dict[str, Any]] = None

    warn: Optional[WarnFunction] = None
    dev: bool = field(default_factory=is_dev_mode)

    def __post_init__(self) -> None:
        if not isinstance(self.modules, ModuleRegistry):
            self.modules = ModuleRegistry(self.modules)
        self.validate()

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            CompilerConfigError: On an invalid delimiter pair or whitespace mode
        """
        if self.delimiters is not None:
            if len(self.delimiters) != 2 or not all(
                isinstance(d, str) and d for d in self.delimiters
            ):
                raise CompilerConfigError(
                    f"delimiters must be a pair of non-empty strings, got {self.delimiters!r}"
                )
            self.delimiters = tuple(self.delimiters)  # type: ignore[assignment]

        if self.whitespace is not None and self.whitespace not in WHITESPACE_MODES:
            raise CompilerConfigError(
                f"whitespace must be one of {WHITESPACE_MODES}, got {self.whitespace!r}"
            )

    @property
    def static_keys(self) -> Tuple[str, ...]:
        """Static AST keys contributed by the registered modules."""
        return self.modules.static_keys()

    @classmethod
    def option_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    def merge(
        self,
        overrides: Optional[Union["CompilerOptions", Mapping[str, Any]]] = None,
    ) -> "CompilerOptions":
        """
        Apply caller overrides over these options.

        Args:
            overrides: Mapping of option names to values

        Returns:
            A new options object; ``self`` is left untouched

        Raises:
            CompilerConfigError: On an unknown option name
        """
        if not overrides:
            return dataclasses.replace(self)

        if isinstance(overrides, CompilerOptions):
            overrides = _explicit_fields(overrides)

        known = self.option_names()
        unknown = [key for key in overrides if key not in known]
        if unknown:
            raise CompilerConfigError(f"unknown compiler option(s): {', '.join(sorted(unknown))}")

        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key == "modules":
                changes["modules"] = self.modules.merged(_as_modules(value))
            elif key == "directives":
                changes["directives"] = ChainMap(dict(value or {}), self.directives)
            else:
                changes[key] = value

        return dataclasses.replace(self, **changes)


def _as_modules(value: Any) -> Iterable[CompilerModule]:
    if value is None:
        return ()
    if isinstance(value, CompilerModule):
        return (value,)
    return value


def _explicit_fields(options: CompilerOptions) -> Dict[str, Any]:
    """Fields of ``options`` that differ from the defaults."""
    defaults = CompilerOptions()
    result: Dict[str, Any] = {}
    for f in dataclasses.fields(options):
        value = getattr(options, f.name)
        if f.name == "modules":
            if len(value):
                result[f.name] = list(value)
        elif value != getattr(defaults, f.name):
            result[f.name] = value
    return result
