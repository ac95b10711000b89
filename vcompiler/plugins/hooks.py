"""
vcompiler Module Hooks
======================

Extension points for cross-cutting compiler modules.

A module is a strategy object that may take part in AST construction
(``pre_transform_node``, ``transform_node``, ``post_transform_node``) and
in code generation (``gen_data``, ``transform_code``). Modules override only
the hooks they need; ``ModuleRegistry.pluck`` returns just those.

Example:
    class TrackModule(CompilerModule):
        name = "track"

        def gen_data(self, el):
            return ['"track": True'] if el.tag == "a" else []

    registry = ModuleRegistry([ClassModule(), StyleModule()])
    registry.register(TrackModule(), priority=HookPriority.LOW.value)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
)

from vcompiler.core.errors import CompilerConfigError

if TYPE_CHECKING:
    from vcompiler.core.config import CompilerOptions
    from vcompiler.parser.nodes import ASTElement


HOOK_NAMES = (
    "pre_transform_node",
    "transform_node",
    "post_transform_node",
    "gen_data",
    "transform_code",
)


class HookPriority(Enum):
    """Module execution priority. Equal priorities keep registration order."""

    HIGHEST = 0
    HIGH = 25
    NORMAL = 50
    LOW = 75
    LOWEST = 100


class CompilerModule:
    """
    Base class for compiler modules.

    Attributes:
        name: Registry name, unique within a registry
        static_keys: AST fields this module sets that do not make a node
            dynamic (consulted by the optimizer)
    """

    name: str = "module"
    static_keys: Tuple[str, ...] = ()

    def pre_transform_node(
        self,
        el: "ASTElement",
        options: "CompilerOptions",
    ) -> Optional["ASTElement"]:
        """Runs before structural directives; may return a replacement node."""
        return None

    def transform_node(
        self,
        el: "ASTElement",
        options: "CompilerOptions",
    ) -> Optional["ASTElement"]:
        """Runs during generic processing, before attributes are consumed."""
        return None

    def post_transform_node(
        self,
        el: "ASTElement",
        options: "CompilerOptions",
    ) -> None:
        """Runs after the node has been attached to the tree."""
        return None

    def gen_data(self, el: "ASTElement") -> List[str]:
        """Return ``"key": code`` entries for the node's data object."""
        return []

    def transform_code(self, el: "ASTElement", code: str) -> str:
        """Wrap the final create-node expression."""
        return code

    def overrides(self, hook: str) -> bool:
        """Whether this module implements ``hook`` itself."""
        return getattr(type(self), hook) is not getattr(CompilerModule, hook)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


@dataclass
class ModuleEntry:
    """Registered module with its priority."""

    module: CompilerModule
    priority: int = HookPriority.NORMAL.value


class ModuleRegistry:
    """
    Ordered registry of compiler modules.

    Modules run in priority order; modules of equal priority run in the
    order they were registered, so base modules precede caller modules
    after ``merged``.
    """

    def __init__(self, modules: Optional[Iterable[CompilerModule]] = None):
        self._entries: List[ModuleEntry] = []
        for module in modules or ():
            self.register(module)

    def register(
        self,
        module: CompilerModule,
        priority: int = HookPriority.NORMAL.value,
    ) -> "ModuleRegistry":
        """
        Add a module.

        Raises:
            CompilerConfigError: If the object is not a CompilerModule or
                the name is already taken
        """
        if not isinstance(module, CompilerModule):
            raise CompilerConfigError(
                f"compiler modules must subclass CompilerModule, got {module!r}"
            )
        if self.has(module.name):
            raise CompilerConfigError(f"module {module.name!r} is already registered")

        self._entries.append(ModuleEntry(module, priority))
        self._entries.sort(key=lambda entry: entry.priority)
        return self

    def unregister(self, name: str) -> bool:
        """Remove a module by name."""
        for entry in self._entries:
            if entry.module.name == name:
                self._entries.remove(entry)
                return True
        return False

    def get(self, name: str) -> Optional[CompilerModule]:
        for entry in self._entries:
            if entry.module.name == name:
                return entry.module
        return None

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def pluck(self, hook: str) -> List[Callable[..., Any]]:
        """
        Bound hook methods of every module that implements ``hook``.

        Raises:
            CompilerConfigError: For an unknown hook name
        """
        if hook not in HOOK_NAMES:
            raise CompilerConfigError(f"unknown module hook {hook!r}")
        return [
            getattr(entry.module, hook)
            for entry in self._entries
            if entry.module.overrides(hook)
        ]

    def static_keys(self) -> Tuple[str, ...]:
        """Static keys contributed by all modules, in module order."""
        keys: List[str] = []
        for entry in self._entries:
            keys.extend(entry.module.static_keys)
        return tuple(keys)

    def merged(self, extra: Iterable[CompilerModule]) -> "ModuleRegistry":
        """New registry with ``extra`` modules appended after these."""
        registry = ModuleRegistry()
        registry._entries = list(self._entries)
        for module in extra:
            registry.register(module)
        return registry

    def __iter__(self) -> Iterator[CompilerModule]:
        return (entry.module for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        names = ", ".join(entry.module.name for entry in self._entries)
        return f"<ModuleRegistry [{names}]>"
