"""
Resolution context module

Options for one target library, and the symbol tables shared by every
generation phase (type map, known defines, array sizes, enums).
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .types import TypeArena, TypeRef

if TYPE_CHECKING:
    from .definitions import CSharpDelegate


@dataclass
class Options:
    """Library specific generation settings"""
    library: str = 'dcimgui'
    wrap_prefix: str = 'Im'
    vector_prefix: str = 'ImVector'
    main_function_prefix: str = 'ImGui_'
    handle_type: str = 'IntPtr'
    wrapped_suffix: str = 'Ptr'
    conversion_types: dict[str, str] = field(default_factory=dict)
    custom_types: set[str] = field(default_factory=set)
    default_values: dict[str, str] = field(default_factory=dict)
    skip_function_substrings: list[str] = field(default_factory=list)
    known_defines: list[str] = field(default_factory=list)


class ResolutionContext:
    """Symbol tables shared across phases and configurations"""

    def __init__(self, options: Optional[Options] = None):
        self.options = options or Options()
        self.arena = TypeArena(self.options.handle_type)
        self.type_map: dict[str, TypeRef] = {}
        self.known_defines: dict[str, tuple[Optional[str], str]] = {
            name: (None, '') for name in self.options.known_defines
        }
        self.array_sizes: dict[str, int] = {}
        self.enums: dict[str, list[tuple[str, str]]] = {}
        self.pointer_structs: set[str] = set()
        self.delegates: dict[str, 'CSharpDelegate'] = {}
        self.warnings: list[str] = []
        self.skipped: list[tuple[str, str, str]] = []
        self._pending: list[TypeRef] = []

    @property
    def handle(self) -> TypeRef:
        return TypeRef(self.arena, self.arena.named(self.options.handle_type))

    def begin_configuration(self):
        """Reset tables that must not leak between configurations"""
        self.pointer_structs.clear()
        self.delegates.clear()
        self.skipped.clear()

    def warn(self, message: str):
        self.warnings.append(message)
        print(f'  >> warning: {message}')

    def skip(self, kind: str, name: str, reason: str):
        self.skipped.append((kind, name, reason))

    def register_type(self, native_name: str, ref: TypeRef) -> bool:
        """Register a native name; first registration wins"""
        if native_name in self.type_map:
            return False
        self.type_map[native_name] = ref
        return True

    def lookup(self, native_name: str) -> Optional[TypeRef]:
        if native_name in self.pointer_structs:
            return self.handle
        return self.type_map.get(native_name)

    def defer(self, native_name: str) -> TypeRef:
        """Forward reference fixed up by resolve_pending()"""
        ref = TypeRef(self.arena, self.arena.unresolved(native_name))
        self._pending.append(ref)
        return ref

    def resolve_pending(self):
        """Bind forward references; failures keep their fallback name"""
        pending, self._pending = self._pending, []
        for ref in pending:
            name = self.arena.fallback_name(ref.id)
            found = self.lookup(name)
            if found is None:
                self.warn(f'unresolved type {name}')
                continue
            self.arena.bind(ref.id, found.id)

    def add_pointer_struct(self, native_name: str):
        """Opaque struct: every reference becomes the handle type"""
        self.pointer_structs.add(native_name)

    def erase(self, native_name: str):
        """Collapse an already registered struct into the handle type"""
        self.add_pointer_struct(native_name)
        ref = self.type_map.get(native_name)
        if ref is not None:
            self.arena.erase(ref.id)

    def add_delegate(self, delegate: 'CSharpDelegate') -> bool:
        """Register a delegate once per name"""
        if delegate.name in self.delegates:
            return False
        self.delegates[delegate.name] = delegate
        self.register_type(delegate.name, TypeRef(self.arena, self.arena.named(delegate.name)))
        return True
