"""
Type conversion module

Maps native type descriptions to C# types. Types live in an arena and are
referenced by id, so renaming or erasing an entry is seen by every pointer
and forward reference built on top of it.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .ir import TypeDescription


# dear_bindings builtin_type -> C#
BUILTIN_TYPES = {
    'void': 'void',
    'char': 'byte',
    'unsigned_char': 'byte',
    'signed_char': 'sbyte',
    'short': 'short',
    'unsigned_short': 'ushort',
    'int': 'int',
    'unsigned_int': 'uint',
    'long': 'int',
    'unsigned_long': 'uint',
    'long_long': 'long',
    'unsigned_long_long': 'ulong',
    'float': 'float',
    'double': 'double',
    'long_double': 'double',
    'bool': 'byte',
}

# Element types allowed in a `fixed` buffer
FIXED_TYPES = {
    'bool', 'byte', 'sbyte', 'short', 'ushort', 'int', 'uint',
    'long', 'ulong', 'char', 'float', 'double',
}

NAMED = 'named'
POINTER = 'pointer'
UNRESOLVED = 'unresolved'


@dataclass
class _Entry:
    kind: str
    name: str = ''
    target: Optional[int] = None  # pointee for POINTER, resolution for UNRESOLVED
    erased: bool = False


class TypeArena:
    """Table of C# types keyed by id"""

    def __init__(self, handle_type: str = 'IntPtr'):
        self.handle_type = handle_type
        self._entries: list[_Entry] = []
        self._named: dict[str, int] = {}
        self._pointers: dict[int, int] = {}

    def _add(self, entry: _Entry) -> int:
        self._entries.append(entry)
        return len(self._entries) - 1

    def named(self, name: str) -> int:
        if name not in self._named:
            self._named[name] = self._add(_Entry(NAMED, name))
        return self._named[name]

    def pointer(self, inner: int) -> int:
        if inner not in self._pointers:
            self._pointers[inner] = self._add(_Entry(POINTER, target=inner))
        return self._pointers[inner]

    def unresolved(self, name: str) -> int:
        return self._add(_Entry(UNRESOLVED, name))

    def fallback_name(self, type_id: int) -> str:
        return self._entries[type_id].name

    def bind(self, type_id: int, target: int):
        """Point an unresolved entry at its final type"""
        self._entries[type_id].target = target

    def rename(self, type_id: int, name: str):
        self._entries[type_id].name = name

    def erase(self, type_id: int):
        """Collapse a named type into the generic opaque handle"""
        self._entries[type_id].erased = True

    def spelling(self, type_id: int) -> str:
        entry = self._entries[type_id]
        if entry.kind == NAMED:
            return self.handle_type if entry.erased else entry.name
        if entry.kind == UNRESOLVED:
            if entry.target is None:
                return entry.name
            return self.spelling(entry.target)
        inner = self.spelling(entry.target)
        if inner == self.handle_type:
            return self.handle_type
        return f'{inner}*'


@dataclass(frozen=True)
class TypeRef:
    """Handle to an arena entry; str() gives the current C# spelling"""
    arena: TypeArena
    id: int

    @property
    def name(self) -> str:
        return self.arena.spelling(self.id)

    @property
    def is_pointer(self) -> bool:
        return self.name.endswith('*')

    def __str__(self) -> str:
        return self.name


class WrappedType:
    """Type spelled as its wrapped view when one exists, resolved lazily"""

    def __init__(self, resolver: 'TypeResolver', ref: TypeRef):
        self.resolver = resolver
        self.ref = ref

    @property
    def wrapped(self) -> Optional[str]:
        return self.resolver.wrapped_name(str(self.ref))

    def __str__(self) -> str:
        return self.wrapped or str(self.ref)


class TypeResolver:
    """Resolves TypeDescription to TypeRef against the shared context"""

    def __init__(self, context: 'ResolutionContext'):
        self.context = context
        self.arena = context.arena

    def named(self, name: str) -> TypeRef:
        return TypeRef(self.arena, self.arena.named(name))

    def pointer_to(self, inner: TypeRef) -> TypeRef:
        return TypeRef(self.arena, self.arena.pointer(inner.id))

    def resolve(self, desc: 'TypeDescription', delegate_name: Optional[str] = None) -> TypeRef:
        """Resolve a native type description"""
        kind = desc.kind
        if kind == 'Builtin':
            builtin = desc.builtin_type or 'void'
            return self.named(self.context.options.conversion_types.get(builtin, BUILTIN_TYPES.get(builtin, builtin)))
        if kind == 'User':
            return self.resolve_name(desc.name or '')
        if kind in ('Pointer', 'Array'):
            # arrays decay to a pointer to their element
            return self.pointer_to(self.resolve(desc.inner_type))
        if kind == 'Type':
            if desc.is_function_pointer:
                return self.named(delegate_name or f'{desc.name}Delegate')
            return self.resolve(desc.inner_type)
        self.context.warn(f'unrecognized type shape {kind} ({desc.name}), using "unknown"')
        return self.named('unknown')

    def resolve_name(self, name: str) -> TypeRef:
        """Resolve a named (User) type"""
        options = self.context.options
        if name in options.conversion_types:
            return self.named(options.conversion_types[name])
        found = self.context.lookup(name)
        if found is not None:
            return found
        if self.is_vector_name(name):
            return self.named(options.vector_prefix)
        return self.context.defer(name)

    def is_vector_name(self, name: Optional[str]) -> bool:
        prefix = self.context.options.vector_prefix
        return bool(name) and (name == prefix or name.startswith(prefix + '_'))

    def is_vector(self, desc: 'TypeDescription') -> bool:
        return desc.kind == 'User' and self.is_vector_name(desc.name)

    def wrapped_name(self, spelled: str) -> Optional[str]:
        """Wrapped view name for a single pointer to a wrappable struct"""
        options = self.context.options
        if not spelled.startswith(options.wrap_prefix) or not spelled.endswith('*'):
            return None
        if spelled.startswith(options.vector_prefix):
            return None
        base = spelled.rstrip('*')
        if len(spelled) - len(base) > 1:
            return None
        if base in self.context.enums:
            return None
        if base in options.conversion_types or base in options.conversion_types.values():
            return None
        if base.endswith(options.wrapped_suffix):
            return None
        return base + options.wrapped_suffix
