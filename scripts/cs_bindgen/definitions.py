"""
C# definition tree

Structured output built from the metadata, rewritten by passes, placed
into files and finally rendered by the writer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from .types import TypeRef, WrappedType

# anything whose str() is a C# type spelling
TypeLike = Union[TypeRef, WrappedType, str]


class DefinitionKind(Enum):
    CLASS = 'class'
    STRUCT = 'struct'
    VIEW = 'view'
    ENUM = 'enum'
    ENUM_ELEMENT = 'enum_element'
    FIELD = 'field'
    FIXED_FIELD = 'fixed_field'
    CONSTANT = 'constant'
    METHOD = 'method'
    OVERLOAD = 'overload'
    DELEGATE = 'delegate'
    ACCESSOR = 'accessor'
    PARAMETER = 'parameter'


@dataclass(eq=False)
class CSharpDefinition:
    name: str
    modifiers: list[str] = field(default_factory=list)
    attributes: list[str] = field(default_factory=list)
    trailing_comment: Optional[str] = None
    preceding_comments: list[str] = field(default_factory=list)
    file: Optional['CSharpFile'] = field(default=None, repr=False)

    kind: ClassVar[DefinitionKind]

    def set_comments(self, comments) -> 'CSharpDefinition':
        """Copy an ir.Comments block"""
        if comments is not None:
            self.trailing_comment = comments.attached
            self.preceding_comments = list(comments.preceding)
        return self


@dataclass(eq=False)
class CSharpContainer(CSharpDefinition):
    definitions: list[CSharpDefinition] = field(default_factory=list)

    def add(self, definition: CSharpDefinition) -> CSharpDefinition:
        self.definitions.append(definition)
        return definition


@dataclass(eq=False)
class CSharpClass(CSharpContainer):
    kind = DefinitionKind.CLASS


@dataclass(eq=False)
class CSharpStruct(CSharpContainer):
    """Raw data layout of a native struct"""
    native_name: str = ''
    kind = DefinitionKind.STRUCT


@dataclass(eq=False)
class CSharpView(CSharpContainer):
    """Pointer wrapping view over a layout struct"""
    target: str = ''
    kind = DefinitionKind.VIEW


@dataclass(eq=False)
class CSharpEnumElement(CSharpDefinition):
    value: str = '0'
    kind = DefinitionKind.ENUM_ELEMENT


@dataclass(eq=False)
class CSharpEnum(CSharpDefinition):
    elements: list[CSharpEnumElement] = field(default_factory=list)
    is_flags: bool = False
    native_name: str = ''
    kind = DefinitionKind.ENUM


@dataclass(eq=False)
class CSharpField(CSharpDefinition):
    type: TypeLike = 'int'
    kind = DefinitionKind.FIELD


@dataclass(eq=False)
class CSharpFixedField(CSharpDefinition):
    type: TypeLike = 'byte'
    size: int = 0
    kind = DefinitionKind.FIXED_FIELD


@dataclass(eq=False)
class CSharpConstant(CSharpDefinition):
    type: TypeLike = 'bool'
    value: str = 'true'
    kind = DefinitionKind.CONSTANT


@dataclass(eq=False)
class CSharpParameter(CSharpDefinition):
    type: TypeLike = 'int'
    kind = DefinitionKind.PARAMETER


@dataclass(eq=False)
class CSharpMethod(CSharpDefinition):
    """Raw extern declaration"""
    return_type: TypeLike = 'void'
    parameters: list[CSharpParameter] = field(default_factory=list)
    kind = DefinitionKind.METHOD


@dataclass(eq=False)
class CSharpDelegate(CSharpDefinition):
    return_type: TypeLike = 'void'
    parameters: list[CSharpParameter] = field(default_factory=list)
    kind = DefinitionKind.DELEGATE


@dataclass(eq=False)
class CSharpAccessor(CSharpDefinition):
    """View property over one layout field, spelled at render time"""
    type: Optional[TypeRef] = None
    element: Optional[TypeRef] = None
    array_size: Optional[int] = None
    array_fixed: bool = False
    vector_element: Optional[str] = None
    kind = DefinitionKind.ACCESSOR


@dataclass(eq=False)
class CSharpOverload(CSharpDefinition):
    """Ergonomic wrapper around one extern call"""
    entry_point: str = ''
    native_class: str = ''
    return_type: TypeLike = 'void'
    return_code: str = 'ret'
    params: Any = None  # overload.MethodParameters
    is_static: bool = False
    kind = DefinitionKind.OVERLOAD


@dataclass(eq=False)
class CSharpFile:
    file_name: str
    namespace: str
    usings: list[str] = field(default_factory=list)
    definitions: list[CSharpDefinition] = field(default_factory=list)
    subdir: str = ''
    header: list[str] = field(default_factory=list)

    def add(self, definition: CSharpDefinition) -> CSharpDefinition:
        definition.file = self
        self.definitions.append(definition)
        return definition
