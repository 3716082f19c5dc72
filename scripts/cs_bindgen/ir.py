"""
IR (Intermediate Representation) module

Reads and represents the dear_bindings JSON metadata of a C API.
"""

from dataclasses import dataclass, field
from typing import Optional
import json
import os

from .schema import validate_metadata


@dataclass
class TypeDescription:
    """Structured native type (Builtin, User, Pointer, Array, Function, Type)"""
    kind: str
    builtin_type: Optional[str] = None
    name: Optional[str] = None
    inner_type: Optional['TypeDescription'] = None
    bounds: Optional[str] = None
    return_type: Optional['TypeDescription'] = None
    parameters: list['TypeDescription'] = field(default_factory=list)
    storage_classes: list[str] = field(default_factory=list)

    @property
    def is_const(self) -> bool:
        return 'const' in self.storage_classes

    @property
    def is_function_pointer(self) -> bool:
        """Type wrapping a pointer to a function"""
        inner = self.inner_type
        return (self.kind == 'Type' and inner is not None and inner.kind == 'Pointer'
                and inner.inner_type is not None and inner.inner_type.kind == 'Function')

    @classmethod
    def from_dict(cls, data: dict) -> 'TypeDescription':
        inner = data.get('inner_type')
        ret = data.get('return_type')
        return cls(
            kind=data['kind'],
            builtin_type=data.get('builtin_type'),
            name=data.get('name'),
            inner_type=cls.from_dict(inner) if inner else None,
            bounds=data.get('bounds'),
            return_type=cls.from_dict(ret) if ret else None,
            parameters=[cls.from_dict(p) for p in data.get('parameters', [])],
            storage_classes=list(data.get('storage_classes', [])),
        )


@dataclass
class TypeInfo:
    """Declared type text plus its structured description"""
    declaration: str
    description: TypeDescription

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['TypeInfo']:
        if data is None:
            return None
        return cls(data.get('declaration', ''), TypeDescription.from_dict(data['description']))


@dataclass
class ConditionalItem:
    """Preprocessor guard (ifdef / ifndef / if)"""
    condition: str
    expression: str


@dataclass
class Comments:
    attached: Optional[str] = None
    preceding: list[str] = field(default_factory=list)


def _conditionals(data: dict) -> list[ConditionalItem]:
    return [ConditionalItem(c['condition'], c['expression']) for c in data.get('conditionals', [])]


def _comments(data: dict) -> Optional[Comments]:
    comments = data.get('comments')
    if comments is None:
        return None
    return Comments(comments.get('attached'), list(comments.get('preceding', [])))


@dataclass
class DefineItem:
    name: str
    content: Optional[str] = None
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class EnumElement:
    name: str
    value: int
    value_expression: Optional[str] = None
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class EnumItem:
    name: str
    elements: list[EnumElement]
    is_flags_enum: bool = False
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class TypedefItem:
    name: str
    type: TypeInfo
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class StructField:
    name: str
    type: TypeInfo
    is_array: bool = False
    array_bounds: Optional[str] = None
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class StructItem:
    name: str
    fields: list[StructField]
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None


@dataclass
class FunctionArgument:
    name: str
    type: Optional[TypeInfo] = None
    default_value: Optional[str] = None
    is_varargs: bool = False

    @property
    def is_variadic(self) -> bool:
        """Declares a variadic marker ('...' or va_list)"""
        if self.is_varargs:
            return True
        return self.type is not None and self.type.declaration in ('va_list', '...')


@dataclass
class FunctionItem:
    name: str
    return_type: TypeInfo
    arguments: list[FunctionArgument]
    conditionals: list[ConditionalItem] = field(default_factory=list)
    comments: Optional[Comments] = None

    @property
    def is_variadic(self) -> bool:
        return bool(self.arguments) and self.arguments[-1].is_variadic


@dataclass
class Metadata:
    """Whole metadata file"""
    defines: list[DefineItem]
    enums: list[EnumItem]
    typedefs: list[TypedefItem]
    structs: list[StructItem]
    functions: list[FunctionItem]

    @classmethod
    def load(cls, json_path: str) -> 'Metadata':
        """Load metadata from a JSON file"""
        if not os.path.exists(json_path):
            raise FileNotFoundError(f'Could not find metadata file: {json_path}')
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Metadata':
        """Validate and parse a decoded JSON document"""
        validate_metadata(data)
        return cls(
            defines=[cls._parse_define(d) for d in data.get('defines', [])],
            enums=[cls._parse_enum(d) for d in data.get('enums', [])],
            typedefs=[cls._parse_typedef(d) for d in data.get('typedefs', [])],
            structs=[cls._parse_struct(d) for d in data.get('structs', [])],
            functions=[cls._parse_func(d) for d in data.get('functions', [])],
        )

    @staticmethod
    def _parse_define(data: dict) -> DefineItem:
        return DefineItem(data['name'], data.get('content'), _conditionals(data), _comments(data))

    @staticmethod
    def _parse_enum(data: dict) -> EnumItem:
        elements = [
            EnumElement(
                name=e['name'],
                value=e.get('value', 0),
                value_expression=e.get('value_expression'),
                conditionals=_conditionals(e),
                comments=_comments(e),
            )
            for e in data.get('elements', [])
        ]
        return EnumItem(data['name'], elements, data.get('is_flags_enum', False),
                        _conditionals(data), _comments(data))

    @staticmethod
    def _parse_typedef(data: dict) -> TypedefItem:
        return TypedefItem(data['name'], TypeInfo.from_dict(data['type']),
                           _conditionals(data), _comments(data))

    @staticmethod
    def _parse_struct(data: dict) -> StructItem:
        fields = [
            StructField(
                name=f['name'],
                type=TypeInfo.from_dict(f['type']),
                is_array=f.get('is_array', False),
                array_bounds=f.get('array_bounds'),
                conditionals=_conditionals(f),
                comments=_comments(f),
            )
            for f in data.get('fields', [])
        ]
        return StructItem(data['name'], fields, _conditionals(data), _comments(data))

    @staticmethod
    def _parse_func(data: dict) -> FunctionItem:
        args = [
            FunctionArgument(
                name=a.get('name', ''),
                type=TypeInfo.from_dict(a.get('type')),
                default_value=a.get('default_value'),
                is_varargs=a.get('is_varargs', False),
            )
            for a in data.get('arguments', [])
        ]
        return FunctionItem(data['name'], TypeInfo.from_dict(data['return_type']), args,
                            _conditionals(data), _comments(data))
