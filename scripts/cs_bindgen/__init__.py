"""
cs_bindgen - C# interop binding generation from dear_bindings metadata

This framework turns the JSON metadata emitted by dear_bindings into C#
sources: enums, constants, blittable layout structs with pointer views,
[DllImport] externs, callback delegates and ergonomic overloads that
marshal strings, booleans and arrays.
"""

from .ir import Metadata, TypeDescription, FunctionItem, StructItem, EnumItem
from .schema import MetadataError, validate_metadata
from .context import Options, ResolutionContext
from .types import TypeResolver, TypeRef, WrappedType
from .defines import DefineEvaluator
from .arrays import ArraySizeResolver, ArraySizeError
from .codegen import CodeGen
from .enum import EnumGenerator
from .struct import StructGenerator, AccessorRenderer
from .func import FuncGenerator
from .overload import OverloadGenerator
from .callback import DelegateSynthesizer
from .writer import CodeWriter
from .natives import copy_natives
from .generator import Generator, Configuration

__all__ = [
    'Metadata', 'TypeDescription', 'FunctionItem', 'StructItem', 'EnumItem',
    'MetadataError', 'validate_metadata',
    'Options', 'ResolutionContext',
    'TypeResolver', 'TypeRef', 'WrappedType',
    'DefineEvaluator',
    'ArraySizeResolver', 'ArraySizeError',
    'CodeGen',
    'EnumGenerator',
    'StructGenerator', 'AccessorRenderer',
    'FuncGenerator',
    'OverloadGenerator',
    'DelegateSynthesizer',
    'CodeWriter',
    'copy_natives',
    'Generator', 'Configuration',
]
