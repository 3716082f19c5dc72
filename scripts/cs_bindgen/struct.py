"""
Struct binding generation module

Generates, per native struct, the raw layout struct and the pointer
wrapping view with typed accessors and instance methods.
"""

from typing import Optional, TYPE_CHECKING

from .codegen import is_string_field_name, last_segment
from .definitions import (
    CSharpAccessor, CSharpDefinition, CSharpField, CSharpFixedField,
    CSharpStruct, CSharpView,
)
from .types import BUILTIN_TYPES, FIXED_TYPES

if TYPE_CHECKING:
    from .arrays import ArraySizeResolver
    from .callback import DelegateSynthesizer
    from .context import ResolutionContext
    from .defines import DefineEvaluator
    from .func import FuncGenerator
    from .ir import FunctionItem, StructField, StructItem
    from .overload import OverloadGenerator
    from .types import TypeResolver

STRUCT_MODIFIERS = ['public', 'unsafe', 'partial']


def pairs_with(func_name: str, struct_name: str) -> bool:
    """ImDrawList_AddLine pairs with ImDrawList"""
    parts = func_name.split('_')
    if len(parts) < 2:
        return False
    if len(parts) == 2:
        return parts[0] == struct_name
    return parts[-2] == struct_name


class StructGenerator:
    """Generates layout structs and their views"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver',
                 evaluator: 'DefineEvaluator', arrays: 'ArraySizeResolver',
                 delegates: 'DelegateSynthesizer', funcs: 'FuncGenerator'):
        self.context = context
        self.resolver = resolver
        self.evaluator = evaluator
        self.arrays = arrays
        self.delegates = delegates
        self.funcs = funcs

    def generate(self, struct: 'StructItem', functions: list['FunctionItem'],
                 overloads: 'OverloadGenerator') -> Optional[tuple[CSharpStruct, CSharpView]]:
        """Layout and view for struct, None when skipped or opaque"""
        native_name = struct.name
        if native_name in self.context.options.custom_types:
            self.context.skip('struct', native_name, 'custom type')
            return None
        if self.resolver.is_vector_name(native_name):
            self.context.skip('struct', native_name, 'vector family')
            return None
        if not self.evaluator.evaluates(struct.conditionals):
            self.context.skip('struct', native_name, 'conditionals')
            return None
        if not struct.fields:
            self.context.add_pointer_struct(native_name)
            return None

        name = last_segment(native_name)
        ref = self.resolver.named(name)
        self.context.register_type(native_name, ref)
        self.context.register_type(name, ref)

        layout = CSharpStruct(name, modifiers=list(STRUCT_MODIFIERS), native_name=native_name)
        layout.set_comments(struct.comments)
        view = CSharpView(name + self.context.options.wrapped_suffix,
                          modifiers=list(STRUCT_MODIFIERS), target=name)
        view.set_comments(struct.comments)

        for field in struct.fields:
            if not self.evaluator.evaluates(field.conditionals):
                self.context.skip('field', f'{native_name}.{field.name}', 'conditionals')
                continue
            if '__anonymous_type' in field.name:
                self.context.skip('field', f'{native_name}.{field.name}', 'anonymous')
                continue
            accessor = self._layout_field(name, field, layout)
            view.add(accessor.set_comments(field.comments))

        overloads.begin()
        for func in functions:
            if not pairs_with(func.name, name):
                continue
            if self.funcs.should_skip(func) is not None:
                continue
            view.definitions.extend(overloads.generate(func))
        return layout, view

    def _layout_field(self, struct_name: str, field: 'StructField', layout: CSharpStruct) -> CSharpAccessor:
        desc = field.type.description
        if field.is_array:
            element_desc = desc.inner_type if desc.kind == 'Array' and desc.inner_type else desc
            bounds = field.array_bounds or desc.bounds or '0'
            size = self.arrays.resolve(bounds, owner=f'{struct_name}.{field.name}')
            if self.resolver.is_vector(element_desc):
                element = self.resolver.named(self.context.options.vector_prefix)
            else:
                element = self.resolver.resolve(element_desc)
            fixed = size > 0 and str(element) in FIXED_TYPES
            if fixed:
                self._add(layout, CSharpFixedField(field.name, modifiers=['public', 'fixed'],
                                                   type=element, size=size), field)
            else:
                for i in range(size):
                    self._add(layout, CSharpField(f'{field.name}_{i}', modifiers=['public'], type=element),
                              field if i == 0 else None)
            return CSharpAccessor(field.name, element=element, array_size=size, array_fixed=fixed)

        if desc.is_function_pointer:
            delegate_name = f'{desc.name or field.name}Delegate'
            self.delegates.register(desc.inner_type.inner_type, delegate_name)
            ref = self.resolver.resolve(desc, delegate_name)
            self._add(layout, CSharpField(field.name, modifiers=['public'], type=ref), field)
            return CSharpAccessor(field.name, type=ref)

        ref = self.resolver.resolve(desc)
        self._add(layout, CSharpField(field.name, modifiers=['public'], type=ref), field)
        vector_element = None
        if self.resolver.is_vector(desc) and desc.name != self.context.options.vector_prefix:
            vector_element = desc.name[len(self.context.options.vector_prefix) + 1:]
        return CSharpAccessor(field.name, type=ref, vector_element=vector_element)

    @staticmethod
    def _add(layout: CSharpStruct, definition: CSharpDefinition, field: Optional['StructField']):
        if field is not None:
            definition.set_comments(field.comments)
        layout.add(definition)


class AccessorRenderer:
    """Spells view accessors once every type is final"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver'):
        self.context = context
        self.resolver = resolver

    def line(self, accessor: CSharpAccessor) -> str:
        name = accessor.name
        handle = self.context.options.handle_type
        if accessor.array_size is not None:
            element = str(accessor.element)
            if element.endswith('*'):
                element = handle
            if accessor.array_fixed:
                address = f'NativePtr->{name}'
            elif accessor.array_size:
                address = f'&NativePtr->{name}_0'
            else:
                # no numbered fields were laid out
                address = 'null'
            return (f'public RangeAccessor<{element}> {name} => '
                    f'new RangeAccessor<{element}>({address}, {accessor.array_size});')

        if accessor.vector_element is not None:
            element = self.vector_element(accessor.vector_element)
            wrapped = self.resolver.wrapped_name(f'{element}*')
            if wrapped:
                return (f'public ImPtrVector<{wrapped}> {name} => new ImPtrVector<{wrapped}>'
                        f'(NativePtr->{name}, Unsafe.SizeOf<{element}>());')
            return f'public ImVector<{element}> {name} => new ImVector<{element}>(NativePtr->{name});'

        spelled = str(accessor.type)
        if spelled.endswith('*'):
            wrapped = self.resolver.wrapped_name(spelled)
            if wrapped:
                return f'public {wrapped} {name} => new {wrapped}(NativePtr->{name});'
            if spelled == 'byte*' and is_string_field_name(name):
                return f'public NullTerminatedString {name} => new NullTerminatedString(NativePtr->{name});'
            return (f'public {handle} {name} {{ get => ({handle})NativePtr->{name}; '
                    f'set => NativePtr->{name} = ({spelled})value; }}')
        return f'public ref {spelled} {name} => ref Unsafe.AsRef<{spelled}>(&NativePtr->{name});'

    def vector_element(self, remainder: str) -> str:
        """C# element type of ImVector_<remainder>"""
        options = self.context.options
        if remainder in BUILTIN_TYPES:
            return BUILTIN_TYPES[remainder]
        suffix = options.wrapped_suffix
        if remainder.endswith(suffix):
            base = remainder[:-len(suffix)]
            if base in BUILTIN_TYPES or base.startswith('const_'):
                return options.handle_type
        element = last_segment(remainder)
        if element in options.conversion_types:
            return options.conversion_types[element]
        found = self.context.lookup(element)
        return str(found) if found is not None else element
