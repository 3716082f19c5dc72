"""
Overload generation module

Builds the ergonomic C# wrappers around raw extern calls: classifies every
argument into a marshaling strategy, expands trailing default arguments
into shorter overloads and renders the wrapper bodies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TYPE_CHECKING, Union

from .codegen import CodeGen, escape_identifier, last_segment
from .definitions import CSharpOverload, TypeLike
from .types import WrappedType

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .ir import FunctionArgument, FunctionItem, TypeDescription
    from .types import TypeResolver


class MarshalKind(Enum):
    BOOL_VALUE = 'bool_value'
    BOOL_REF = 'bool_ref'
    BOOL_WRITEBACK = 'bool_writeback'
    VOID_PTR = 'void_ptr'
    STRING = 'string'
    STRING_FREE = 'string_free'
    STRING_BUFFER = 'string_buffer'
    FIXED_REF = 'fixed_ref'
    NATIVE_ARRAY = 'native_array'
    STRING_ARRAY = 'string_array'
    DEFAULT_VALUE = 'default_value'
    DEFAULT_STRING = 'default_string'
    DEFAULT_STRING_FREE = 'default_string_free'


class DefaultValue:
    """Default argument literal, spelled against the parameter type at render time"""

    def __init__(self, context: 'ResolutionContext', type_ref: TypeLike, value: str):
        self.context = context
        self.type_ref = type_ref
        self.value = value

    def __str__(self) -> str:
        spelled = str(self.type_ref)
        handle = self.context.options.handle_type
        # erased structs take the handle type after the overload was built
        if spelled == handle:
            return f'{handle}.Zero'
        if spelled in self.context.enums:
            return f'({spelled}){self.value}'
        return self.value


@dataclass
class MarshalStep:
    kind: MarshalKind
    name: str
    type: TypeLike = ''
    value: Union[str, DefaultValue] = ''


@dataclass
class ManagedParam:
    type: TypeLike
    name: str
    modifier: str = ''
    suffix: str = ''

    @property
    def type_text(self) -> str:
        text = f'{self.type}{self.suffix}'
        return f'{self.modifier} {text}' if self.modifier else text

    def __str__(self) -> str:
        return f'{self.type_text} {self.name}'


@dataclass
class MethodParameters:
    managed: list[ManagedParam] = field(default_factory=list)
    native: list[str] = field(default_factory=list)
    before: list[MarshalStep] = field(default_factory=list)
    fixed: list[MarshalStep] = field(default_factory=list)
    after: list[MarshalStep] = field(default_factory=list)

    def copy(self) -> 'MethodParameters':
        return MethodParameters(list(self.managed), list(self.native), list(self.before),
                                list(self.fixed), list(self.after))


class OverloadGenerator:
    """Generates overload sets for native functions of one C# class"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver',
                 native_class: str, is_static: bool = False):
        self.context = context
        self.resolver = resolver
        self.native_class = native_class
        self.is_static = is_static
        self._signatures: set[str] = set()
        self._comments: dict[str, object] = {}

    def begin(self):
        """Start a new target class"""
        self._signatures.clear()
        self._comments.clear()

    def generate(self, func: 'FunctionItem') -> list[CSharpOverload]:
        """All overloads for func: one per defaulted tail, then the full one"""
        name = last_segment(func.name)
        comments = func.comments
        if name.endswith('Ex') and len(name) > 2:
            name = name[:-2]
            comments = self._comments.get(name, comments)
        else:
            self._comments[name] = comments

        return_type, return_code = self.return_type(func)
        overloads: list[Optional[CSharpOverload]] = []
        params = MethodParameters()
        args = func.arguments
        for i, arg in enumerate(args):
            if arg.type is None:
                continue
            if arg.name == 'self':
                params.native.append('NativePtr')
                continue
            if arg.default_value is not None:
                shorter = self._with_defaults(func, args[i:], params.copy())
                overloads.append(self._make(func, name, comments, return_type, return_code, shorter))
            self.classify(func, arg, params)
        overloads.append(self._make(func, name, comments, return_type, return_code, params))
        return [o for o in overloads if o is not None]

    def return_type(self, func: 'FunctionItem') -> tuple[TypeLike, str]:
        desc = func.return_type.description
        if desc.kind == 'Builtin' and desc.builtin_type == 'bool':
            return 'bool', 'ret != 0'
        return WrappedType(self.resolver, self.resolver.resolve(desc)), 'ret'

    def _make(self, func: 'FunctionItem', name: str, comments, return_type: TypeLike,
              return_code: str, params: MethodParameters) -> Optional[CSharpOverload]:
        signature = f'{name}({", ".join(p.type_text for p in params.managed)})'
        if signature in self._signatures:
            return None
        self._signatures.add(signature)
        modifiers = ['public', 'static'] if self.is_static else ['public']
        overload = CSharpOverload(name, modifiers=modifiers, entry_point=func.name,
                                  native_class=self.native_class, return_type=return_type,
                                  return_code=return_code, params=params, is_static=self.is_static)
        return overload.set_comments(comments)

    def classify(self, func: 'FunctionItem', arg: 'FunctionArgument', params: MethodParameters):
        """Pick a marshaling strategy for one argument"""
        desc = arg.type.description
        name = escape_identifier(arg.name)
        native = f'native_{name.lstrip("@")}'

        if desc.kind == 'Array':
            self._classify_array(desc, name, params)
            return

        if desc.kind == 'Type':
            if desc.is_function_pointer:
                params.managed.append(ManagedParam(f'{func.name}{arg.name}Delegate', name))
            else:
                params.managed.append(ManagedParam(self.resolver.resolve(desc), name))
            params.native.append(name)
            return

        if desc.kind == 'Pointer':
            inner = desc.inner_type
            if inner.kind == 'Builtin':
                builtin = inner.builtin_type
                if builtin == 'void':
                    params.managed.append(ManagedParam(self.context.options.handle_type, name))
                    params.native.append(native)
                    params.before.append(MarshalStep(MarshalKind.VOID_PTR, name))
                elif builtin == 'bool':
                    params.managed.append(ManagedParam('bool', name, modifier='ref'))
                    params.native.append(native)
                    params.before.append(MarshalStep(MarshalKind.BOOL_REF, name))
                    params.after.append(MarshalStep(MarshalKind.BOOL_WRITEBACK, name))
                elif builtin == 'char' and inner.is_const:
                    params.managed.append(ManagedParam('ReadOnlySpan<char>', name))
                    params.native.append(native)
                    params.before.append(MarshalStep(MarshalKind.STRING, name))
                    params.after.append(MarshalStep(MarshalKind.STRING_FREE, name))
                elif builtin == 'char':
                    params.managed.append(ManagedParam('byte[]', name))
                    params.native.append(native)
                    params.fixed.append(MarshalStep(MarshalKind.STRING_BUFFER, name))
                else:
                    self._fixed_ref(self.resolver.resolve(inner), name, params)
                return
            if inner.kind == 'Pointer':
                self._fixed_ref(self.resolver.resolve(inner), name, params)
                return
            if inner.kind == 'User':
                if self.resolver.is_vector(inner):
                    params.managed.append(ManagedParam(f'{self.context.options.vector_prefix}*', name))
                else:
                    params.managed.append(ManagedParam(WrappedType(self.resolver, self.resolver.resolve(desc)), name))
                params.native.append(name)
                return
            self.context.warn(f'unrecognized pointer argument {arg.name} of {func.name}, passing through')
            params.managed.append(ManagedParam(self.resolver.resolve(desc), name))
            params.native.append(name)
            return

        if desc.kind == 'Builtin' and desc.builtin_type == 'bool':
            params.managed.append(ManagedParam('bool', name))
            params.native.append(native)
            params.before.append(MarshalStep(MarshalKind.BOOL_VALUE, name))
            return

        if desc.kind not in ('Builtin', 'User'):
            self.context.warn(f'unrecognized argument {arg.name} ({desc.kind}) of {func.name}, passing through')
        params.managed.append(ManagedParam(WrappedType(self.resolver, self.resolver.resolve(desc)), name))
        params.native.append(name)

    def _classify_array(self, desc: 'TypeDescription', name: str, params: MethodParameters):
        inner = desc.inner_type
        native = f'native_{name.lstrip("@")}'
        if inner.kind == 'Pointer' and inner.inner_type is not None and inner.inner_type.builtin_type == 'char':
            params.managed.append(ManagedParam('string', name, suffix='[]'))
            params.native.append(native)
            params.before.append(MarshalStep(MarshalKind.STRING_ARRAY, name))
            return
        bounds = (desc.bounds or '').strip()
        if inner.kind == 'Builtin' and inner.builtin_type == 'float' and bounds.isdigit() and 2 <= int(bounds) <= 4:
            # float[2..4] is a System.Numerics vector
            vector = f'Vector{bounds}'
            params.managed.append(ManagedParam(vector, name, modifier='ref'))
            params.native.append(f'(float*){native}')
            params.fixed.append(MarshalStep(MarshalKind.FIXED_REF, name, type=vector))
            return
        element = self.resolver.resolve(inner)
        params.managed.append(ManagedParam(element, name, suffix='[]'))
        params.native.append(native)
        params.before.append(MarshalStep(MarshalKind.NATIVE_ARRAY, name, type=element))

    def _fixed_ref(self, pointee: TypeLike, name: str, params: MethodParameters):
        params.managed.append(ManagedParam(pointee, name, modifier='ref'))
        params.native.append(f'native_{name.lstrip("@")}')
        params.fixed.append(MarshalStep(MarshalKind.FIXED_REF, name, type=pointee))

    def _with_defaults(self, func: 'FunctionItem', tail: list['FunctionArgument'],
                       params: MethodParameters) -> MethodParameters:
        """Parameters of the overload that omits the defaulted tail"""
        options = self.context.options
        for arg in tail:
            if arg.type is None:
                continue
            name = escape_identifier(arg.name)
            desc = arg.type.description
            type_ref = self.resolver.resolve(desc)

            if arg.default_value is None:
                self.context.warn(f'argument {arg.name} of {func.name} follows a default but has none')
                value = 'default'
            else:
                value = options.default_values.get(arg.default_value, arg.default_value)
            if value == 'false':
                value = '0'
            elif value == 'true':
                value = '1'

            if (desc.kind == 'Pointer' and value != 'null' and desc.inner_type is not None
                    and desc.inner_type.builtin_type == 'char'):
                params.native.append(name)
                params.before.append(MarshalStep(MarshalKind.DEFAULT_STRING, name, type=type_ref, value=value))
                params.after.append(MarshalStep(MarshalKind.DEFAULT_STRING_FREE, name))
                continue

            params.native.append(name)
            params.before.append(MarshalStep(MarshalKind.DEFAULT_VALUE, name, type=type_ref,
                                             value=DefaultValue(self.context, type_ref, value)))
        return params


def write_overload(overload: CSharpOverload, gen: CodeGen):
    """Render the signature and body of an overload"""
    params: MethodParameters = overload.params
    return_type = str(overload.return_type)
    managed = ', '.join(str(p) for p in params.managed)
    gen.line(f'{" ".join(overload.modifiers)} {return_type} {overload.name}({managed})')
    gen.push_block()
    for step in params.before:
        _write_step(step, gen)
        gen.line()
    if params.fixed:
        for step in params.fixed:
            _write_step(step, gen)
        gen.push_block()
    call = f'{overload.native_class}.{overload.entry_point}({", ".join(params.native)});'
    gen.line(call if return_type == 'void' else f'var ret = {call}')
    for step in params.after:
        _write_step(step, gen)
    if return_type != 'void':
        gen.line(f'return {overload.return_code};')
    if params.fixed:
        gen.pop_block()
    gen.pop_block()


def _write_step(step: MarshalStep, gen: CodeGen):
    name = step.name
    native = f'native_{name.lstrip("@")}'
    kind = step.kind
    if kind == MarshalKind.BOOL_VALUE:
        gen.line(f"// Marshaling '{name}' to native bool")
        gen.line(f'var {native} = {name} ? (byte)1 : (byte)0;')
    elif kind == MarshalKind.BOOL_REF:
        gen.line(f"// Marshaling '{name}' to native bool")
        gen.line(f'var {native}_val = {name} ? (byte)1 : (byte)0;')
        gen.line(f'var {native} = &{native}_val;')
    elif kind == MarshalKind.BOOL_WRITEBACK:
        gen.line(f'{name} = {native}_val != 0;')
    elif kind == MarshalKind.VOID_PTR:
        gen.line(f"// Marshaling '{name}' to native void pointer")
        gen.line(f'var {native} = {name}.ToPointer();')
    elif kind == MarshalKind.STRING:
        gen.line(f"// Marshaling '{name}' to native string")
        gen.line(f'byte* {native};')
        gen.line(f'var {name}_byteCount = 0;')
        with gen.block(f'if ({name} != null)'):
            gen.line(f'{name}_byteCount = Encoding.UTF8.GetByteCount({name});')
            with gen.block(f'if ({name}_byteCount > Util.StackAllocationSizeLimit)'):
                gen.line(f'{native} = Util.Allocate({name}_byteCount + 1);')
            with gen.block('else'):
                gen.line(f'var {native}_stackBytes = stackalloc byte[{name}_byteCount + 1];')
                gen.line(f'{native} = {native}_stackBytes;')
            gen.line(f'var {name}_offset = Util.GetUtf8({name}, {native}, {name}_byteCount);')
            gen.line(f'{native}[{name}_offset] = 0;')
        gen.line(f'else {native} = null;')
    elif kind == MarshalKind.STRING_FREE:
        with gen.block(f'if ({name}_byteCount > Util.StackAllocationSizeLimit)'):
            gen.line(f'Util.Free({native});')
    elif kind == MarshalKind.STRING_BUFFER:
        gen.line(f'fixed (byte* {native} = {name})')
    elif kind == MarshalKind.FIXED_REF:
        gen.line(f'fixed ({step.type}* {native} = &{name})')
    elif kind == MarshalKind.NATIVE_ARRAY:
        gen.line(f"// Marshaling '{name}' to native {step.type} array")
        gen.line(f'var {native} = stackalloc {step.type}[{name}.Length];')
        with gen.block(f'for (var i = 0; i < {name}.Length; i++)'):
            gen.line(f'{native}[i] = {name}[i];')
    elif kind == MarshalKind.STRING_ARRAY:
        _write_string_array(name, gen)
    elif kind == MarshalKind.DEFAULT_VALUE:
        gen.line(f'{step.type} {name} = {step.value};')
    elif kind == MarshalKind.DEFAULT_STRING:
        gen.line(f'{step.type} {name};')
        gen.line(f'var {name}_byteCount = Encoding.UTF8.GetByteCount({step.value});')
        with gen.block(f'if ({name}_byteCount > Util.StackAllocationSizeLimit)'):
            gen.line(f'{name} = Util.Allocate({name}_byteCount + 1);')
        with gen.block('else'):
            gen.line(f'var {name}_stackBytes = stackalloc byte[{name}_byteCount + 1];')
            gen.line(f'{name} = {name}_stackBytes;')
        gen.line(f'var {name}_offset = Util.GetUtf8({step.value}, {name}, {name}_byteCount);')
        gen.line(f'{name}[{name}_offset] = 0;')
    elif kind == MarshalKind.DEFAULT_STRING_FREE:
        with gen.block(f'if ({name}_byteCount > Util.StackAllocationSizeLimit)'):
            gen.line(f'Util.Free({name});')


def _write_string_array(name: str, gen: CodeGen):
    native = f'native_{name.lstrip("@")}'
    gen.line(f"// Marshaling '{name}' to native string array")
    gen.line(f'var {name}_byteCounts = stackalloc int[{name}.Length];')
    gen.line(f'var {name}_byteCount = 0;')
    with gen.block(f'for (var i = 0; i < {name}.Length; i++)'):
        gen.line(f'{name}_byteCounts[i] = Encoding.UTF8.GetByteCount({name}[i]);')
        gen.line(f'{name}_byteCount += {name}_byteCounts[i] + 1;')
    gen.line(f'var {native}_data = stackalloc byte[{name}_byteCount];')
    gen.line(f'var {name}_offset = 0;')
    with gen.block(f'for (var i = 0; i < {name}.Length; i++)'):
        gen.line(f'var s = {name}[i];')
        gen.line(f'{name}_offset += Util.GetUtf8(s, {native}_data + {name}_offset, {name}_byteCounts[i]);')
        gen.line(f'{native}_data[{name}_offset++] = 0;')
    gen.line(f'var {native} = stackalloc byte*[{name}.Length];')
    gen.line(f'{name}_offset = 0;')
    with gen.block(f'for (var i = 0; i < {name}.Length; i++)'):
        gen.line(f'{native}[i] = &{native}_data[{name}_offset];')
        gen.line(f'{name}_offset += {name}_byteCounts[i] + 1;')
