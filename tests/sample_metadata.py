"""Builders for dear_bindings style metadata used across the tests"""

import json
import os

from cs_bindgen.arrays import ArraySizeResolver
from cs_bindgen.callback import DelegateSynthesizer
from cs_bindgen.context import Options, ResolutionContext
from cs_bindgen.defines import DefineEvaluator
from cs_bindgen.func import FuncGenerator
from cs_bindgen.ir import Metadata, TypeDescription
from cs_bindgen.struct import StructGenerator
from cs_bindgen.types import TypeResolver


def builtin(name, const=False):
    desc = {'kind': 'Builtin', 'builtin_type': name}
    if const:
        desc['storage_classes'] = ['const']
    return desc


def user(name, const=False):
    desc = {'kind': 'User', 'name': name}
    if const:
        desc['storage_classes'] = ['const']
    return desc


def pointer(inner):
    return {'kind': 'Pointer', 'inner_type': inner}


def array(inner, bounds):
    return {'kind': 'Array', 'bounds': bounds, 'inner_type': inner}


def param(name, desc):
    return {'kind': 'Type', 'name': name, 'inner_type': desc}


def function_pointer(name, return_type, *params):
    func = {'kind': 'Function', 'return_type': return_type, 'parameters': list(params)}
    return {'kind': 'Type', 'name': name, 'inner_type': pointer(func)}


def const_char_ptr():
    return pointer(builtin('char', const=True))


def type_info(desc, declaration=''):
    return {'declaration': declaration, 'description': desc}


def field(name, desc, bounds=None, **extra):
    item = {'name': name, 'type': type_info(desc), 'is_array': bounds is not None}
    if bounds is not None:
        item['array_bounds'] = bounds
    item.update(extra)
    return item


def argument(name, desc, default=None, declaration=''):
    item = {'name': name, 'type': type_info(desc, declaration)}
    if default is not None:
        item['default_value'] = default
    return item


def varargs():
    return {'name': '...', 'is_varargs': True}


def function(name, arguments=(), return_type=None, **extra):
    item = {'name': name, 'return_type': type_info(return_type or builtin('void')),
            'arguments': list(arguments)}
    item.update(extra)
    return item


def struct(name, fields=(), **extra):
    item = {'name': name, 'fields': list(fields)}
    item.update(extra)
    return item


def element(name, value, expression=None, **extra):
    item = {'name': name, 'value': value}
    if expression is not None:
        item['value_expression'] = expression
    item.update(extra)
    return item


def enum(name, elements, flags=False, **extra):
    item = {'name': name, 'is_flags_enum': flags, 'elements': list(elements)}
    item.update(extra)
    return item


def define(name, content=None, **extra):
    item = {'name': name}
    if content is not None:
        item['content'] = content
    item.update(extra)
    return item


def ifdef(name):
    return {'condition': 'ifdef', 'expression': name}


def ifndef(name):
    return {'condition': 'ifndef', 'expression': name}


def document(defines=(), enums=(), typedefs=(), structs=(), functions=()):
    return {
        'defines': list(defines),
        'enums': list(enums),
        'typedefs': list(typedefs),
        'structs': list(structs),
        'functions': list(functions),
    }


def describe(desc) -> TypeDescription:
    return TypeDescription.from_dict(desc)


def parse(**sections) -> Metadata:
    return Metadata.from_dict(document(**sections))


def write_json(path, payload):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        json.dump(payload, f, indent=2)


IMGUI_CONVERSIONS = {'ImVec2': 'Vector2', 'ImVec4': 'Vector4', 'size_t': 'ulong'}


def make_context(**options) -> ResolutionContext:
    options.setdefault('conversion_types', dict(IMGUI_CONVERSIONS))
    return ResolutionContext(Options(**options))


class Toolkit:
    """One context with every generator wired to it"""

    def __init__(self, **options):
        self.context = make_context(**options)
        self.resolver = TypeResolver(self.context)
        self.evaluator = DefineEvaluator(self.context)
        self.arrays = ArraySizeResolver(self.context)
        self.delegates = DelegateSynthesizer(self.context, self.resolver)
        self.funcs = FuncGenerator(self.context, self.resolver, self.evaluator, self.delegates)
        self.structs = StructGenerator(self.context, self.resolver, self.evaluator, self.arrays,
                                       self.delegates, self.funcs)

    def register_struct(self, native_name, name=None):
        ref = self.resolver.named(name or native_name)
        self.context.register_type(native_name, ref)
        return ref

    def register_enum(self, name):
        self.context.enums[name] = []
        return self.register_struct(name)


def imgui_document():
    """Small but representative slice of dcimgui.json"""
    return document(
        defines=[
            define('IMGUI_VERSION', '"1.91.0"'),
            define('IMGUI_VERSION_NUM', '19100'),
            define('IMGUI_HAS_TABLE'),
            define('IMGUI_DEBUG_ONLY', '1', conditionals=[ifdef('IMGUI_ENABLE_DEBUG')]),
        ],
        enums=[
            enum('Color_', [element('Color_Red', 0), element('Color_Blue', 1)]),
            enum('ImGuiWindowFlags_', [
                element('ImGuiWindowFlags_None', 0, '0'),
                element('ImGuiWindowFlags_NoTitleBar', 1, '1<<0'),
                element('ImGuiWindowFlags_NoDecoration', 1, 'ImGuiWindowFlags_NoTitleBar'),
            ], flags=True, comments={'preceding': ['// Flags for ImGui::Begin()']}),
            enum('ImGuiDir', [
                element('ImGuiDir_Left', 0),
                element('ImGuiDir_Right', 1),
                element('ImGuiDir_COUNT', 2),
            ]),
        ],
        typedefs=[
            {'name': 'ImGuiID', 'type': type_info(builtin('unsigned_int'))},
            {'name': 'ImDrawIdx', 'type': type_info(builtin('unsigned_short'))},
            {'name': 'ImGuiWindowFlags', 'type': type_info(builtin('int'))},
            {'name': 'ImGuiInputTextCallback',
             'type': type_info(function_pointer('ImGuiInputTextCallback', builtin('int'),
                                                param('data', pointer(user('ImGuiInputTextCallbackData')))))},
        ],
        structs=[
            struct('ImGuiContext'),
            struct('ImGuiInputTextCallbackData', [field('BufSize', builtin('int'))]),
            struct('ImDrawCmd', [field('ElemCount', builtin('unsigned_int'))]),
            struct('ImDrawList', [
                field('CmdBuffer', user('ImVector_ImDrawCmd')),
                field('IdxBuffer', user('ImVector_ImDrawIdx')),
                field('_OwnerName', const_char_ptr()),
                field('_Ctx', pointer(user('ImGuiContext'))),
            ], comments={'attached': '// Draw command list'}),
            struct('ImGuiStyle', [
                field('Alpha', builtin('float')),
                field('WindowPadding', user('ImVec2')),
                field('ArrowSizes', array(builtin('float'), 'ImGuiDir_COUNT'), bounds='ImGuiDir_COUNT'),
            ]),
        ],
        functions=[
            function('ImGui_Begin', [
                argument('name', const_char_ptr()),
                argument('p_open', pointer(builtin('bool')), default='NULL'),
                argument('flags', user('ImGuiWindowFlags'), default='0'),
            ], return_type=builtin('bool')),
            function('ImGui_End'),
            function('ImGui_GetWindowDrawList', return_type=pointer(user('ImDrawList'))),
            function('ImGui_Text', [argument('fmt', const_char_ptr()), varargs()]),
            function('ImGui_InputText', [
                argument('label', const_char_ptr()),
                argument('buf', pointer(builtin('char'))),
                argument('buf_size', user('size_t')),
                argument('callback', user('ImGuiInputTextCallback'), default='NULL'),
            ], return_type=builtin('bool')),
            function('ImDrawList_AddLine', [
                argument('self', pointer(user('ImDrawList'))),
                argument('p1', user('ImVec2')),
                argument('thickness', builtin('float'), default='1.0f'),
            ]),
            function('ImVector_Construct', [argument('vector', pointer(builtin('void')))]),
        ],
    )
