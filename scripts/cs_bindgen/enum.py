"""
Enum binding generation module

Generates C# enums and the Constants class from defines.
"""

import re
from typing import Optional, TYPE_CHECKING

from .definitions import CSharpClass, CSharpConstant, CSharpEnum, CSharpEnumElement

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .defines import DefineEvaluator
    from .ir import DefineItem, EnumItem
    from .types import TypeResolver

_INTEGER = re.compile(r'-?\d+')
_HEX = re.compile(r'0[xX][0-9a-fA-F]+')


def cleanup_enum_name(name: str) -> str:
    """ImGuiWindowFlags_ -> ImGuiWindowFlags"""
    return name[:-1] if name.endswith('_') else name


class EnumGenerator:
    """Generates enum and constant definitions"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver',
                 evaluator: 'DefineEvaluator'):
        self.context = context
        self.resolver = resolver
        self.evaluator = evaluator

    def generate(self, enum: 'EnumItem') -> Optional[CSharpEnum]:
        """Build one enum, merging Private_ extensions into their base"""
        if not self.evaluator.evaluates(enum.conditionals):
            self.context.skip('enum', enum.name, 'conditionals')
            return None

        native_name = enum.name
        if native_name.endswith('Private_'):
            native_name = native_name.replace('Private', '')
        name = cleanup_enum_name(native_name)

        base_elements = self.context.enums.get(name) if native_name != enum.name else None
        csharp_enum = CSharpEnum(name, modifiers=['public'], native_name=native_name,
                                 is_flags=enum.is_flags_enum)
        csharp_enum.set_comments(enum.comments)
        if enum.is_flags_enum:
            csharp_enum.attributes.append('[Flags]')

        ref = self.resolver.named(name)
        self.context.register_type(name, ref)
        self.context.register_type(native_name, ref)
        self.context.register_type(enum.name, ref)

        if base_elements is not None:
            for element_name, value in base_elements:
                csharp_enum.elements.append(CSharpEnumElement(element_name, value=value))
        else:
            # a base enum seen again in a later configuration starts over
            self.context.enums[name] = []

        registry = self.context.enums[name]
        for element in enum.elements:
            if not self.evaluator.evaluates(element.conditionals):
                self.context.skip('enum element', element.name, 'conditionals')
                continue
            if 'COUNT' in element.name:
                self.context.array_sizes[element.name] = int(element.value)
            value = element.value_expression if element.value_expression is not None else str(element.value)
            csharp_element = CSharpEnumElement(element.name, value=value)
            csharp_element.set_comments(element.comments)
            csharp_enum.elements.append(csharp_element)
            registry.append((element.name, value))
        return csharp_enum

    def generate_constants(self, defines: list['DefineItem']) -> CSharpClass:
        """Constants class: seeded toggles, then defines grouped by guard depth"""
        constants = CSharpClass('Constants', modifiers=['public', 'static'])
        emitted: set[str] = set()

        for name in self.context.options.known_defines:
            _, value = self.context.known_defines.get(name, (None, ''))
            escaped = value.replace('"', '\\"')
            constants.add(CSharpConstant(name, modifiers=['public', 'const'],
                                         type='string', value=f'"{escaped}"'))
            emitted.add(name)

        groups: dict[int, list['DefineItem']] = {}
        for define in defines:
            groups.setdefault(len(define.conditionals), []).append(define)

        for depth, group in groups.items():
            # redefinitions under several guards must not see each other
            discovered: dict[str, tuple[str, str]] = {}
            for define in group:
                if not self.evaluator.evaluates(define.conditionals):
                    self.context.skip('define', define.name, 'conditionals')
                    continue
                type_name, value = self.constant_type(define)
                known = discovered if depth >= 2 else self.context.known_defines
                known[define.name] = (type_name, define.content or '')
                if define.name in emitted:
                    continue
                emitted.add(define.name)
                constant = CSharpConstant(define.name, modifiers=['public', 'const'],
                                          type=type_name, value=value)
                constants.add(constant.set_comments(define.comments))
            self.context.known_defines.update(discovered)
        return constants

    def constant_type(self, define: 'DefineItem') -> tuple[str, str]:
        """Infer (C# type, literal) for a define"""
        content = (define.content or '').strip()
        if not content:
            return 'bool', 'true'
        if content in self.context.known_defines:
            return self.context.known_defines[content][0] or 'string', content
        if _HEX.fullmatch(content) or _INTEGER.fullmatch(content):
            return 'long', content
        if len(content) >= 2 and content.startswith('"') and content.endswith('"'):
            return 'string', content
        return 'bool', 'true'
