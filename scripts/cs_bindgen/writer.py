"""
C# file rendering module

Renders a placed CSharpFile to text. Every definition kind has exactly one
writer; element and parameter kinds are rendered inline by their owners.
"""

import os
from html import escape
from typing import TYPE_CHECKING

from .codegen import CodeGen
from .definitions import (
    CSharpAccessor, CSharpConstant, CSharpContainer, CSharpDefinition,
    CSharpDelegate, CSharpEnum, CSharpField, CSharpFile, CSharpFixedField,
    CSharpMethod, CSharpOverload, CSharpView, DefinitionKind,
)
from .overload import write_overload
from .struct import AccessorRenderer

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .types import TypeResolver

GENERATED_HEADER = '// machine generated, do not edit'

INLINE_KINDS = {DefinitionKind.ENUM_ELEMENT, DefinitionKind.PARAMETER}

# kinds rendered back to back without a separating blank line
COMPACT_KINDS = {
    DefinitionKind.FIELD, DefinitionKind.FIXED_FIELD,
    DefinitionKind.CONSTANT, DefinitionKind.ACCESSOR,
}


def signature(definition) -> str:
    """Return type, name and parameter list of a method or delegate"""
    params = ', '.join(f'{p.type} {p.name}' for p in definition.parameters)
    return f'{" ".join(definition.modifiers)} {definition.return_type} {definition.name}({params})'


class CodeWriter:
    """Renders definition trees into C# source"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver'):
        self.context = context
        self.accessors = AccessorRenderer(context, resolver)
        self._writers = {
            DefinitionKind.CLASS: lambda d, gen: self._write_container(d, 'class', gen),
            DefinitionKind.STRUCT: lambda d, gen: self._write_container(d, 'struct', gen),
            DefinitionKind.VIEW: self._write_view,
            DefinitionKind.ENUM: self._write_enum,
            DefinitionKind.FIELD: self._write_field,
            DefinitionKind.FIXED_FIELD: self._write_fixed_field,
            DefinitionKind.CONSTANT: self._write_constant,
            DefinitionKind.METHOD: self._write_method,
            DefinitionKind.DELEGATE: self._write_delegate,
            DefinitionKind.OVERLOAD: self._write_overload,
            DefinitionKind.ACCESSOR: self._write_accessor,
        }
        missing = set(DefinitionKind) - INLINE_KINDS - set(self._writers)
        if missing:
            raise TypeError(f'no writer for {sorted(k.value for k in missing)}')

    def render_file(self, file: CSharpFile) -> str:
        """Full text of one output file"""
        gen = CodeGen()
        gen.line(GENERATED_HEADER)
        for line in file.header:
            gen.line(line)
        for using in file.usings:
            gen.line(f'using {using};')
        gen.line()
        with gen.block(f'namespace {file.namespace}'):
            self._write_definitions(file.definitions, gen)
        return gen.output()

    def write_file(self, file: CSharpFile, output_dir: str) -> str:
        """Render file under output_dir, returns the written path"""
        directory = os.path.join(output_dir, file.subdir) if file.subdir else output_dir
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, file.file_name)
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(self.render_file(file))
        return path

    def write_definition(self, definition: CSharpDefinition, gen: CodeGen):
        if definition.kind in INLINE_KINDS:
            raise TypeError(f'{definition.kind.value} {definition.name} is rendered by its owner')
        self._writers[definition.kind](definition, gen)

    def _write_definitions(self, definitions: list[CSharpDefinition], gen: CodeGen):
        previous = None
        for definition in definitions:
            if previous is not None and not (previous.kind in COMPACT_KINDS and definition.kind in COMPACT_KINDS):
                gen.line()
            self.write_definition(definition, gen)
            previous = definition

    def _write_summaries(self, definition: CSharpDefinition, gen: CodeGen):
        if definition.preceding_comments:
            gen.line('/// <summary>')
            for comment in definition.preceding_comments:
                gen.line(f'/// <para>{escape(comment, quote=False)}</para>')
            gen.line('/// </summary>')
        if definition.trailing_comment is not None:
            gen.line('/// <summary>')
            gen.line(f'/// {escape(definition.trailing_comment, quote=False)}')
            gen.line('/// </summary>')

    def _write_preamble(self, definition: CSharpDefinition, gen: CodeGen):
        self._write_summaries(definition, gen)
        gen.lines(*definition.attributes)

    def _write_container(self, container: CSharpContainer, keyword: str, gen: CodeGen):
        self._write_preamble(container, gen)
        with gen.block(f'{" ".join(container.modifiers)} {keyword} {container.name}'):
            self._write_definitions(container.definitions, gen)

    def _write_view(self, view: CSharpView, gen: CodeGen):
        self._write_preamble(view, gen)
        target, name = view.target, view.name
        handle = self.context.options.handle_type
        with gen.block(f'{" ".join(view.modifiers)} struct {name}'):
            gen.line(f'public {target}* NativePtr {{ get; }}')
            gen.line(f'public {name}({target}* nativePtr) => NativePtr = nativePtr;')
            gen.line(f'public {name}({handle} nativePtr) => NativePtr = ({target}*)nativePtr;')
            gen.line(f'public static implicit operator {name}({target}* nativePtr) => new {name}(nativePtr);')
            gen.line(f'public static implicit operator {target}* ({name} wrappedPtr) => wrappedPtr.NativePtr;')
            gen.line(f'public static implicit operator {name}({handle} nativePtr) => new {name}(nativePtr);')
            if view.definitions:
                gen.line()
                self._write_definitions(view.definitions, gen)

    def _write_enum(self, enum: CSharpEnum, gen: CodeGen):
        self._write_preamble(enum, gen)
        with gen.block(f'{" ".join(enum.modifiers)} enum {enum.name}'):
            for element in enum.elements:
                self._write_summaries(element, gen)
                gen.line(f'{element.name} = {element.value},')

    def _write_field(self, field: CSharpField, gen: CodeGen):
        self._write_preamble(field, gen)
        gen.line(f'{" ".join(field.modifiers)} {field.type} {field.name};')

    def _write_fixed_field(self, field: CSharpFixedField, gen: CodeGen):
        self._write_preamble(field, gen)
        gen.line(f'{" ".join(field.modifiers)} {field.type} {field.name}[{field.size}];')

    def _write_constant(self, constant: CSharpConstant, gen: CodeGen):
        self._write_preamble(constant, gen)
        gen.line(f'{" ".join(constant.modifiers)} {constant.type} {constant.name} = {constant.value};')

    def _write_method(self, method: CSharpMethod, gen: CodeGen):
        self._write_preamble(method, gen)
        gen.line(f'{signature(method)};')

    def _write_delegate(self, delegate: CSharpDelegate, gen: CodeGen):
        self._write_preamble(delegate, gen)
        gen.line(f'{signature(delegate)};')

    def _write_overload(self, overload: CSharpOverload, gen: CodeGen):
        self._write_preamble(overload, gen)
        write_overload(overload, gen)

    def _write_accessor(self, accessor: CSharpAccessor, gen: CodeGen):
        self._write_summaries(accessor, gen)
        gen.line(self.accessors.line(accessor))
