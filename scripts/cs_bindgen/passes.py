"""
Definition rewrite passes

Run over the structured definition tree after traversal and before
rendering: comment cleanup, enum element naming and erasure of structs
that ended up without fields.
"""

import re
from typing import TYPE_CHECKING

from .codegen import cleanup_comment
from .definitions import CSharpContainer, CSharpDefinition, CSharpEnum, CSharpMethod

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .definitions import CSharpStruct, CSharpView


def walk(definitions: list[CSharpDefinition]):
    """Yield every definition, children included"""
    for definition in definitions:
        yield definition
        if isinstance(definition, CSharpContainer):
            yield from walk(definition.definitions)
        elif isinstance(definition, CSharpEnum):
            yield from definition.elements
        elif isinstance(definition, CSharpMethod):
            yield from definition.parameters


class CommentPass:
    """Strip line comment markers from documentation"""

    def run(self, definitions: list[CSharpDefinition]):
        for definition in walk(definitions):
            if definition.trailing_comment is not None:
                definition.trailing_comment = cleanup_comment(definition.trailing_comment)
            definition.preceding_comments = [cleanup_comment(c) for c in definition.preceding_comments]


class NamingPass:
    """Strip the enum prefix from element names and value expressions"""

    def run(self, definitions: list[CSharpDefinition]):
        for definition in walk(definitions):
            if isinstance(definition, CSharpEnum):
                self.rename_elements(definition)

    @staticmethod
    def rename_elements(enum: CSharpEnum):
        prefix = re.escape(enum.native_name.rstrip('_'))
        # ImGuiKey_0 -> _0
        digit = re.compile(rf'\b{prefix}_(?=\d)')
        plain = re.compile(rf'\b{prefix}_')
        for element in enum.elements:
            element.name = plain.sub('', digit.sub('_', element.name))
            element.value = plain.sub('', digit.sub('_', element.value))


class TypesPass:
    """Erase layout structs left without fields"""

    def __init__(self, context: 'ResolutionContext'):
        self.context = context

    def run(self, structs: list[tuple['CSharpStruct', 'CSharpView']]) -> list[tuple['CSharpStruct', 'CSharpView']]:
        kept = []
        for layout, view in structs:
            if layout.definitions:
                kept.append((layout, view))
                continue
            self.context.erase(layout.native_name)
            self.context.skip('struct', layout.native_name, 'no fields')
        return kept
