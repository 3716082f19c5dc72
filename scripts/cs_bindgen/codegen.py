"""
Code generation utilities

Provides helpers for generating C# code.
"""

import re

# C keywords used as argument names that C# reserves
CSHARP_IDENTIFIERS = {
    'base': '@base',
    'checked': '@checked',
    'event': '@event',
    'fixed': '@fixed',
    'in': '@in',
    'lock': '@lock',
    'object': '@object',
    'operator': '@operator',
    'out': '@out',
    'params': '@params',
    'ref': '@ref',
    'string': '@string',
    'var': '@var',
}


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = '    '  # 4 spaces

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def lines(self, *texts: str):
        """Add multiple lines"""
        for text in texts:
            self.line(text)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def push_block(self):
        """Open a brace block on its own line"""
        self.line('{')
        self.indent()

    def pop_block(self):
        self.dedent()
        self.line('}')

    def block(self, header: str = ''):
        """Context manager for code blocks"""
        return _BlockContext(self, header)

    def output(self) -> str:
        """Get generated code as string"""
        return '\n'.join(self._lines) + '\n'


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str):
        self._gen = gen
        self._header = header

    def __enter__(self):
        if self._header:
            self._gen.line(self._header)
        self._gen.push_block()
        return self

    def __exit__(self, *args):
        self._gen.pop_block()


def escape_identifier(name: str) -> str:
    """Escape a C# reserved word used as identifier"""
    return CSHARP_IDENTIFIERS.get(name, name)


def cleanup_comment(text: str) -> str:
    """Strip the C++ line comment marker"""
    if text.startswith('// '):
        return text[3:]
    return text


def last_segment(name: str) -> str:
    """ImGuiStyle_ScaleAllSizes -> ScaleAllSizes"""
    return name.split('_')[-1]


def is_string_field_name(name: str) -> bool:
    """Field names that hold nul-terminated text"""
    return re.search(r'Filename', name) is not None or name.endswith('Name')
