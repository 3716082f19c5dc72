"""
Callback binding generation module

Synthesizes [UnmanagedFunctionPointer] delegates from function pointer
type descriptions.
"""

from typing import Optional, TYPE_CHECKING

from .codegen import escape_identifier
from .definitions import CSharpDelegate, CSharpParameter

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .ir import Comments, TypeDescription
    from .types import TypeResolver

DELEGATE_ATTRIBUTE = '[UnmanagedFunctionPointer(CallingConvention.Cdecl)]'


class DelegateSynthesizer:
    """Builds callback type declarations"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver'):
        self.context = context
        self.resolver = resolver

    def synthesize(self, func_desc: 'TypeDescription', name: str,
                   comments: Optional['Comments'] = None) -> CSharpDelegate:
        """Delegate for a Function kind description"""
        parameters = []
        for i, param in enumerate(func_desc.parameters):
            param_name = param.name or f'arg{i}'
            param_desc = param.inner_type if param.kind == 'Type' and param.inner_type else param
            parameters.append(CSharpParameter(escape_identifier(param_name),
                                              type=self.resolver.resolve(param_desc)))
        return_type = self.resolver.resolve(func_desc.return_type) if func_desc.return_type else 'void'
        delegate = CSharpDelegate(name, modifiers=['public', 'unsafe', 'delegate'],
                                  attributes=[DELEGATE_ATTRIBUTE],
                                  return_type=return_type, parameters=parameters)
        return delegate.set_comments(comments)

    def register(self, func_desc: 'TypeDescription', name: str,
                 comments: Optional['Comments'] = None) -> bool:
        """Synthesize and register; repeated names are ignored"""
        if name in self.context.delegates:
            return False
        return self.context.add_delegate(self.synthesize(func_desc, name, comments))
