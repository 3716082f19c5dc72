"""
Function binding generation module

Generates the raw [DllImport] extern declarations of the native class.
"""

from typing import Optional, TYPE_CHECKING

from .codegen import escape_identifier
from .definitions import CSharpMethod, CSharpParameter

if TYPE_CHECKING:
    from .callback import DelegateSynthesizer
    from .context import ResolutionContext
    from .defines import DefineEvaluator
    from .ir import FunctionArgument, FunctionItem
    from .types import TypeResolver


class FuncGenerator:
    """Generates extern declarations"""

    def __init__(self, context: 'ResolutionContext', resolver: 'TypeResolver',
                 evaluator: 'DefineEvaluator', delegates: 'DelegateSynthesizer'):
        self.context = context
        self.resolver = resolver
        self.evaluator = evaluator
        self.delegates = delegates

    def should_skip(self, func: 'FunctionItem') -> Optional[str]:
        """Reason the function gets no binding, or None"""
        if not self.evaluator.evaluates(func.conditionals):
            return 'conditionals'
        for substring in self.context.options.skip_function_substrings:
            if substring in func.name:
                return 'skip list'
        if func.is_variadic:
            return 'varargs'
        return None

    def generate(self, func: 'FunctionItem') -> Optional[CSharpMethod]:
        """Build the extern for func, None when skipped"""
        reason = self.should_skip(func)
        if reason is not None:
            self.context.skip('function', func.name, reason)
            return None

        parameters = []
        for arg in func.arguments:
            if arg.type is None:
                continue
            parameters.append(self._parameter(func, arg))

        attribute = (f'[DllImport("{self.context.options.library}", '
                     f'CallingConvention = CallingConvention.Cdecl, EntryPoint = "{func.name}")]')
        method = CSharpMethod(func.name, modifiers=['public', 'static', 'extern'],
                              attributes=[attribute],
                              return_type=self.resolver.resolve(func.return_type.description),
                              parameters=parameters)
        return method.set_comments(func.comments)

    def _parameter(self, func: 'FunctionItem', arg: 'FunctionArgument') -> CSharpParameter:
        name = escape_identifier(arg.name)
        desc = arg.type.description
        if desc.kind == 'Type' and desc.is_function_pointer:
            delegate_name = f'{func.name}{arg.name}Delegate'
            self.delegates.register(desc.inner_type.inner_type, delegate_name)
            return CSharpParameter(name, type=self.resolver.resolve(desc, delegate_name))
        if desc.kind == 'Pointer' and self.resolver.is_vector(desc.inner_type):
            return CSharpParameter(name, type=f'{self.context.options.vector_prefix}*')
        # arrays decay to T*
        return CSharpParameter(name, type=self.resolver.resolve(desc))
