"""
Conditional guard evaluation

Decides whether an item guarded by ifdef / ifndef / if defined(...) is
included under the current set of known defines.
"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ResolutionContext
    from .ir import ConditionalItem

_DEFINED = re.compile(r'defined\s*\(\s*(\w+)\s*\)')


class DefineEvaluator:
    """Evaluates conditional lists against context.known_defines"""

    def __init__(self, context: 'ResolutionContext'):
        self.context = context

    def is_defined(self, name: str) -> bool:
        return name in self.context.known_defines

    def evaluates(self, conditionals: list['ConditionalItem']) -> bool:
        """True when the guarded item should be emitted"""
        if not conditionals:
            return True
        if len(conditionals) == 1:
            cond = conditionals[0]
            if cond.condition == 'if':
                match = _DEFINED.fullmatch(cond.expression.strip())
                return match is not None and self.is_defined(match.group(1))
            return self._polarity(cond)
        # multi-part guards: the first entry repeats an outer guard
        return self._polarity(conditionals[1])

    def _polarity(self, cond: 'ConditionalItem') -> bool:
        if cond.condition == 'ifdef':
            return self.is_defined(cond.expression)
        if cond.condition == 'ifndef':
            return not self.is_defined(cond.expression)
        return False
