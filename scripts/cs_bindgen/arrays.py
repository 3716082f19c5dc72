"""
Array bounds resolution

Turns a fixed array bounds expression (enum COUNT constants, defines,
integer arithmetic) into a concrete size.
"""

import ast
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ResolutionContext


class ArraySizeError(ValueError):
    """Bounds expression cannot be evaluated"""


def eval_int_expr(expr: str) -> int:
    """Evaluate integer + - * / over literals, C division semantics"""
    try:
        tree = ast.parse(expr.strip(), mode='eval')
    except SyntaxError as e:
        raise ArraySizeError(f'malformed expression "{expr}"') from e
    return _eval_node(tree.body, expr)


def _eval_node(node: ast.AST, expr: str) -> int:
    if isinstance(node, ast.Constant) and isinstance(node.value, int) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        value = _eval_node(node.operand, expr)
        return -value if isinstance(node.op, ast.USub) else value
    if isinstance(node, ast.BinOp):
        left = _eval_node(node.left, expr)
        right = _eval_node(node.right, expr)
        if isinstance(node.op, ast.Add):
            return left + right
        if isinstance(node.op, ast.Sub):
            return left - right
        if isinstance(node.op, ast.Mult):
            return left * right
        if isinstance(node.op, (ast.Div, ast.FloorDiv)):
            if right == 0:
                raise ArraySizeError(f'division by zero in "{expr}"')
            quotient = abs(left) // abs(right)
            return quotient if (left >= 0) == (right >= 0) else -quotient
    raise ArraySizeError(f'unsupported term in "{expr}"')


def _as_decimal(value: str) -> str:
    text = value.strip()
    if text.lower().startswith('0x'):
        try:
            return str(int(text, 16))
        except ValueError:
            return text
    return text


class ArraySizeResolver:
    """Resolves bounds expressions, memoized in context.array_sizes"""

    def __init__(self, context: 'ResolutionContext'):
        self.context = context

    def resolve(self, bounds: str, owner: str = '') -> int:
        sizes = self.context.array_sizes
        if bounds in sizes:
            return sizes[bounds]
        expr = self.substitute(bounds)
        try:
            size = eval_int_expr(expr)
        except ArraySizeError as e:
            where = f' for {owner}' if owner else ''
            self.context.warn(f'cannot compute array size{where} with bounds {bounds}: {e}')
            size = 0
        sizes[bounds] = size
        return size

    def substitute(self, bounds: str) -> str:
        """Replace known define and COUNT names with their values"""
        symbols: dict[str, str] = {}
        for name, (_, value) in self.context.known_defines.items():
            if value:
                symbols[name] = _as_decimal(value)
        for name, value in self.context.array_sizes.items():
            if re.fullmatch(r'\w+', name):
                symbols.setdefault(name, str(value))
        names = sorted(symbols, key=len, reverse=True)
        expr = bounds
        # defines may expand to other defines
        for _ in range(8):
            previous = expr
            for name in names:
                expr = re.sub(rf'\b{re.escape(name)}\b', lambda m, v=symbols[name]: v, expr)
            if expr == previous:
                break
        return expr
