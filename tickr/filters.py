"""Filter expressions over quote rows.

Expressions use Python comparison syntax over quote fields, e.g.
``change_pct > 1 and volume > 1000000``. The C-style spellings ``&&``,
``||`` and ``!`` are accepted as well. Expressions are parsed with ``ast``
and walked node by node; nothing is ever passed to ``eval``.
"""

import ast
import operator
import re
from typing import Any, Dict

FIELDS = ("ticker", "last", "change", "change_pct", "open", "low", "high", "prev_close", "volume")


class FilterError(ValueError):
    pass


_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}

_CMP_OPS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}

_UNARY_OPS = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
    ast.Not: operator.not_,
}


def _normalize(text: str) -> str:
    text = text.replace("&&", " and ").replace("||", " or ")
    # "!" not followed by "=" is logical not
    return re.sub(r"!(?!=)", " not ", text)


def _validate(node: ast.AST):
    if isinstance(node, ast.Expression):
        _validate(node.body)
    elif isinstance(node, ast.BoolOp):
        for v in node.values:
            _validate(v)
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BIN_OPS:
            raise FilterError(f"unsupported operator {type(node.op).__name__}")
        _validate(node.left)
        _validate(node.right)
    elif isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARY_OPS:
            raise FilterError(f"unsupported operator {type(node.op).__name__}")
        _validate(node.operand)
    elif isinstance(node, ast.Compare):
        for op in node.ops:
            if type(op) not in _CMP_OPS:
                raise FilterError(f"unsupported comparison {type(op).__name__}")
        _validate(node.left)
        for c in node.comparators:
            _validate(c)
    elif isinstance(node, ast.Name):
        if node.id not in FIELDS:
            raise FilterError(f"unknown field '{node.id}'")
    elif isinstance(node, ast.Constant):
        if not isinstance(node.value, (int, float, str)) or isinstance(node.value, bool):
            raise FilterError(f"unsupported literal {node.value!r}")
    else:
        raise FilterError(f"unsupported syntax {type(node).__name__}")


def _eval(node: ast.AST, row: Dict[str, Any]) -> Any:
    if isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            return all(_eval(v, row) for v in node.values)
        return any(_eval(v, row) for v in node.values)
    if isinstance(node, ast.BinOp):
        return _BIN_OPS[type(node.op)](_eval(node.left, row), _eval(node.right, row))
    if isinstance(node, ast.UnaryOp):
        return _UNARY_OPS[type(node.op)](_eval(node.operand, row))
    if isinstance(node, ast.Compare):
        left = _eval(node.left, row)
        for op, comp in zip(node.ops, node.comparators):
            right = _eval(comp, row)
            if not _CMP_OPS[type(op)](left, right):
                return False
            left = right
        return True
    if isinstance(node, ast.Name):
        value = row.get(node.id)
        if value is None:
            raise LookupError(node.id)
        if node.id == "ticker":
            return str(value).upper()
        return value
    return node.value


class FilterExpression:
    def __init__(self, text: str, tree: ast.Expression):
        self.text = text
        self._tree = tree

    def matches(self, row: Dict[str, Any]) -> bool:
        """True if the row passes the filter; rows that can't be evaluated don't."""
        try:
            return bool(_eval(self._tree.body, row))
        except (LookupError, TypeError, ArithmeticError):
            return False

    def __repr__(self):
        return f"FilterExpression({self.text!r})"


def compile_filter(text: str) -> FilterExpression:
    """Parse and validate a filter expression. Raises FilterError if invalid."""
    source = _normalize(text).strip()
    if not source:
        raise FilterError("empty filter expression")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise FilterError(f"invalid filter expression: {e.msg}") from None
    _validate(tree)
    return FilterExpression(text.strip(), tree)
