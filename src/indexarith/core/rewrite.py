from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from .ast import (
    BinOp,
    Call,
    Escape,
    Expression,
    RangeLit,
    TupleLit,
    UnaryOp,
)

logger = logging.getLogger(__name__)

BINARY_OPERATORS = {
    "+": "plus",
    "-": "minus",
    "∩": "cap",
    "±": "stretch",
    "∓": "shrink",
}
UNARY_OPERATORS = {
    "+": "plus",
    "-": "minus",
}
CALL_ALIASES = {
    "intersect": "cap",
}
DIRECTIONS = ("forward", "backward")


class OperatorRewriter:
    """Replace generic operators with the specialized index operations.

    Escaped sub-expressions become ``identity(...)`` calls and their subtrees
    are left exactly as written.
    """

    def __init__(self):
        self.rewrites = 0

    # Public API ---------------------------------------------------------------
    def rewrite(self, expr: Any) -> Any:
        if isinstance(expr, Expression):
            return replace(expr, body=self._rewrite(expr.body))
        return self._rewrite(expr)

    # Node rewrites ------------------------------------------------------------
    def _rewrite(self, expr: Any) -> Any:
        if isinstance(expr, Escape):
            return Call(
                name="identity",
                args=[expr.value],
                line=expr.line,
                column=expr.column,
                source=expr.source,
            )
        if isinstance(expr, BinOp):
            name = BINARY_OPERATORS.get(expr.op)
            left = self._rewrite(expr.left)
            right = self._rewrite(expr.right)
            if name is None:
                return replace(expr, left=left, right=right)
            return self._call(expr, name, [left, right])
        if isinstance(expr, UnaryOp):
            name = UNARY_OPERATORS.get(expr.op)
            value = self._rewrite(expr.value)
            if name is None:
                return replace(expr, value=value)
            return self._call(expr, name, [value])
        if isinstance(expr, Call):
            name = CALL_ALIASES.get(expr.name, expr.name)
            if name != expr.name:
                self.rewrites += 1
            return replace(expr, name=name, args=[self._rewrite(a) for a in expr.args])
        if isinstance(expr, RangeLit):
            return replace(
                expr,
                first=self._rewrite(expr.first),
                last=self._rewrite(expr.last),
                step=self._rewrite(expr.step) if expr.step is not None else None,
            )
        if isinstance(expr, TupleLit):
            return replace(expr, items=[self._rewrite(item) for item in expr.items])
        return expr

    def _call(self, node: Any, name: str, args: list) -> Call:
        self.rewrites += 1
        return Call(name=name, args=args, line=node.line, column=node.column, source=node.source)


def rewrite_expr(expr: Any) -> Any:
    rewriter = OperatorRewriter()
    result = rewriter.rewrite(expr)
    logger.debug("rewrote %d operator(s)", rewriter.rewrites)
    return result


def wrap_direction(expr: Any, direction: str) -> Any:
    """Wrap the root of ``expr`` in a ``forward`` or ``backward`` call."""
    if direction not in DIRECTIONS:
        raise ValueError(f"Unsupported direction: {direction}")
    if isinstance(expr, Expression):
        return replace(expr, body=wrap_direction(expr.body, direction))
    return Call(name=direction, args=[expr], line=expr.line, column=expr.column, source=expr.source)
