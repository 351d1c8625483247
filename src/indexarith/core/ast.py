from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

# NOTE: Lightweight AST for range expressions.  The parser produces it, the
# rewriter replaces operator nodes with ``Call`` nodes naming the specialized
# index operations, and the evaluator walks the result.


@dataclass
class Node:
    line: Optional[int] = None
    column: Optional[int] = None
    source: Optional[str] = None


Expr = Any  # Num | Name | RangeLit | TupleLit | Call | BinOp | UnaryOp | Escape


@dataclass
class Num(Node):
    value: int = 0


@dataclass
class Name(Node):
    id: str = ""


@dataclass
class RangeLit(Node):
    first: Expr = None  # type: ignore
    last: Expr = None  # type: ignore
    step: Optional[Expr] = None


@dataclass
class TupleLit(Node):
    items: List[Expr] = field(default_factory=list)


@dataclass
class BinOp(Node):
    left: Expr = None  # type: ignore
    op: str = ""
    right: Expr = None  # type: ignore


@dataclass
class UnaryOp(Node):
    op: str = ""
    value: Expr = None  # type: ignore


@dataclass
class Call(Node):
    name: str = ""
    args: List[Expr] = field(default_factory=list)


@dataclass
class Escape(Node):
    value: Expr = None  # type: ignore


@dataclass
class Expression(Node):
    body: Expr = None  # type: ignore


def render(expr: Expr) -> str:
    """Render an expression tree back to source-like text."""
    if isinstance(expr, Expression):
        return render(expr.body)
    if isinstance(expr, Num):
        return str(expr.value)
    if isinstance(expr, Name):
        return expr.id
    if isinstance(expr, RangeLit):
        if expr.step is None:
            return f"{render(expr.first)}:{render(expr.last)}"
        return f"{render(expr.first)}:{render(expr.step)}:{render(expr.last)}"
    if isinstance(expr, TupleLit):
        if len(expr.items) == 1:
            return f"({render(expr.items[0])},)"
        return "(" + ", ".join(render(item) for item in expr.items) + ")"
    if isinstance(expr, BinOp):
        return f"({render(expr.left)} {expr.op} {render(expr.right)})"
    if isinstance(expr, UnaryOp):
        return f"{expr.op}{render(expr.value)}"
    if isinstance(expr, Call):
        return f"{expr.name}(" + ", ".join(render(arg) for arg in expr.args) + ")"
    if isinstance(expr, Escape):
        return f"$({render(expr.value)})"
    return repr(expr)
