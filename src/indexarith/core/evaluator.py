from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from .ast import (
    BinOp,
    Call,
    Escape,
    Expression,
    Name,
    Num,
    RangeLit,
    TupleLit,
    UnaryOp,
)
from .direction import backward, forward
from .exceptions import EvaluationError, UndefinedOperation
from .forms import LinearRange, multi_index, region
from .normalize import normalize
from .operators import cap, minus, plus, shrink, stretch

logger = logging.getLogger(__name__)


def identity(x: Any) -> Any:
    return x


OPERATOR_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "plus": plus,
    "minus": minus,
    "cap": cap,
    "stretch": stretch,
    "shrink": shrink,
    "forward": forward,
    "backward": backward,
}

BUILTINS: Dict[str, Callable[..., Any]] = {
    **OPERATOR_FUNCTIONS,
    "normalize": normalize,
    "identity": identity,
    "range": range,
    "index": multi_index,
    "CartesianIndex": multi_index,
    "region": region,
    "CartesianIndices": region,
    "len": len,
    "min": min,
    "max": max,
    "abs": abs,
}

# Semantics of operators that were shielded from rewriting by ``$(...)``.
PLAIN_BINARY: Dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
    "∩": operator.and_,
}
PLAIN_UNARY: Dict[str, Callable[[Any], Any]] = {
    "+": operator.pos,
    "-": operator.neg,
}


@dataclass
class EvalConfig:
    """
    Switches for evaluating range expressions.

    * ``direction`` selects the terminal call wrapped around the rewritten
      expression: ``"forward"``, ``"backward"`` or ``"none"``.
    * ``functions`` adds (or overrides) callables available to calls inside
      expressions.
    * ``trace`` logs every operator call and its result at DEBUG level.
    """

    direction: str = "forward"  # "forward" | "backward" | "none"
    functions: Optional[Dict[str, Callable[..., Any]]] = None
    trace: bool = False

    def normalized(self) -> "EvalConfig":
        direction = (self.direction or "none").lower()
        if direction not in {"forward", "backward", "none"}:
            raise ValueError(f"Unsupported direction: {self.direction}")
        functions = dict(self.functions or {})
        for name, fn in functions.items():
            if not callable(fn):
                raise ValueError(f"EvalConfig.functions[{name!r}] is not callable")
        return replace(self, direction=direction, functions=functions, trace=bool(self.trace))


class Evaluator:
    def __init__(
        self,
        env: Optional[Mapping[str, Any]] = None,
        config: Optional[EvalConfig] = None,
    ):
        self.config = (config or EvalConfig()).normalized()
        self.env: Dict[str, Any] = dict(env or {})
        self.functions: Dict[str, Callable[..., Any]] = {**BUILTINS, **self.config.functions}

    def evaluate(self, expr: Any) -> Any:
        if isinstance(expr, Expression):
            return self.evaluate(expr.body)
        if isinstance(expr, Num):
            return expr.value
        if isinstance(expr, Name):
            return self._lookup_name(expr)
        if isinstance(expr, Call):
            return self._call(expr)
        if isinstance(expr, RangeLit):
            first = self.evaluate(expr.first)
            last = self.evaluate(expr.last)
            step = self.evaluate(expr.step) if expr.step is not None else 1
            return LinearRange(first, step, last)
        if isinstance(expr, TupleLit):
            return tuple(self.evaluate(item) for item in expr.items)
        if isinstance(expr, BinOp):
            return self._plain_binary(expr)
        if isinstance(expr, UnaryOp):
            return self._plain_unary(expr)
        if isinstance(expr, Escape):
            return self.evaluate(expr.value)
        raise EvaluationError(f"cannot evaluate node of type `{type(expr).__name__}`")

    # Helpers -----------------------------------------------------------------
    def _lookup_name(self, node: Name) -> Any:
        if node.id in self.env:
            return self.env[node.id]
        if node.id in self.functions:
            return self.functions[node.id]
        raise EvaluationError(
            f"unknown name `{node.id}` in range expression; pass it in the environment"
        )

    def _call(self, node: Call) -> Any:
        if node.name in self.functions:
            target = self.functions[node.name]
        elif node.name in self.env:
            target = self.env[node.name]
        else:
            raise EvaluationError(f"unknown function `{node.name}` in range expression")
        if not callable(target):
            raise EvaluationError(f"`{node.name}` is not callable")
        args = [self.evaluate(arg) for arg in node.args]
        result = target(*args)
        if self.config.trace and node.name in OPERATOR_FUNCTIONS:
            logger.debug(
                "%s(%s) -> %r", node.name, ", ".join(repr(arg) for arg in args), result
            )
        return result

    def _plain_binary(self, node: BinOp) -> Any:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        fn = PLAIN_BINARY.get(node.op)
        if fn is None:
            raise UndefinedOperation(
                node.op,
                [type(left).__name__, type(right).__name__],
                "this operator only has a meaning outside `$(...)`",
            )
        return fn(left, right)

    def _plain_unary(self, node: UnaryOp) -> Any:
        value = self.evaluate(node.value)
        fn = PLAIN_UNARY.get(node.op)
        if fn is None:
            raise UndefinedOperation(node.op, [type(value).__name__])
        return fn(value)
