from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .ast import Call, Expression, render
from .evaluator import OPERATOR_FUNCTIONS, EvalConfig, Evaluator
from .parser_expr import parse_expression
from .rewrite import rewrite_expr, wrap_direction


class RangeExpression:
    """A parsed and rewritten range expression, ready to evaluate.

    Parsing and rewriting happen once; every call evaluates the rewritten
    tree against the names it is given.
    """

    def __init__(self, source: str, config: Optional[EvalConfig] = None):
        self.src = source
        self.config = (config or EvalConfig()).normalized()
        self.tree: Expression = parse_expression(source)
        rewritten = rewrite_expr(self.tree)
        if self.config.direction != "none":
            rewritten = wrap_direction(rewritten, self.config.direction)
        self.rewritten: Expression = rewritten

    def __call__(self, env: Optional[Mapping[str, Any]] = None, **names: Any) -> Any:
        scope = dict(env or {})
        scope.update(names)
        return Evaluator(scope, self.config).evaluate(self.rewritten)

    def operator_calls(self) -> List[str]:
        calls: List[str] = []
        _collect_calls(self.rewritten.body, calls)
        return calls

    def explain(self, *, json: bool = False) -> Any:
        text = render(self.rewritten)
        if not json:
            return text
        payload: Dict[str, Any] = {
            "source": self.src,
            "direction": self.config.direction,
            "rewritten": text,
            "operators": self.operator_calls(),
        }
        return payload

    def __repr__(self) -> str:
        return f"RangeExpression({self.src!r}, direction={self.config.direction!r})"


def _collect_calls(expr: Any, calls: List[str]) -> None:
    if isinstance(expr, Call):
        if expr.name in OPERATOR_FUNCTIONS:
            calls.append(expr.name)
        if expr.name == "identity":
            return
        for arg in expr.args:
            _collect_calls(arg, calls)
        return
    for child in getattr(expr, "__dict__", {}).values():
        if isinstance(child, list):
            for item in child:
                _collect_calls(item, calls)
        elif hasattr(child, "__dataclass_fields__"):
            _collect_calls(child, calls)


def evaluate(
    source: str,
    env: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[EvalConfig] = None,
    **names: Any,
) -> Any:
    return RangeExpression(source, config=config)(env, **names)


def range_expr(source: str, env: Optional[Mapping[str, Any]] = None, **names: Any) -> Any:
    """Evaluate ``source`` with index arithmetic and a forward-running result.

    For example ``range_expr("(I ± 2) ∩ R", I=multi_index(7, 8), R=bounds)``
    yields the part of the 5x5 neighbourhood of ``I`` that lies inside ``bounds``.
    """
    return evaluate(source, env, config=EvalConfig(direction="forward"), **names)


def reverse_range_expr(source: str, env: Optional[Mapping[str, Any]] = None, **names: Any) -> Any:
    """Like :func:`range_expr` but the result runs backward (non-positive steps)."""
    return evaluate(source, env, config=EvalConfig(direction="backward"), **names)

