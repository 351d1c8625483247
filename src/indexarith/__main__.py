from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from .core.evaluator import EvalConfig
from .core.exceptions import IndexArithError
from .core.forms import LinearRange, MultiIndex, Region
from .core.program import RangeExpression, evaluate


def _json_ready(value: Any) -> Any:
    if isinstance(value, LinearRange):
        return {"first": value.first, "step": value.step, "last": value.last}
    if isinstance(value, MultiIndex):
        return list(value.indices)
    if isinstance(value, Region):
        return {"ranges": [_json_ready(r) for r in value.ranges]}
    if isinstance(value, (tuple, list)):
        return [_json_ready(item) for item in value]
    if isinstance(value, int):
        return value
    return repr(value)


def _parse_binding(text: str) -> Tuple[str, str]:
    name, sep, source = text.partition("=")
    name = name.strip()
    if not sep or not name.isidentifier():
        raise SystemExit(f"Invalid --let binding {text!r}; expected NAME=EXPR")
    return name, source


def _eval(
    source: str,
    bindings: List[str],
    *,
    reverse: bool,
    explain: bool,
    as_json: bool,
    trace: bool,
) -> None:
    env: Dict[str, Any] = {}
    for binding in bindings:
        name, value_src = _parse_binding(binding)
        env[name] = evaluate(value_src, env, config=EvalConfig(direction="none", trace=trace))
    config = EvalConfig(direction="backward" if reverse else "forward", trace=trace)
    expr = RangeExpression(source, config=config)
    if explain:
        if as_json:
            print(json.dumps(expr.explain(json=True), indent=2, ensure_ascii=False))
        else:
            print(expr.explain())
        return
    result = expr(env)
    if as_json:
        print(json.dumps(_json_ready(result)))
    else:
        print(repr(result))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="indexarith command line utilities")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log rewriting and every operator call at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="cmd")

    eval_parser = subparsers.add_parser("eval", help="Evaluate a range expression")
    eval_parser.add_argument("expr", help="Range expression, e.g. '(I ± 2) ∩ R'")
    eval_parser.add_argument(
        "--let",
        dest="bindings",
        action="append",
        default=[],
        metavar="NAME=EXPR",
        help="Bind NAME to the value of EXPR before evaluating (repeatable)",
    )
    eval_parser.add_argument(
        "--reverse",
        action="store_true",
        help="Produce non-positive steps instead of non-negative ones",
    )
    eval_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the rewritten expression instead of evaluating it",
    )
    eval_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit JSON instead of a Python repr",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.cmd == "eval":
        try:
            _eval(
                args.expr,
                args.bindings,
                reverse=args.reverse,
                explain=args.explain,
                as_json=args.as_json,
                trace=args.verbose,
            )
        except IndexArithError as exc:
            print(f"error: {exc}", file=sys.stderr)
            raise SystemExit(2) from exc
        return

    parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
