from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, List

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import LarkError, UnexpectedInput

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
from .exceptions import ParseError

GRAMMAR_FILE = Path(__file__).with_name("expr_grammar.lark")

# Canonical spelling of every operator token.
OPERATOR_SPELLINGS = {
    "±": "±",
    "+/-": "±",
    "∓": "∓",
    "-/+": "∓",
    "∩": "∩",
    "&": "∩",
}


@lru_cache(maxsize=1)
def _build_parser() -> Lark:
    return Lark(
        GRAMMAR_FILE.read_text(encoding="utf-8"),
        parser="earley",
        start="start",
        propagate_positions=True,
        maybe_placeholders=False,
        ambiguity="resolve",
    )


class _AstXform(Transformer):
    def __init__(self, text: str):
        super().__init__()
        self._text = text

    # Helpers -----------------------------------------------------------------
    def _pos(self, meta) -> dict:
        if getattr(meta, "empty", True):
            return {}
        return {
            "line": meta.line,
            "column": meta.column,
            "source": self._text[meta.start_pos : meta.end_pos],
        }

    def _binop(self, meta, left, op: str, right) -> BinOp:
        return BinOp(left=left, op=op, right=right, **self._pos(meta))

    # Literals ----------------------------------------------------------------
    @v_args(meta=True)
    def number(self, meta, items):
        tok: Token = items[0]
        return Num(value=int(tok.value), **self._pos(meta))

    @v_args(meta=True)
    def name(self, meta, items):
        tok: Token = items[0]
        return Name(id=tok.value, **self._pos(meta))

    @v_args(meta=True)
    def range2(self, meta, items):
        return RangeLit(first=items[0], last=items[1], **self._pos(meta))

    @v_args(meta=True)
    def range3(self, meta, items):
        return RangeLit(first=items[0], step=items[1], last=items[2], **self._pos(meta))

    @v_args(meta=True)
    def tuple(self, meta, items):
        return TupleLit(items=list(items), **self._pos(meta))

    # Operators ---------------------------------------------------------------
    @v_args(meta=True)
    def add(self, meta, items):
        return self._binop(meta, items[0], "+", items[1])

    @v_args(meta=True)
    def sub(self, meta, items):
        return self._binop(meta, items[0], "-", items[1])

    @v_args(meta=True)
    def stretch_op(self, meta, items):
        return self._binop(meta, items[0], OPERATOR_SPELLINGS[items[1].value], items[2])

    @v_args(meta=True)
    def shrink_op(self, meta, items):
        return self._binop(meta, items[0], OPERATOR_SPELLINGS[items[1].value], items[2])

    @v_args(meta=True)
    def cap_op(self, meta, items):
        return self._binop(meta, items[0], OPERATOR_SPELLINGS[items[1].value], items[2])

    @v_args(meta=True)
    def neg(self, meta, items):
        return UnaryOp(op="-", value=items[0], **self._pos(meta))

    @v_args(meta=True)
    def pos(self, meta, items):
        return UnaryOp(op="+", value=items[0], **self._pos(meta))

    # Calls -------------------------------------------------------------------
    def args(self, items) -> List[Any]:
        return list(items)

    @v_args(meta=True)
    def call(self, meta, items):
        name_tok: Token = items[0]
        args = items[1] if len(items) > 1 else []
        return Call(name=name_tok.value, args=args, **self._pos(meta))

    @v_args(meta=True)
    def escape(self, meta, items):
        return Escape(value=items[0], **self._pos(meta))


def parse_expression(text: str) -> Expression:
    """Parse a range expression such as ``"(R ± 1) ∩ $(bounds) + I"``."""
    parser = _build_parser()
    try:
        tree = parser.parse(text)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        line_text = None
        if isinstance(line, int) and line >= 1:
            lines = text.splitlines()
            if line <= len(lines):
                line_text = lines[line - 1]
        raise ParseError(
            "invalid range expression",
            line=line if isinstance(line, int) and line >= 1 else None,
            column=column if isinstance(column, int) and column >= 1 else None,
            line_text=line_text,
        ) from exc
    except LarkError as exc:
        raise ParseError(f"invalid range expression: {exc}") from exc
    body = _AstXform(text).transform(tree)
    return Expression(body=body, line=1, column=1, source=text)
