from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from .direction import _forward
from .exceptions import (
    InvalidRangeError,
    InvalidShrinkAmount,
    InvalidStretchAmount,
    UndefinedOperation,
)
from .forms import EMPTY_RANGE, LinearRange, MultiIndex, Region, Shape, shape_of, to_int
from .normalize import normalize

Rule = Callable[[Any, Any], Any]
RuleTable = Dict[Tuple[Shape, Shape], Rule]

SCALAR = Shape.SCALAR
RANGE = Shape.RANGE
INDEX = Shape.INDEX
REGION = Shape.REGION
TUPLE = Shape.TUPLE

_NOTHING = object()


# Dispatch helpers -------------------------------------------------------------


def _dispatch(name: str, table: RuleTable, a: Any, b: Any) -> Any:
    key = (shape_of(a), shape_of(b))
    rule = table.get(key)
    if rule is None:
        raise UndefinedOperation(name, [shape.value for shape in key])
    return rule(a, b)


def _components(x: Any) -> tuple:
    if isinstance(x, MultiIndex):
        return x.indices
    if isinstance(x, Region):
        return x.ranges
    return x


def _per_dimension(name: str, table: RuleTable, a: Any, b: Any) -> tuple:
    parts_a = _components(a)
    parts_b = _components(b)
    if len(parts_a) != len(parts_b):
        raise UndefinedOperation(
            name,
            [shape_of(a).value, shape_of(b).value],
            f"dimension mismatch ({len(parts_a)} vs {len(parts_b)})",
        )
    return tuple(_dispatch(name, table, x, y) for x, y in zip(parts_a, parts_b))


def _indexwise(name: str, table: RuleTable) -> Rule:
    return lambda a, b: MultiIndex(_per_dimension(name, table, a, b))


def _regionwise(name: str, table: RuleTable) -> Rule:
    return lambda a, b: Region(_per_dimension(name, table, a, b))


def _fold(name: str, table: RuleTable, args: tuple) -> Any:
    result = _dispatch(name, table, normalize(args[0]), normalize(args[1]))
    for arg in args[2:]:
        result = _dispatch(name, table, result, normalize(arg))
    return result


# plus -------------------------------------------------------------------------


def _shift(r: LinearRange, i: int) -> LinearRange:
    return LinearRange(r.first + i, r.step, r.last + i)


_PLUS: RuleTable = {}
_PLUS.update(
    {
        (SCALAR, SCALAR): lambda a, b: to_int(a + b),
        (RANGE, SCALAR): _shift,
        (SCALAR, RANGE): lambda i, r: _shift(r, i),
        (INDEX, INDEX): _indexwise("plus", _PLUS),
        (REGION, INDEX): _regionwise("plus", _PLUS),
        (INDEX, REGION): _regionwise("plus", _PLUS),
    }
)


def plus(*args: Any) -> Any:
    """Result of ``+x``, ``x + y`` or ``x + y + z...`` in a range expression.

    Unary plus only normalizes its argument.  A scalar shifts a range without
    touching its step.
    """
    if len(args) <= 1:
        return normalize(*args)
    return _fold("plus", _PLUS, args)


# minus ------------------------------------------------------------------------


def _negate(x: Any) -> Any:
    if isinstance(x, int):
        return to_int(-x)
    if isinstance(x, LinearRange):
        if x.is_unit:
            return LinearRange(-x.last, 1, -x.first)
        return LinearRange(-x.first, -x.step, -x.last)
    if isinstance(x, MultiIndex):
        return MultiIndex(tuple(-i for i in x.indices))
    if isinstance(x, Region):
        return Region(tuple(_negate(r) for r in x.ranges))
    raise UndefinedOperation("minus", [shape_of(x).value])


def _scalar_minus_range(i: int, r: LinearRange) -> LinearRange:
    # Unit ranges stay increasing; any other step flips sign with the negation.
    if r.is_unit:
        return LinearRange(i - r.last, 1, i - r.first)
    return LinearRange(i - r.first, -r.step, i - r.last)


_MINUS: RuleTable = {}
_MINUS.update(
    {
        (SCALAR, SCALAR): lambda a, b: to_int(a - b),
        (RANGE, SCALAR): lambda r, i: LinearRange(r.first - i, r.step, r.last - i),
        (SCALAR, RANGE): _scalar_minus_range,
        (INDEX, INDEX): _indexwise("minus", _MINUS),
        (REGION, INDEX): _regionwise("minus", _MINUS),
        (INDEX, REGION): _regionwise("minus", _MINUS),
    }
)


def minus(a: Any, b: Any = _NOTHING) -> Any:
    """Result of ``-a`` or ``a - b`` in a range expression.

    ``scalar - range`` reverses the range's step unless the range has unit
    step; call :func:`forward` or :func:`backward` to fix the final order.
    """
    if b is _NOTHING:
        return _negate(normalize(a))
    return _dispatch("minus", _MINUS, normalize(a), normalize(b))


# cap --------------------------------------------------------------------------


def _singleton(i: int) -> LinearRange:
    return LinearRange(i, 1, i)


def _cap_scalar_range(i: int, r: LinearRange) -> LinearRange:
    return _singleton(i) if i in r else EMPTY_RANGE


def _cap_ranges(a: LinearRange, b: LinearRange) -> LinearRange:
    if a.is_unit and b.is_unit:
        return LinearRange(max(a.first, b.first), 1, min(a.last, b.last))
    return _cap_lattices(_forward(a), _forward(b))


def _cap_lattices(a: LinearRange, b: LinearRange) -> LinearRange:
    """Intersect two ranges with positive steps.

    Members of the result solve ``x = a.first (mod a.step)`` and
    ``x = b.first (mod b.step)``, so they exist only when the offset between
    the two anchors is a multiple of ``gcd(a.step, b.step)`` and repeat every
    ``lcm(a.step, b.step)``.
    """
    if a.is_empty or b.is_empty:
        return EMPTY_RANGE
    g = math.gcd(a.step, b.step)
    offset = b.first - a.first
    if offset % g:
        return EMPTY_RANGE
    step = a.step // g * b.step
    m = b.step // g
    t = (offset // g) * pow(a.step // g, -1, m) % m
    anchor = a.first + a.step * t
    lo = max(a.first, b.first)
    hi = min(a.last, b.last)
    first = lo + (anchor - lo) % step
    if first > hi:
        return EMPTY_RANGE
    return LinearRange(first, step, hi)


_CAP: RuleTable = {}
_CAP.update(
    {
        (SCALAR, SCALAR): lambda a, b: _singleton(a) if a == b else EMPTY_RANGE,
        (RANGE, SCALAR): lambda r, i: _cap_scalar_range(i, r),
        (SCALAR, RANGE): _cap_scalar_range,
        (RANGE, RANGE): _cap_ranges,
        (INDEX, INDEX): _regionwise("cap", _CAP),
        (REGION, REGION): _regionwise("cap", _CAP),
        (REGION, INDEX): _regionwise("cap", _CAP),
        (INDEX, REGION): _regionwise("cap", _CAP),
    }
)


def cap(a: Any, b: Any, *more: Any) -> Any:
    """Result of ``a ∩ b`` in a range expression.

    Intersections are computed in O(1) per dimension; an empty result is
    always the canonical empty range ``1:0``.
    """
    return _fold("cap", _CAP, (a, b) + more)


# stretch / shrink -------------------------------------------------------------


def _stretch_range(r: LinearRange, amount: int) -> LinearRange:
    if amount % r.step:
        raise InvalidStretchAmount(
            f"stretch amount {amount} must be a multiple of the step {r.step} of {r!r}"
        )
    if r.step > 0:
        return LinearRange(r.first - amount, r.step, r.last + amount)
    return LinearRange(r.first + amount, r.step, r.last - amount)


def _shrink_range(r: LinearRange, amount: int) -> LinearRange:
    if amount % r.step:
        raise InvalidShrinkAmount(
            f"shrink amount {amount} must be a multiple of the step {r.step} of {r!r}"
        )
    if r.step > 0:
        return LinearRange(r.first + amount, r.step, r.last - amount)
    return LinearRange(r.first - amount, r.step, r.last + amount)


def _broadcast(func: Rule, wrap: Callable[[tuple], Any]) -> Rule:
    return lambda x, amount: wrap(tuple(func(part, amount) for part in _components(x)))


def _stretch_scalar(i: int, amount: int) -> LinearRange:
    return LinearRange(i - amount, 1, i + amount)


def _shrink_scalar(i: int, amount: int) -> LinearRange:
    return LinearRange(i + amount, 1, i - amount)


_STRETCH: RuleTable = {}
_STRETCH.update(
    {
        (SCALAR, SCALAR): _stretch_scalar,
        (RANGE, SCALAR): _stretch_range,
        (INDEX, SCALAR): _broadcast(_stretch_scalar, Region),
        (INDEX, INDEX): _regionwise("stretch", _STRETCH),
        (INDEX, TUPLE): _regionwise("stretch", _STRETCH),
        (REGION, SCALAR): _broadcast(_stretch_range, Region),
        (REGION, INDEX): _regionwise("stretch", _STRETCH),
        (REGION, TUPLE): _regionwise("stretch", _STRETCH),
    }
)

# A point cannot be shrunk, so there are no INDEX rows here.
_SHRINK: RuleTable = {}
_SHRINK.update(
    {
        (SCALAR, SCALAR): _shrink_scalar,
        (RANGE, SCALAR): _shrink_range,
        (REGION, SCALAR): _broadcast(_shrink_range, Region),
        (REGION, INDEX): _regionwise("shrink", _SHRINK),
        (REGION, TUPLE): _regionwise("shrink", _SHRINK),
    }
)


def stretch(a: Any, b: Any) -> Any:
    """Result of ``a ± b``: extend ``a`` outward by ``b`` on both sides.

    ``b`` is a scalar, or a tuple / :class:`MultiIndex` giving one amount per
    dimension.  For a range whose step is not 1 the amount must be a multiple
    of the step.
    """
    return _dispatch("stretch", _STRETCH, normalize(a), normalize(b))


def shrink(a: Any, b: Any) -> Any:
    """Result of ``a ∓ b``: pull the bounds of ``a`` inward by ``b``."""
    return _dispatch("shrink", _SHRINK, normalize(a), normalize(b))


@dataclass(frozen=True)
class StretchBy:
    """Callable that stretches its argument by a fixed amount."""

    amount: Any

    def __call__(self, x: Any) -> Any:
        return stretch(x, self.amount)


@dataclass(frozen=True)
class ShrinkBy:
    """Callable that shrinks its argument by a fixed amount."""

    amount: Any

    def __call__(self, x: Any) -> Any:
        return shrink(x, self.amount)


# Inspection -------------------------------------------------------------------


def ranges(x: Any) -> Tuple[LinearRange, ...]:
    x = normalize(x)
    if not isinstance(x, Region):
        raise UndefinedOperation("ranges", [shape_of(x).value])
    return x.ranges


def first_last(x: Any) -> tuple:
    """``(first, last)`` of a unit-step range or region."""
    x = normalize(x)
    if isinstance(x, LinearRange):
        if not x.is_unit:
            raise InvalidRangeError(f"{x!r} has non-unit step")
        return (x.first, x.last)
    if isinstance(x, Region):
        if not all(r.is_unit for r in x.ranges):
            raise InvalidRangeError(f"{x!r} has non-unit step")
        return (x.first, x.last)
    raise UndefinedOperation("first_last", [shape_of(x).value])


def first_step_last(x: Any) -> tuple:
    x = normalize(x)
    if isinstance(x, LinearRange):
        return (x.first, x.step, x.last)
    if isinstance(x, Region):
        return (
            x.first,
            MultiIndex(tuple(r.step for r in x.ranges)),
            x.last,
        )
    raise UndefinedOperation("first_step_last", [shape_of(x).value])
