from __future__ import annotations

from typing import Any

from .exceptions import UndefinedOperation
from .forms import Canonical, LinearRange, MultiIndex, Region
from .normalize import normalize


def forward(x: Any) -> Canonical:
    """Return ``x`` normalized and with non-negative step(s).

    The point set is unchanged; only the traversal order may be reversed.
    """
    return _forward(normalize(x))


def backward(x: Any) -> Canonical:
    """Return ``x`` normalized and with non-positive step(s)."""
    return _backward(normalize(x))


def _forward(x: Any) -> Canonical:
    if isinstance(x, (int, MultiIndex)):
        return x
    if isinstance(x, LinearRange):
        if x.step >= 0:
            return x
        return LinearRange(x.last, -x.step, x.first)
    if isinstance(x, Region):
        if all(r.step == 1 for r in x.ranges):
            return x
        return Region(tuple(_forward(r) for r in x.ranges))
    raise UndefinedOperation("forward", [type(x).__name__], "tuples have no direction")


def _backward(x: Any) -> Canonical:
    if isinstance(x, (int, MultiIndex)):
        return x
    if isinstance(x, LinearRange):
        if x.step <= 0:
            return x
        return LinearRange(x.last, -x.step, x.first)
    if isinstance(x, Region):
        if all(r.step == -1 for r in x.ranges):
            return x
        return Region(tuple(_backward(r) for r in x.ranges))
    raise UndefinedOperation("backward", [type(x).__name__], "tuples have no direction")
