from __future__ import annotations

import itertools
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Tuple, Union

import numpy as np

from .exceptions import IndexOverflowError, InvalidRangeError, UnsupportedType

# NOTE: Every integer held by a canonical value is a Python ``int`` constrained
# to the bounds of ``INT_DTYPE``.  Narrowing fails loudly instead of wrapping.

INT_DTYPE = np.int64
_INT_INFO = np.iinfo(INT_DTYPE)
INT_MIN = int(_INT_INFO.min)
INT_MAX = int(_INT_INFO.max)


def to_int(x: Any) -> int:
    """Narrow an integer of any width to a checked 64-bit index value."""
    if type(x) is int and INT_MIN <= x <= INT_MAX:
        return x
    if not isinstance(x, numbers.Integral):
        raise UnsupportedType(
            type(x),
            f"expected an integer index, got `{type(x).__name__}`",
        )
    value = int(x)
    if value < INT_MIN or value > INT_MAX:
        raise IndexOverflowError(
            f"index value {value} does not fit in {np.dtype(INT_DTYPE).name} "
            f"[{INT_MIN}, {INT_MAX}]"
        )
    return value


class Shape(Enum):
    SCALAR = "scalar"
    RANGE = "range"
    INDEX = "index"
    REGION = "region"
    TUPLE = "tuple"


# Linear ranges ----------------------------------------------------------------


@dataclass(frozen=True, repr=False)
class LinearRange:
    """Inclusive arithmetic progression ``first:step:last``.

    The constructor narrows the three fields, snaps ``last`` onto the last
    member actually reached from ``first`` and collapses empty progressions to
    ``1:1:0`` (positive step) or ``0:-1:1`` (negative step), so two ranges
    compare equal exactly when their fields are identical.
    """

    first: int
    step: int
    last: int

    def __post_init__(self):
        first = to_int(self.first)
        step = to_int(self.step)
        last = to_int(self.last)
        if step == 0:
            raise InvalidRangeError("range step cannot be zero")
        if step > 0:
            if last < first:
                first, step, last = 1, 1, 0
            else:
                last -= (last - first) % step
        else:
            if last > first:
                first, step, last = 0, -1, 1
            else:
                last += (first - last) % -step
        object.__setattr__(self, "first", first)
        object.__setattr__(self, "step", step)
        object.__setattr__(self, "last", last)

    @classmethod
    def from_range(cls, r: range) -> "LinearRange":
        # Avoid len(r) and r[-1]: both are limited to ssize_t.
        sign = 1 if r.step > 0 else -1
        if (r.stop - r.start) * sign <= 0:
            return cls(1, 1, 0) if sign > 0 else cls(0, -1, 1)
        last = r.start + (r.stop - r.start - sign) // r.step * r.step
        return cls(r.start, r.step, last)

    @property
    def is_unit(self) -> bool:
        return self.step == 1

    @property
    def is_empty(self) -> bool:
        # Empties are collapsed on construction, so the bounds decide.
        return self.last < self.first if self.step > 0 else self.last > self.first

    def __len__(self) -> int:
        return (self.last - self.first) // self.step + 1

    def __contains__(self, value: Any) -> bool:
        if not isinstance(value, numbers.Integral) or self.is_empty:
            return False
        value = int(value)
        lo, hi = (self.first, self.last) if self.step > 0 else (self.last, self.first)
        return lo <= value <= hi and (value - self.first) % self.step == 0

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_range())

    def __reversed__(self) -> Iterator[int]:
        return reversed(self.to_range())

    def to_range(self) -> range:
        return range(self.first, self.last + (1 if self.step > 0 else -1), self.step)

    def to_array(self) -> np.ndarray:
        return np.arange(
            self.first, self.last + (1 if self.step > 0 else -1), self.step, dtype=INT_DTYPE
        )

    def text(self) -> str:
        if self.step == 1:
            return f"{self.first}:{self.last}"
        return f"{self.first}:{self.step}:{self.last}"

    def __repr__(self) -> str:
        return f"LinearRange({self.text()})"


def unit_range(first: Any, last: Any) -> LinearRange:
    return LinearRange(first, 1, last)


def one_to(n: Any) -> LinearRange:
    return LinearRange(1, 1, n)


EMPTY_RANGE = LinearRange(1, 1, 0)


def as_linear_range(r: Any) -> LinearRange:
    if isinstance(r, LinearRange):
        return r
    if isinstance(r, range):
        return LinearRange.from_range(r)
    raise UnsupportedType(
        type(r),
        f"region dimensions must be ranges, got `{type(r).__name__}`",
    )


# Multi-dimensional values -----------------------------------------------------


@dataclass(frozen=True, repr=False)
class MultiIndex:
    """A single point of N-dimensional integer space."""

    indices: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "indices", tuple(to_int(i) for i in self.indices))

    @property
    def ndim(self) -> int:
        return len(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __getitem__(self, item):
        return self.indices[item]

    def __repr__(self) -> str:
        return f"MultiIndex({', '.join(str(i) for i in self.indices)})"


def multi_index(*indices: Any) -> MultiIndex:
    return MultiIndex(indices)


@dataclass(frozen=True, repr=False)
class Region:
    """Rectangular set of points: the Cartesian product of per-dimension ranges.

    Iteration yields :class:`MultiIndex` points with the last dimension
    varying fastest.
    """

    ranges: Tuple[LinearRange, ...]

    def __post_init__(self):
        object.__setattr__(self, "ranges", tuple(as_linear_range(r) for r in self.ranges))

    @property
    def ndim(self) -> int:
        return len(self.ranges)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(len(r) for r in self.ranges)

    @property
    def size(self) -> int:
        return math.prod(self.shape)

    @property
    def is_empty(self) -> bool:
        return any(r.is_empty for r in self.ranges)

    @property
    def first(self) -> MultiIndex:
        return MultiIndex(tuple(r.first for r in self.ranges))

    @property
    def last(self) -> MultiIndex:
        return MultiIndex(tuple(r.last for r in self.ranges))

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[MultiIndex]:
        for point in itertools.product(*self.ranges):
            yield MultiIndex(point)

    def __contains__(self, value: Any) -> bool:
        if isinstance(value, MultiIndex):
            value = value.indices
        if not isinstance(value, tuple) or len(value) != self.ndim:
            return False
        return all(i in r for i, r in zip(value, self.ranges))

    def __repr__(self) -> str:
        return f"Region({', '.join(r.text() for r in self.ranges)})"


def region(*ranges: Any) -> Region:
    return Region(ranges)


Canonical = Union[int, LinearRange, MultiIndex, Region]
CANONICAL_TYPES = (int, LinearRange, MultiIndex, Region)


def shape_of(value: Any) -> Shape:
    """Tag an already-normalized value with its canonical shape."""
    if isinstance(value, int) and not isinstance(value, bool):
        return Shape.SCALAR
    if isinstance(value, LinearRange):
        return Shape.RANGE
    if isinstance(value, MultiIndex):
        return Shape.INDEX
    if isinstance(value, Region):
        return Shape.REGION
    if isinstance(value, tuple):
        return Shape.TUPLE
    raise UnsupportedType(type(value))
