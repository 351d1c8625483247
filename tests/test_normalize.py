from enum import IntEnum

import numpy as np
import pytest

from indexarith import (
    EMPTY_RANGE,
    IndexOverflowError,
    LinearRange,
    MissingArgument,
    UnsupportedType,
    is_canonical,
    multi_index,
    normalize,
    plus,
    region,
    register_normalizer,
    unit_range,
)
from indexarith.core.forms import INT_MAX, INT_MIN


class Axis(IntEnum):
    ROW = 1
    COL = 2


def test_missing_argument():
    with pytest.raises(MissingArgument, match="missing argument"):
        normalize()
    with pytest.raises(TypeError):
        normalize()


def test_too_many_arguments():
    with pytest.raises(TypeError, match="exactly one argument"):
        normalize(1, 2)


@pytest.mark.parametrize(
    "value",
    [np.int8(-3), np.int16(7), np.uint32(9), np.int64(-2), True, Axis.COL, 12],
)
def test_integers_become_plain_int(value):
    out = normalize(value)
    assert type(out) is int
    assert out == int(value)


def test_integer_overflow_fails():
    with pytest.raises(IndexOverflowError):
        normalize(2**70)
    with pytest.raises(IndexOverflowError):
        normalize(np.uint64(2**63))


def test_tuples_normalize_componentwise():
    out = normalize((np.int16(1), 3, Axis.ROW))
    assert out == (1, 3, 1)
    assert all(type(i) is int for i in out)
    assert normalize(()) == ()


def test_tuple_with_non_integer_is_rejected():
    with pytest.raises(UnsupportedType, match="tuple amounts must hold integers"):
        normalize((1, "a"))


@pytest.mark.parametrize(
    "value",
    [
        unit_range(2, 7),
        LinearRange(11, -3, -2),
        EMPTY_RANGE,
        multi_index(1, 2, 3),
        region(unit_range(1, 3), LinearRange(0, 2, 8)),
    ],
)
def test_canonical_values_are_returned_unchanged(value):
    assert normalize(value) is value
    assert is_canonical(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        (range(2, 7), LinearRange(2, 1, 6)),
        (range(11, -3, -3), LinearRange(11, -3, -1)),
        (range(10, 2), EMPTY_RANGE),
        (range(-5, -10, 2), EMPTY_RANGE),
        (range(0, 10, -1), LinearRange(0, -1, 1)),
    ],
)
def test_python_ranges_become_linear_ranges(value, expected):
    assert normalize(value) == expected


def test_python_ranges_wider_than_ssize_t():
    assert normalize(range(0, 2**63)) == LinearRange(0, 1, INT_MAX)
    assert normalize(range(INT_MAX, INT_MIN - 1, -1)) == LinearRange(INT_MAX, -1, INT_MIN)
    assert normalize(range(INT_MIN, INT_MAX, 3)).last == INT_MAX - 3
    with pytest.raises(IndexOverflowError):
        normalize(range(0, 2**70))
    with pytest.raises(IndexOverflowError):
        normalize(range(2**63, 0, -1))


@pytest.mark.parametrize(
    "value",
    [5, np.int32(5), (1, 2), range(3, 9, 2), unit_range(1, 4), multi_index(2, 2)],
)
def test_normalize_is_idempotent(value):
    once = normalize(value)
    assert normalize(once) == once


@pytest.mark.parametrize(
    "value, type_name",
    [(1.5, "float"), ("3", "str"), ([1, 2], "list"), (None, "NoneType")],
)
def test_unsupported_types_are_named(value, type_name):
    with pytest.raises(UnsupportedType, match=f"`{type_name}`") as excinfo:
        normalize(value)
    assert excinfo.value.value_type is type(value)
    assert "register_normalizer" in str(excinfo.value)


def test_is_canonical_rejects_non_canonical():
    assert not is_canonical((1, 2))
    assert not is_canonical(range(3))
    assert not is_canonical(True)
    assert is_canonical(4)


class Span:
    def __init__(self, lo, hi):
        self.lo = lo
        self.hi = hi


class Shifted(Span):
    pass


@register_normalizer(Span)
def _normalize_span(x):
    return unit_range(x.lo, x.hi)


def test_registered_rule_is_used_by_normalize_and_operators():
    assert normalize(Span(2, 5)) == unit_range(2, 5)
    assert plus(Span(2, 5), 1) == unit_range(3, 6)


def test_registered_rule_applies_to_subclasses():
    assert normalize(Shifted(0, 3)) == unit_range(0, 3)


def test_registering_replaces_cached_dispatch():
    class Point:
        def __init__(self, *coords):
            self.coords = coords

    with pytest.raises(UnsupportedType):
        normalize(Point(1, 2))

    @register_normalizer(Point)
    def _normalize_point(x):
        return multi_index(*x.coords)

    assert normalize(Point(1, 2)) == multi_index(1, 2)


def test_rule_must_return_canonical_form():
    class Opaque:
        pass

    @register_normalizer(Opaque)
    def _normalize_opaque(x):
        return "not an index"

    with pytest.raises(UnsupportedType, match="not a canonical index form"):
        normalize(Opaque())
