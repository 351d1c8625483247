import numpy as np
import pytest

from indexarith import (
    EMPTY_RANGE,
    LinearRange,
    UndefinedOperation,
    backward,
    forward,
    multi_index,
    one_to,
    region,
    unit_range,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (one_to(6), one_to(6)),
        (range(2, 8), unit_range(2, 7)),
        (LinearRange(-2, 3, 11), LinearRange(-2, 3, 11)),
        (LinearRange(11, -3, -2), LinearRange(-1, 3, 11)),
        (range(11, -3, -3), LinearRange(-1, 3, 11)),
        (LinearRange(5, -1, 1), unit_range(1, 5)),
        (LinearRange(-7, 2, 6), LinearRange(-7, 2, 5)),
        (LinearRange(5, -2, -8), LinearRange(-7, 2, 5)),
    ],
)
def test_forward(value, expected):
    assert forward(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (unit_range(1, 5), LinearRange(5, -1, 1)),
        (LinearRange(5, -1, 1), LinearRange(5, -1, 1)),
        (LinearRange(-7, 2, 6), LinearRange(5, -2, -7)),
        (LinearRange(5, -2, -8), LinearRange(5, -2, -7)),
    ],
)
def test_backward(value, expected):
    assert backward(value) == expected


def test_points_pass_through():
    assert forward(np.int16(4)) == 4
    assert backward(-3) == -3
    idx = multi_index(1, -2)
    assert forward(idx) is idx
    assert backward(idx) is idx


def test_forward_keeps_increasing_range_object():
    r = LinearRange(1, 2, 9)
    assert forward(r) is r


def test_empty_range_round_trip():
    assert backward(EMPTY_RANGE) == LinearRange(0, -1, 1)
    assert backward(EMPTY_RANGE).step < 0
    assert forward(backward(EMPTY_RANGE)) == EMPTY_RANGE


def test_unit_region_forward_fast_path():
    R = region(range(1, 4), range(2, 5))
    assert forward(R) is R


def test_region_forward_recurses_per_dimension():
    R = region(LinearRange(5, -1, 1), LinearRange(0, 2, 4))
    assert forward(R) == region(unit_range(1, 5), LinearRange(0, 2, 4))


def test_region_backward():
    R = region(unit_range(2, 3), LinearRange(-1, 3, 5))
    assert backward(R) == region(LinearRange(3, -1, 2), LinearRange(5, -3, -1))
    Rb = region(LinearRange(3, -1, 1))
    assert backward(Rb) is Rb


def test_tuples_have_no_direction():
    with pytest.raises(UndefinedOperation, match="forward"):
        forward((1, 2))
    with pytest.raises(UndefinedOperation, match="backward"):
        backward((1, 2))
