"""Tests for interpolate, the piecewise linear cost curves."""
import pytest

from car_cost.interpolation import interpolate
from car_cost.models import ControlPoint


@pytest.mark.parametrize("length", [0, 1, 7, 20])
def test_no_points_gives_zeros(length):
    assert interpolate([], length) == [0.0] * length


@pytest.mark.parametrize("length", [0, 1, 7])
def test_single_point_is_constant(length):
    assert interpolate([ControlPoint(4, 1234.5)], length) == [1234.5] * length


def test_zero_length_is_empty():
    assert interpolate([(0, 100), (10, 200)], 0) == []


def test_midpoint_and_endpoints():
    """Linear between two points, exact at both control points."""
    values = interpolate([(0, 100), (10, 200)], 11)
    assert len(values) == 11
    assert values[0] == 100
    assert values[5] == 150
    assert values[10] == 200


def test_multi_segment_curve():
    values = interpolate([(0, 1000), (5, 2000), (10, 3500), (15, 5000)], 15)
    assert values[3] == pytest.approx(1600)
    assert values[5] == 2000
    assert values[7] == pytest.approx(2600)
    assert values[14] == pytest.approx(4700)


def test_unsorted_points_are_sorted_on_a_copy():
    points = [ControlPoint(10, 200), ControlPoint(0, 100)]
    assert interpolate(points, 11) == interpolate(sorted(points), 11)
    assert points == [ControlPoint(10, 200), ControlPoint(0, 100)]


def test_extrapolates_past_last_point():
    """Years after the curve follow the slope of the final segment."""
    values = interpolate([(0, 100), (5, 200), (10, 100)], 13)
    assert values[11] == pytest.approx(80)
    assert values[12] == pytest.approx(60)


def test_extrapolates_before_first_point():
    values = interpolate([(5, 100), (10, 200)], 3)
    assert values[0] == pytest.approx(0)
    assert values[2] == pytest.approx(40)


def test_duplicate_years_are_flat():
    """Two points on the same year never divide by zero."""
    values = interpolate([(3, 100), (3, 100)], 6)
    assert values == [100] * 6


def test_accepts_plain_pairs():
    assert interpolate([[0, 10], [2, 30]], 3) == interpolate([ControlPoint(0, 10), ControlPoint(2, 30)], 3)


@pytest.mark.parametrize("start,end", [(100, 500), (500, 100), (250, 250)])
def test_two_point_curve_monotonic_between_points(start, end):
    values = interpolate([(2, start), (12, end)], 15)[2:13]
    pairs = list(zip(values, values[1:]))
    if start < end:
        assert all(a <= b for a, b in pairs)
    elif start > end:
        assert all(a >= b for a, b in pairs)
    else:
        assert all(a == b for a, b in pairs)
