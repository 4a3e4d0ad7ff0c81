"""
Piecewise linear interpolation of sparse cost curves.
"""

from typing import List

from .models import CostCurve


def interpolate(points: CostCurve, length: int) -> List[float]:
    """
    Expand control points into one cost per year of ownership.

    Years between two control points are linearly interpolated. Years
    outside the curve are extrapolated along the nearest end segment
    (the last two points above the curve, the first two below it).

    Args:
        points: (year, cost) control points, in any order
        length: Number of years to produce, for years 0 .. length-1

    Returns:
        List of `length` yearly costs
    """
    if len(points) == 0:
        return [0.0] * length
    if len(points) == 1:
        return [points[0][1]] * length

    # Work on a sorted copy, the caller's sequence is left alone.
    # Ties between equal years keep their input order.
    ordered = sorted(points, key=lambda p: p[0])

    result = []
    for year in range(length):
        left, right = _bracket(ordered, year)
        left_year, left_cost = left
        right_year, right_cost = right

        if left_year == right_year:
            result.append(left_cost)
            continue

        t = (year - left_year) / (right_year - left_year)
        result.append(left_cost + t * (right_cost - left_cost))

    return result


def _bracket(ordered: CostCurve, year: int):
    """Find the first segment with left.year <= year < right.year."""
    for left, right in zip(ordered, ordered[1:]):
        if left[0] <= year < right[0]:
            return left, right

    if year < ordered[0][0]:
        return ordered[0], ordered[1]
    return ordered[-2], ordered[-1]
