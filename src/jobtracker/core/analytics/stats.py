from __future__ import annotations

from collections.abc import Sequence


def average(values: Sequence[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    if not values:
        return 0
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def ratio(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, or 0 when the denominator is 0."""
    return numerator / denominator if denominator else 0
