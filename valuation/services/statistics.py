"""
Statistics Engine
Median / average / quartiles over a price sample.

Percentiles use the linear-interpolation rank method:
  index = (p / 100) × (n − 1), interpolated between floor and ceil.
Every returned figure is rounded half-up to a whole currency unit.
"""
import math
from typing import List, Sequence

from valuation.schemas.valuation import PriceStatistics


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always upwards (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def median(sorted_values: Sequence[float]) -> float:
    if not sorted_values:
        return 0.0
    mid = len(sorted_values) // 2
    if len(sorted_values) % 2 == 0:
        return (sorted_values[mid - 1] + sorted_values[mid]) / 2
    return float(sorted_values[mid])


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """p-th percentile (0–100) of an ascending sample."""
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])

    index = (p / 100) * (len(sorted_values) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])

    weight = index - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


class StatisticsEngine:
    """Stateless; one instance can be shared by every request."""

    def calculate(self, prices: Sequence[float]) -> PriceStatistics:
        if not prices:
            return PriceStatistics()

        ordered: List[float] = sorted(prices)
        q1 = percentile(ordered, 25)
        q3 = percentile(ordered, 75)

        return PriceStatistics(
            median=round_half_up(median(ordered)),
            average=round_half_up(average(ordered)),
            min=round_half_up(ordered[0]),
            max=round_half_up(ordered[-1]),
            q1=round_half_up(q1),
            q3=round_half_up(q3),
            iqr=round_half_up(q3 - q1),
            count=len(ordered),
        )
