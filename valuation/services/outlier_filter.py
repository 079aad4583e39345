"""
Outlier Filter
IQR rule: keep prices inside [Q1 − 1.5·IQR, Q3 + 1.5·IQR] (inclusive).

Samples of 3 or fewer prices are returned untouched. If filtering would
leave fewer than 3 prices, the original sample is returned with nothing
removed, so sparse analog pools keep a usable median.
"""
from typing import Optional, Sequence, Tuple

from valuation.schemas.valuation import OutlierResult, PriceStatistics
from valuation.services.statistics import StatisticsEngine, round_half_up

IQR_MULTIPLIER = 1.5
MIN_SAMPLE_SIZE = 3


class OutlierFilter:
    def __init__(self, statistics: Optional[StatisticsEngine] = None):
        self.statistics = statistics or StatisticsEngine()

    def filter_outliers(self, prices: Sequence[float]) -> OutlierResult:
        prices = list(prices)
        if len(prices) <= MIN_SAMPLE_SIZE:
            return OutlierResult(filtered=prices, removed=[])

        stats = self.statistics.calculate(prices)
        lower = stats.q1 - IQR_MULTIPLIER * stats.iqr
        upper = stats.q3 + IQR_MULTIPLIER * stats.iqr

        filtered, removed = [], []
        for price in prices:
            if lower <= price <= upper:
                filtered.append(price)
            else:
                removed.append(price)

        if len(filtered) < MIN_SAMPLE_SIZE:
            return OutlierResult(filtered=prices, removed=[])
        return OutlierResult(filtered=filtered, removed=removed)

    @staticmethod
    def get_bounds(stats: PriceStatistics) -> Tuple[int, int]:
        """(lower, upper) outlier bounds for reporting."""
        return (
            round_half_up(stats.q1 - IQR_MULTIPLIER * stats.iqr),
            round_half_up(stats.q3 + IQR_MULTIPLIER * stats.iqr),
        )
