from valuation.schemas.valuation import PriceStatistics
from valuation.services.outlier_filter import OutlierFilter
from valuation.services.statistics import StatisticsEngine


class FlatStatistics(StatisticsEngine):
    """Reports a zero-width IQR around 100 whatever the sample is."""

    def calculate(self, prices):
        return PriceStatistics(median=100, q1=100, q3=100, iqr=0, count=len(prices))


def test_removes_high_outlier():
    result = OutlierFilter().filter_outliers([100, 90, 110, 500, 80, 120, 100])
    assert result.removed == [500]
    assert result.filtered == [100, 90, 110, 80, 120, 100]


def test_bounds():
    stats = StatisticsEngine().calculate([100, 90, 110, 500, 80, 120, 100])
    assert OutlierFilter.get_bounds(stats) == (65, 145)


def test_small_samples_are_untouched():
    for prices in ([], [1], [1, 1000], [1, 1000, 1000000]):
        result = OutlierFilter().filter_outliers(prices)
        assert result.filtered == prices
        assert result.removed == []


def test_filtering_twice_changes_nothing_more():
    outlier_filter = OutlierFilter()
    first = outlier_filter.filter_outliers([100, 90, 110, 500, 80, 120, 100])
    second = outlier_filter.filter_outliers(first.filtered)
    assert second.filtered == first.filtered
    assert second.removed == []


def test_bounds_are_inclusive():
    result = OutlierFilter(FlatStatistics()).filter_outliers([100, 100, 100, 100, 150])
    assert result.filtered == [100, 100, 100, 100]
    assert result.removed == [150]


def test_keeps_everything_when_too_few_would_survive():
    prices = [100, 100, 300, 400, 500]
    result = OutlierFilter(FlatStatistics()).filter_outliers(prices)
    assert result.filtered == prices
    assert result.removed == []
