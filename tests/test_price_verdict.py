import pytest

from valuation.schemas.valuation import PriceStatistics, PriceVerdict
from valuation.services.price_verdict import PriceVerdictClassifier

classifier = PriceVerdictClassifier()


def stats(median):
    return PriceStatistics(median=median)


def test_cheap_with_explanation():
    verdict = classifier.classify(100000, stats(120000))
    assert verdict == PriceVerdict.CHEAP
    assert classifier.explain(verdict, 100000, stats(120000)) == (
        "Ціна на 16.7% нижче медіанної ринкової ціни"
    )


def test_expensive_with_explanation():
    verdict = classifier.classify(130000, stats(100000))
    assert verdict == PriceVerdict.EXPENSIVE
    assert classifier.explain(verdict, 130000, stats(100000)) == (
        "Ціна на 30.0% вище медіанної ринкової ціни"
    )


@pytest.mark.parametrize("price", [90000, 100000, 110000])
def test_thresholds_are_in_market(price):
    assert classifier.classify(price, stats(100000)) == PriceVerdict.IN_MARKET


def test_just_outside_thresholds():
    assert classifier.classify(89999, stats(100000)) == PriceVerdict.CHEAP
    assert classifier.classify(110001, stats(100000)) == PriceVerdict.EXPENSIVE


def test_no_market_data():
    assert classifier.classify(100000, stats(0)) == PriceVerdict.IN_MARKET
    assert classifier.explain(PriceVerdict.IN_MARKET, 100000, stats(0)) == (
        "Недостатньо даних для порівняння з ринком"
    )


@pytest.mark.parametrize("price", [None, 0])
def test_missing_subject_price_counts_as_zero(price):
    assert classifier.classify(price, stats(100000)) == PriceVerdict.CHEAP
    assert classifier.explain(PriceVerdict.CHEAP, price, stats(100000)) == "Ціна об'єкта не вказана"


def test_missing_subject_price_without_market_data():
    assert classifier.classify(None, stats(0)) == PriceVerdict.IN_MARKET
