from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from valuation.models.valuation_cache import ValuationCache
from valuation.schemas.valuation import (
    AnalogsSummary,
    FairPrice,
    Liquidity,
    LiquidityCriterion,
    LiquidityLevel,
    PriceRange,
    PriceVerdict,
    SearchRadius,
    ValuationReport,
)
from valuation.services.valuation_cache import (
    ValuationCacheService,
    expand_breakdown,
    estimate_days_to_sell,
)


def report(median=100000, analog_ids=()):
    return ValuationReport(
        analogs=AnalogsSummary(count=len(analog_ids), analog_ids=list(analog_ids), search_radius=SearchRadius.STREET),
        fair_price=FairPrice(
            median=median, average=101000, min=80000, max=120000, q1=92500, q3=107500,
            range=PriceRange(low=92500, high=107500),
            verdict=PriceVerdict.CHEAP, explanation="Ціна на 10.0% нижче медіанної ринкової ціни",
            analogs_count=6,
        ),
        liquidity=Liquidity(
            score=8.0,
            level=LiquidityLevel.HIGH,
            criteria=[LiquidityCriterion(name="price", score=8, weight=0.23, weighted_score=1.84)],
            recommendations=[],
            estimated_days_to_sell=18,
        ),
        confidence=0.8,
        notes=["Аналоги знайдено на тій самій вулиці"],
    )


def expire(db, listing_id):
    entry = db.execute(select(ValuationCache).where(ValuationCache.listing_id == listing_id)).scalar_one()
    entry.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()


def count_entries(db):
    return db.execute(select(func.count()).select_from(ValuationCache)).scalar_one()


def test_round_trip(db, make_listing):
    subject, analog = make_listing(), make_listing()
    cache = ValuationCacheService(db)
    cache.set(subject.id, report(analog_ids=[analog.id]))

    cached = cache.get(subject.id)
    assert cached.from_cache is True
    assert cached.fair_price.median == 100000
    assert cached.fair_price.range.low == 92500
    assert cached.fair_price.verdict == PriceVerdict.CHEAP
    assert cached.fair_price.analogs_count == 6
    assert cached.analogs.analog_ids == [analog.id]
    assert cached.analogs.search_radius == SearchRadius.STREET
    assert cached.confidence == 0.8
    assert cached.notes == ["Аналоги знайдено на тій самій вулиці"]

    [criterion] = cached.liquidity.criteria
    assert criterion.weighted_score == pytest.approx(1.84)
    # days to sell is derived from the level on read
    assert cached.liquidity.estimated_days_to_sell == 30
    assert cached.calculated_at is not None


def test_missing_entry(db, make_listing):
    assert ValuationCacheService(db).get(make_listing().id) is None


def test_expired_entry_is_deleted_on_read(db, make_listing):
    subject = make_listing()
    cache = ValuationCacheService(db)
    cache.set(subject.id, report())
    expire(db, subject.id)

    assert cache.get(subject.id) is None
    assert count_entries(db) == 0


def test_set_overwrites_single_row(db, make_listing):
    subject = make_listing()
    cache = ValuationCacheService(db)
    cache.set(subject.id, report(median=100000))
    cache.set(subject.id, report(median=120000))

    assert count_entries(db) == 1
    assert cache.get(subject.id).fair_price.median == 120000


def test_set_uses_ttl(db, make_listing):
    subject = make_listing()
    entry = ValuationCacheService(db, ttl_hours=2).set(subject.id, report())
    assert entry.expires_at - entry.calculated_at == timedelta(hours=2)


def test_invalidate(db, make_listing):
    subject = make_listing()
    cache = ValuationCacheService(db)
    cache.set(subject.id, report())

    assert cache.invalidate(subject.id) is True
    assert cache.invalidate(subject.id) is False
    assert cache.get(subject.id) is None


def test_cleanup_expired(db, make_listing):
    fresh, stale = make_listing(), make_listing()
    cache = ValuationCacheService(db)
    cache.set(fresh.id, report())
    cache.set(stale.id, report())
    expire(db, stale.id)

    assert cache.cleanup_expired() == 1
    assert cache.get(fresh.id) is not None
    assert cache.cleanup_expired() == 0


def test_expand_breakdown():
    criteria = expand_breakdown({
        "price": {"score": 7, "weight": 0.23},
        "price_per_meter": {"score": None, "weight": 0.1},
        "broken": "n/a",
    })
    assert [c.name for c in criteria] == ["price", "price_per_meter"]
    assert criteria[0].weighted_score == pytest.approx(1.61)
    assert criteria[1].weighted_score == 0
    assert expand_breakdown(None) == []


@pytest.mark.parametrize("level, days", [("high", 30), ("medium", 60), ("low", 120), (None, 90), ("odd", 90)])
def test_days_to_sell_by_level(level, days):
    assert estimate_days_to_sell(level) == days
