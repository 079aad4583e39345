from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from valuation.jobs import cleanup_cache, match_complexes
from valuation.models import UnifiedListing, ValuationCache


@pytest.fixture
def job_session(db, monkeypatch):
    for module in (match_complexes, cleanup_cache):
        monkeypatch.setattr(module, "SessionLocal", lambda: db)
    return db


def test_parse_args_defaults():
    args = match_complexes.parse_args([])
    assert args.platform == "olx"
    assert args.realty_type == "apartment"
    assert args.page_size > 0


def test_parse_args_rejects_unknown_platform():
    with pytest.raises(SystemExit):
        match_complexes.parse_args(["--platform", "craigslist"])


def test_match_complexes_job(job_session, make_listing, make_complex):
    make_complex(1, "Файна Таун")
    listing = make_listing(primary_data={"title": "Продаж квартири в ЖК Файна Таун"})
    listing_id = listing.id

    assert match_complexes.main(["--page-size", "10"]) == 0
    stored = job_session.get(UnifiedListing, listing_id)
    assert stored.complex_id == 1


def test_match_complexes_job_reports_failure(job_session, monkeypatch):
    def broken_run(self, *args):
        raise RuntimeError("boom")

    monkeypatch.setattr(match_complexes.ComplexBatchMatcher, "run", broken_run)
    assert match_complexes.main([]) == 1


def test_cleanup_cache_job(job_session, make_listing):
    listing = make_listing()
    job_session.add(ValuationCache(
        listing_id=listing.id,
        analogs_data={},
        fair_price={},
        liquidity={},
        expires_at=datetime.utcnow() - timedelta(hours=1),
    ))
    job_session.commit()

    assert cleanup_cache.main() == 0
    assert job_session.execute(select(func.count()).select_from(ValuationCache)).scalar_one() == 0
