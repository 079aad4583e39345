import pytest
from sqlalchemy.exc import OperationalError

from valuation.models.listing import RealtyType
from valuation.services.complex_batch_matcher import ComplexBatchMatcher
from valuation.services.complex_matcher import ComplexMatcher


@pytest.fixture
def catalogue(make_complex):
    make_complex(1, "Файна Таун")
    make_complex(2, "Комфорт Таун", name_ru="Комфорт Таун")


@pytest.fixture
def listings(make_listing):
    return {
        "title": make_listing(primary_data={"title": "Продаж квартири в ЖК Файна Таун"}),
        "short": make_listing(primary_data={"title": "Кв"}),
        "unmatched": make_listing(primary_data={"title": "Продаж квартири біля метро Лівобережна"}),
        "other_platform": make_listing(
            realty_platform="domRia",
            primary_data={"title": "Квартира в ЖК Файна Таун"},
        ),
        "description": make_listing(
            description={
                "uk": "Затишна квартира у ЖК Комфорт Таун, ремонт",
                "ru": "Уютная квартира в ЖК Комфорт Таун",
            },
        ),
    }


def test_run_links_listings_and_counts(db, catalogue, listings):
    stats = ComplexBatchMatcher(db, page_size=2).run("olx", "apartment")

    assert stats.processed == 4
    assert stats.matched == 2
    assert stats.skipped == 1

    db.expire_all()
    assert listings["title"].complex_id == 1
    assert listings["description"].complex_id == 2
    assert listings["short"].complex_id is None
    assert listings["unmatched"].complex_id is None
    assert listings["other_platform"].complex_id is None


def test_rerun_only_visits_unresolved_rows(db, catalogue, listings):
    ComplexBatchMatcher(db, page_size=2).run()
    stats = ComplexBatchMatcher(db, page_size=2).run()

    assert stats.processed == 2
    assert stats.matched == 0


def test_single_page_run(db, catalogue, listings):
    stats = ComplexBatchMatcher(db, page_size=100).run(realty_platform="domRia")

    assert stats.pages == 1
    assert stats.processed == 1
    assert stats.matched == 1
    db.expire_all()
    assert listings["other_platform"].complex_id == 1


def test_other_realty_type_is_untouched(db, catalogue, listings):
    stats = ComplexBatchMatcher(db).run(realty_type=RealtyType.HOUSE.value)
    assert stats.processed == 0


def test_explicit_matcher_is_used(db, listings):
    matcher = ComplexMatcher([])
    stats = ComplexBatchMatcher(db, matcher=matcher).run()
    assert stats.processed == 0
    assert stats.matched == 0


def test_empty_catalogue_does_nothing(db, listings):
    stats = ComplexBatchMatcher(db).run()
    assert (stats.processed, stats.matched, stats.pages) == (0, 0, 0)


def test_invalid_arguments(db):
    with pytest.raises(ValueError):
        ComplexBatchMatcher(db, page_size=0)
    with pytest.raises(ValueError):
        ComplexBatchMatcher(db).run(realty_type="castle")


def test_database_error_propagates(db, catalogue, listings, monkeypatch):
    batch = ComplexBatchMatcher(db, page_size=2)

    def fail(matches):
        raise OperationalError("UPDATE unified_listings", {}, Exception("database is locked"))

    monkeypatch.setattr(batch, "_apply_matches", fail)
    with pytest.raises(OperationalError):
        batch.run()
