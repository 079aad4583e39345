import pytest

from valuation.models.listing import UnifiedListing
from valuation.services.primary_data import build_search_text, extract_primary_data, to_float


def listing(platform, primary_data, **kwargs):
    return UnifiedListing(realty_platform=platform, primary_data=primary_data, **kwargs)


def test_olx():
    data = extract_primary_data(listing("olx", {
        "title": "2-к квартира, ЖК Файна Таун",
        "price": {"value": 55000},
        "params": [
            {"key": "total_area", "value": "55,5 м²"},
            {"key": "repair", "value": "euro"},
        ],
    }))
    assert data.title == "2-к квартира, ЖК Файна Таун"
    assert data.price == 55000
    assert data.area == 55.5
    assert data.condition_code == "euro"


def test_dom_ria():
    data = extract_primary_data(listing("domRia", {
        "characteristics_values": {"516": 507},
        "total_square_meters": 60,
        "description_uk": "Світла квартира",
        "price": 72000,
    }))
    assert data.condition_code == "507"
    assert data.area == 60
    assert data.description == "Світла квартира"


def test_realtor_ua():
    data = extract_primary_data(listing("realtorUa", {
        "main_params": {"status": "Ремонт", "total_area": "70 м²", "price": 80000},
    }))
    assert (data.condition_code, data.area, data.price) == ("Ремонт", 70, 80000)


def test_real_estate_lviv_ua():
    data = extract_primary_data(listing("realEstateLvivUa", {
        "details": {"Стан": "Хороший", "Загальна площа": "45"},
    }))
    assert (data.condition_code, data.area) == ("Хороший", 45)


def test_mls_ukraine():
    data = extract_primary_data(listing("mlsUkraine", {
        "params": {"condition": "new", "total_area": 88},
    }))
    assert (data.condition_code, data.area) == ("new", 88)


def test_missing_fields_fall_back_to_columns():
    data = extract_primary_data(listing(
        "olx", None, price=100000, total_area=50, condition="good", description={"uk": "Опис"},
    ))
    assert data.price == 100000
    assert data.area == 50
    assert data.condition_code == "good"
    assert data.description == "Опис"


def test_broken_payload_does_not_raise():
    data = extract_primary_data(listing("olx", {"params": "oops", "price": "n/a"}, total_area=41))
    assert data.price is None
    assert data.area == 41


def test_unknown_platform_uses_title_only():
    data = extract_primary_data(listing(None, {"title": "Будинок", "params": {"total_area": 120}}))
    assert data.title == "Будинок"
    assert data.area is None


@pytest.mark.parametrize("value, expected", [
    (55, 55.0),
    ("55,5 м²", 55.5),
    ("1 200 $", 1200.0),
    ({"value": "12.5"}, 12.5),
    ("abc", None),
    (True, None),
    (None, None),
])
def test_to_float(value, expected):
    assert to_float(value) == expected


def test_search_text_joins_title_and_descriptions():
    text = build_search_text(listing(
        "olx",
        {"title": "Квартира"},
        description={"uk": "ЖК Файна Таун", "ru": "ЖК Файна Таун, рус"},
    ))
    assert text == "Квартира ЖК Файна Таун ЖК Файна Таун, рус"


def test_search_text_with_plain_description():
    assert build_search_text(listing("olx", None, description="Просто опис")) == "Просто опис"
    assert build_search_text(listing("olx", None)) == ""
