import uuid

import pytest

MARKET_PRICES = [100000, 90000, 110000, 500000, 80000, 120000, 100000]


@pytest.fixture
def subject(make_listing):
    listing = make_listing(
        price=100000,
        source_id=555,
        external_url="https://www.olx.ua/d/uk/obyavlenie/kvartira-123.html",
    )
    for price in MARKET_PRICES:
        make_listing(price=price)
    return listing


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True


# ── Fair price ─────────────────────────────────────────────────────────────────

def test_fair_price_by_uuid(client, subject):
    response = client.get(f"/api/v1/valuation/{subject.id}/fair-price")
    assert response.status_code == 200

    body = response.json()
    assert body["listing_id"] == str(subject.id)
    assert body["fair_price"]["median"] == 100000
    assert body["fair_price"]["verdict"] == "in_market"
    assert body["analogs"]["count"] == 7
    assert body["analogs"]["search_radius"] == "city"


def test_fair_price_by_source_id(client, subject):
    response = client.get("/api/v1/valuation/555/fair-price", params={"source": "aggregator"})
    assert response.status_code == 200
    assert response.json()["listing_id"] == str(subject.id)


def test_fair_price_numeric_id_defaults_to_vector(client, subject):
    assert client.get("/api/v1/valuation/555/fair-price").status_code == 404


@pytest.mark.parametrize("listing_id", [str(uuid.uuid4()), "abc"])
def test_fair_price_unknown_listing(client, db, listing_id):
    response = client.get(f"/api/v1/valuation/{listing_id}/fair-price")
    assert response.status_code == 404


def test_fair_price_bad_source(client, subject):
    response = client.get("/api/v1/valuation/555/fair-price", params={"source": "crm"})
    assert response.status_code == 422
    assert response.json()["success"] is False


# ── Full report and cache ──────────────────────────────────────────────────────

def test_full_report_is_cached(client, subject):
    url = f"/api/v1/valuation/{subject.id}/full"

    first = client.get(url)
    assert first.status_code == 200
    assert first.json()["from_cache"] is False
    assert first.json()["property"]["id"] == str(subject.id)
    assert 0 <= first.json()["liquidity"]["score"] <= 10

    second = client.get(url)
    assert second.json()["from_cache"] is True
    assert second.json()["fair_price"]["median"] == first.json()["fair_price"]["median"]

    refreshed = client.get(url, params={"refresh": True})
    assert refreshed.json()["from_cache"] is False


def test_full_report_numeric_id_without_source(client, subject):
    response = client.get("/api/v1/valuation/555/full")
    assert response.status_code == 200
    assert response.json()["property"]["source_id"] == 555


def test_invalidate_cache(client, subject):
    client.get(f"/api/v1/valuation/{subject.id}/full")

    response = client.delete(f"/api/v1/valuation/{subject.id}/cache")
    assert response.status_code == 200
    assert response.json() == {"success": True, "listing_id": str(subject.id), "removed": True}

    again = client.delete(f"/api/v1/valuation/{subject.id}/cache")
    assert again.json()["removed"] is False

    assert client.get(f"/api/v1/valuation/{subject.id}/full").json()["from_cache"] is False


def test_invalidate_cache_unknown_listing(client, db):
    assert client.delete(f"/api/v1/valuation/{uuid.uuid4()}/cache").status_code == 404


# ── Listing search ─────────────────────────────────────────────────────────────

def test_search_by_url(client, subject):
    response = client.get(
        "/api/v1/listings/search",
        params={"external_url": "https://www.olx.ua/d/uk/obyavlenie/kvartira-123/"},
    )
    assert response.status_code == 200
    assert response.json()["id"] == str(subject.id)


def test_search_by_source(client, subject):
    response = client.get(
        "/api/v1/listings/search",
        params={"source_id": 555, "source_type": "aggregator"},
    )
    assert response.status_code == 200
    assert response.json() == {
        "id": str(subject.id),
        "source_type": "aggregator",
        "source_id": 555,
        "external_url": "https://www.olx.ua/d/uk/obyavlenie/kvartira-123.html",
    }


@pytest.mark.parametrize("params", [{"external_url": "https://example.com/nothing"}, {}])
def test_search_not_found(client, subject, params):
    assert client.get("/api/v1/listings/search", params=params).status_code == 404
