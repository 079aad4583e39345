"""
Platform Adapters
Every aggregator platform ships its own `primary_data` layout:

  olx               params: [{key, value}] list, condition key "repair"
  domRia            characteristics_values: {id: value}, condition id "516"
  realtorUa         main_params: {...}, condition in main_params.status
  realEstateLvivUa  details: {"Ключ": "значення"}, condition in details["Стан"]
  mlsUkraine        params: {key: value} object

extract_primary_data() turns any of them into one NormalizedPrimaryData.
Broken input (non-dict payloads, unparseable numbers) yields None fields.
"""
import logging
import re
from typing import Any, Callable, Dict, Optional

from valuation.models.listing import RealtyPlatform, UnifiedListing
from valuation.schemas.listing import NormalizedPrimaryData

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")


# ── Helpers ────────────────────────────────────────────────────────────────────

def to_float(value: Any) -> Optional[float]:
    """Parse numbers such as 55, "55,5 м²" or {"value": 55}; None if impossible."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, dict):
        return to_float(value.get("value"))
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(" ", "").replace(" ", ""))
        if match:
            return float(match.group(0).replace(",", "."))
    return None


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        # Multilingual {"uk": ..., "ru": ...}
        return _to_text(value.get("uk")) or _to_text(value.get("ru"))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _olx_param(params: Any, key: str) -> Any:
    if not isinstance(params, list):
        return None
    for param in params:
        if isinstance(param, dict) and param.get("key") == key:
            value = param.get("value")
            return value if value is not None else param.get("normalizedValue")
    return None


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key)
    return section if isinstance(section, dict) else {}


# ── Adapters ───────────────────────────────────────────────────────────────────

def _olx(data: Dict[str, Any]) -> NormalizedPrimaryData:
    params = data.get("params")
    return NormalizedPrimaryData(
        title=_to_text(data.get("title")),
        description=_to_text(data.get("description")),
        price=to_float(data.get("price")),
        area=to_float(_olx_param(params, "total_area")),
        condition_code=_to_text(_olx_param(params, "repair")),
    )


def _dom_ria(data: Dict[str, Any]) -> NormalizedPrimaryData:
    characteristics = _section(data, "characteristics_values")
    return NormalizedPrimaryData(
        title=_to_text(data.get("title")),
        description=_to_text(data.get("description_uk")) or _to_text(data.get("description")),
        price=to_float(data.get("price")),
        area=to_float(data.get("total_square_meters")),
        condition_code=_to_text(characteristics.get("516")),
    )


def _realtor_ua(data: Dict[str, Any]) -> NormalizedPrimaryData:
    main = _section(data, "main_params")
    return NormalizedPrimaryData(
        title=_to_text(data.get("title")),
        description=_to_text(data.get("description")),
        price=to_float(main.get("price") or data.get("price")),
        area=to_float(main.get("total_area")),
        condition_code=_to_text(main.get("status")),
    )


def _real_estate_lviv_ua(data: Dict[str, Any]) -> NormalizedPrimaryData:
    details = _section(data, "details")
    return NormalizedPrimaryData(
        title=_to_text(data.get("title")),
        description=_to_text(data.get("description")),
        price=to_float(data.get("price")),
        area=to_float(details.get("Загальна площа")),
        condition_code=_to_text(details.get("Стан")),
    )


def _mls_ukraine(data: Dict[str, Any]) -> NormalizedPrimaryData:
    params = _section(data, "params")
    return NormalizedPrimaryData(
        title=_to_text(data.get("title")),
        description=_to_text(data.get("description")),
        price=to_float(data.get("price")),
        area=to_float(params.get("total_area")),
        condition_code=_to_text(params.get("condition")),
    )


PLATFORM_ADAPTERS: Dict[str, Callable[[Dict[str, Any]], NormalizedPrimaryData]] = {
    RealtyPlatform.OLX.value: _olx,
    RealtyPlatform.DOM_RIA.value: _dom_ria,
    RealtyPlatform.REALTOR_UA.value: _realtor_ua,
    RealtyPlatform.REAL_ESTATE_LVIV_UA.value: _real_estate_lviv_ua,
    RealtyPlatform.MLS_UKRAINE.value: _mls_ukraine,
}


def extract_primary_data(listing: UnifiedListing) -> NormalizedPrimaryData:
    """
    Normalize the listing's platform payload. Missing fields are filled from
    the listing's own columns; unknown platforms use the columns only.
    """
    data = listing.primary_data if isinstance(listing.primary_data, dict) else {}
    adapter = PLATFORM_ADAPTERS.get(listing.realty_platform or "")

    if adapter and data:
        normalized = adapter(data)
    else:
        normalized = NormalizedPrimaryData(title=_to_text(data.get("title")))

    if normalized.description is None:
        normalized.description = _to_text(listing.description)
    if normalized.price is None:
        normalized.price = listing.price
    if normalized.area is None:
        normalized.area = listing.total_area
    if normalized.condition_code is None:
        normalized.condition_code = listing.condition
    return normalized


def build_search_text(listing: UnifiedListing) -> str:
    """Title plus the Ukrainian and Russian descriptions, space separated."""
    parts = [extract_primary_data(listing).title]
    description = listing.description
    if isinstance(description, dict):
        parts.append(_to_text(description.get("uk")))
        parts.append(_to_text(description.get("ru")))
    else:
        parts.append(_to_text(description))
    return " ".join(p for p in parts if p)
