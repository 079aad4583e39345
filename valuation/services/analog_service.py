"""
Analog Service
Selects comparable listings ("analogs") for a subject listing.

Search widens scope by scope, collecting unique analogs as it goes:
  building  same apartment complex
  street    same street
  district  same geo (settlement / district)
  city      no geographic filter
and stops once at least MIN_ANALOGS have been collected.

Every scope applies the same comparability rules:
  area   |Δ| <= 5 m² up to 40 m², 10 m² up to 100 m², 25 m² above
  rooms  |Δ| <= 1 for 1-2 rooms, 2 for more
A subject without area (or rooms) skips that rule; otherwise analogs missing
the value are rejected. Re-posts of the subject itself (same building and
unit, area within 2 m², same rooms, price within 5%) are dropped.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from valuation.core.config import settings
from valuation.models.listing import UnifiedListing
from valuation.schemas.valuation import SearchRadius

logger = logging.getLogger(__name__)

DUPLICATE_AREA_DELTA = 2
DUPLICATE_PRICE_RATIO = 0.05


@dataclass
class AnalogsResult:
    analogs: List[UnifiedListing] = field(default_factory=list)
    search_radius: SearchRadius = SearchRadius.CITY
    warning: Optional[str] = None

    @property
    def total_count(self) -> int:
        return len(self.analogs)


def area_tolerance(area: float) -> float:
    if area <= 40:
        return 5
    if area <= 100:
        return 10
    return 25


def rooms_tolerance(rooms: int) -> int:
    return 1 if rooms <= 2 else 2


def is_duplicate(subject: UnifiedListing, candidate: UnifiedListing) -> bool:
    """Same flat listed again, possibly on another platform."""
    if subject.source_type == candidate.source_type and subject.source_id == candidate.source_id:
        return True

    # Without an address there is no building to compare
    if subject.street_id is None or not subject.house_number:
        return False
    same_building = (
        subject.street_id == candidate.street_id
        and subject.house_number == candidate.house_number
    )
    same_unit = (subject.apartment_number or None) == (candidate.apartment_number or None)
    same_area = bool(
        subject.total_area and candidate.total_area
        and abs(subject.total_area - candidate.total_area) <= DUPLICATE_AREA_DELTA
    )
    same_rooms = subject.rooms == candidate.rooms
    same_price = bool(
        subject.price and candidate.price
        and abs(subject.price - candidate.price) / subject.price <= DUPLICATE_PRICE_RATIO
    )
    return same_building and same_unit and same_area and same_rooms and same_price


class AnalogService:
    def __init__(
        self,
        db: Session,
        min_analogs: int = settings.MIN_ANALOGS,
        max_analogs: int = settings.MAX_ANALOGS,
    ):
        self.db = db
        self.min_analogs = min_analogs
        self.max_analogs = max_analogs

    def _scopes(self, subject: UnifiedListing):
        """(radius, extra filter) pairs the subject has data for, narrowest first."""
        scopes = []
        if subject.complex_id is not None:
            scopes.append((SearchRadius.BUILDING, UnifiedListing.complex_id == subject.complex_id))
        if subject.street_id is not None:
            scopes.append((SearchRadius.STREET, UnifiedListing.street_id == subject.street_id))
        if subject.geo_id is not None:
            scopes.append((SearchRadius.DISTRICT, UnifiedListing.geo_id == subject.geo_id))
        scopes.append((SearchRadius.CITY, None))
        return scopes

    def _query_scope(self, subject: UnifiedListing, scope_filter, exclude_ids, limit: int) -> List[UnifiedListing]:
        stmt = select(UnifiedListing).where(
            UnifiedListing.id != subject.id,
            UnifiedListing.is_active.is_(True),
            UnifiedListing.deal_type == subject.deal_type,
            UnifiedListing.realty_type == subject.realty_type,
            UnifiedListing.price.is_not(None),
            UnifiedListing.price > 0,
        )
        if subject.total_area:
            tolerance = area_tolerance(subject.total_area)
            stmt = stmt.where(UnifiedListing.total_area.between(
                subject.total_area - tolerance, subject.total_area + tolerance,
            ))
        if subject.rooms:
            tolerance = rooms_tolerance(subject.rooms)
            stmt = stmt.where(UnifiedListing.rooms.between(
                subject.rooms - tolerance, subject.rooms + tolerance,
            ))
        if scope_filter is not None:
            stmt = stmt.where(scope_filter)
        if exclude_ids:
            stmt = stmt.where(UnifiedListing.id.not_in(list(exclude_ids)))
        stmt = stmt.order_by(UnifiedListing.id).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def find_analogs(self, subject: UnifiedListing) -> AnalogsResult:
        result = AnalogsResult()
        seen = set()

        for radius, scope_filter in self._scopes(subject):
            remaining = self.max_analogs - len(result.analogs)
            if remaining <= 0:
                break
            for analog in self._query_scope(subject, scope_filter, seen, remaining):
                seen.add(analog.id)
                if is_duplicate(subject, analog):
                    logger.debug(f"[AnalogService] Skipping {analog.id}: duplicate of {subject.id}")
                    continue
                result.analogs.append(analog)
            result.search_radius = radius
            if len(result.analogs) >= self.min_analogs:
                break

        if len(result.analogs) < self.min_analogs:
            result.warning = (
                f"Found only {len(result.analogs)} analogs "
                f"(minimum recommended: {self.min_analogs})"
            )
        logger.info(
            f"[AnalogService] Listing {subject.id}: {len(result.analogs)} analogs "
            f"within {result.search_radius.value}"
        )
        return result
