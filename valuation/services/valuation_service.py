"""
Valuation Service
Composition root of a valuation:

  AnalogService -> FairPriceService (OutlierFilter, StatisticsEngine,
  PriceVerdictClassifier) -> LiquidityService -> ValuationCacheService

Reports are served from the cache while fresh; force_refresh recomputes.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from valuation.models.listing import UnifiedListing
from valuation.schemas.valuation import (
    AnalogsSummary,
    FairPrice,
    PropertyInfo,
    ValuationReport,
)
from valuation.services.analog_service import AnalogsResult, AnalogService
from valuation.services.fair_price_service import FairPriceService
from valuation.services.liquidity_service import LiquidityService
from valuation.services.valuation_cache import ValuationCacheService

logger = logging.getLogger(__name__)

LOW_ANALOGS_THRESHOLD = 7

# (minimum filtered analogs, confidence), checked top-down
CONFIDENCE_STEPS = [
    (15, 0.95),
    (10, 0.85),
    (7, 0.75),
    (5, 0.6),
    (3, 0.4),
]


def confidence_for(filtered_analogs: int) -> float:
    for minimum, confidence in CONFIDENCE_STEPS:
        if filtered_analogs >= minimum:
            return confidence
    return 0.2


def build_property_info(listing: UnifiedListing) -> PropertyInfo:
    return PropertyInfo(
        id=listing.id,
        source_type=getattr(listing.source_type, "value", listing.source_type),
        source_id=listing.source_id,
        realty_type=getattr(listing.realty_type, "value", listing.realty_type),
        deal_type=getattr(listing.deal_type, "value", listing.deal_type),
        price=listing.price,
        currency=listing.currency,
        total_area=listing.total_area,
        rooms=listing.rooms,
        complex_id=listing.complex_id,
        street_id=listing.street_id,
    )


class ValuationService:
    def __init__(
        self,
        db: Session,
        analogs: Optional[AnalogService] = None,
        fair_price: Optional[FairPriceService] = None,
        liquidity: Optional[LiquidityService] = None,
        cache: Optional[ValuationCacheService] = None,
    ):
        self.db = db
        self.analogs = analogs or AnalogService(db)
        self.fair_price = fair_price or FairPriceService()
        self.liquidity = liquidity or LiquidityService()
        self.cache = cache or ValuationCacheService(db)

    def get_fair_price(self, subject: UnifiedListing):
        """Fair price only, always computed fresh. Returns (FairPrice, AnalogsResult)."""
        found = self.analogs.find_analogs(subject)
        return self.fair_price.calculate_from_analogs(subject, found.analogs), found

    def get_full_report(self, subject: UnifiedListing, force_refresh: bool = False) -> ValuationReport:
        if not force_refresh:
            cached = self.cache.get(subject.id)
            if cached:
                logger.debug(f"[ValuationService] Cache hit for listing {subject.id}")
                cached.property = build_property_info(subject)
                return cached

        report = self.generate_report(subject)
        self.cache.set(subject.id, report)
        return report

    def generate_report(self, subject: UnifiedListing) -> ValuationReport:
        fair_price, found = self.get_fair_price(subject)
        liquidity = self.liquidity.calculate(subject, fair_price, found.analogs)

        report = ValuationReport(
            property=build_property_info(subject),
            analogs=AnalogsSummary(
                count=found.total_count,
                analog_ids=[a.id for a in found.analogs],
                search_radius=found.search_radius,
            ),
            fair_price=fair_price,
            liquidity=liquidity,
            confidence=confidence_for(fair_price.analogs_count),
            notes=self._notes(subject, found, fair_price),
            calculated_at=datetime.utcnow(),
        )
        logger.info(
            f"[ValuationService] Listing {subject.id}: median={fair_price.median} "
            f"verdict={fair_price.verdict.value} liquidity={liquidity.score} "
            f"confidence={report.confidence}"
        )
        return report

    @staticmethod
    def _notes(subject: UnifiedListing, found: AnalogsResult, fair_price: FairPrice) -> List[str]:
        notes = []
        if found.warning:
            notes.append(found.warning)
        if fair_price.analogs_count < LOW_ANALOGS_THRESHOLD:
            notes.append("Низька кількість аналогів може впливати на точність оцінки")
        if not subject.total_area:
            notes.append("Площа об'єкта не вказана - оцінка може бути неточною")
        if not subject.price:
            notes.append("Ціна об'єкта не вказана")
        return notes
