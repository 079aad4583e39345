"""
Fair Price Service
Assembles the fair-price block of a valuation from analog prices:
analog prices -> OutlierFilter -> StatisticsEngine -> PriceVerdictClassifier.

Price per meter is taken from the stored value when it is plausible, else
derived as price / area. Values of 500 000 and above are placeholders
(e.g. land plots without an area) and are dropped.
"""
import logging
from typing import Iterable, List, Optional

from valuation.models.listing import UnifiedListing
from valuation.schemas.valuation import FairPrice, PricePerMeter, PriceRange, PriceStatistics
from valuation.services.outlier_filter import OutlierFilter
from valuation.services.price_verdict import PriceVerdictClassifier
from valuation.services.statistics import StatisticsEngine, round_half_up

logger = logging.getLogger(__name__)

MAX_REASONABLE_PRICE_PER_METER = 500_000


def price_per_meter(listing: UnifiedListing) -> Optional[float]:
    """Plausible price per m² of a listing, or None."""
    stored = listing.price_per_meter
    if stored is not None and 0 < stored < MAX_REASONABLE_PRICE_PER_METER:
        return float(stored)

    if listing.price and listing.total_area and listing.price > 0 and listing.total_area > 0:
        derived = round_half_up(listing.price / listing.total_area)
        if derived < MAX_REASONABLE_PRICE_PER_METER:
            return float(derived)
    return None


class FairPriceService:
    def __init__(
        self,
        statistics: Optional[StatisticsEngine] = None,
        outlier_filter: Optional[OutlierFilter] = None,
        verdict: Optional[PriceVerdictClassifier] = None,
    ):
        self.statistics = statistics or StatisticsEngine()
        self.outlier_filter = outlier_filter or OutlierFilter(self.statistics)
        self.verdict = verdict or PriceVerdictClassifier()

    def calculate(self, subject_price: Optional[float], prices: List[float], prices_per_meter: List[float]) -> FairPrice:
        """Fair price from raw price samples (no outlier filtering done yet)."""
        filtered_prices = self.outlier_filter.filter_outliers(prices).filtered
        filtered_ppm = self.outlier_filter.filter_outliers(prices_per_meter).filtered

        stats: PriceStatistics = self.statistics.calculate(filtered_prices)
        ppm_stats: PriceStatistics = self.statistics.calculate(filtered_ppm)

        verdict = self.verdict.classify(subject_price, stats)
        return FairPrice(
            median=stats.median,
            average=stats.average,
            min=stats.min,
            max=stats.max,
            q1=stats.q1,
            q3=stats.q3,
            range=PriceRange(low=stats.q1, high=stats.q3),
            price_per_meter=PricePerMeter(median=ppm_stats.median, average=ppm_stats.average),
            verdict=verdict,
            explanation=self.verdict.explain(verdict, subject_price, stats),
            analogs_count=len(filtered_prices),
        )

    def calculate_from_analogs(self, subject: UnifiedListing, analogs: Iterable[UnifiedListing]) -> FairPrice:
        analogs = list(analogs)
        prices = [a.price for a in analogs if a.price is not None and a.price > 0]
        per_meter = [ppm for ppm in (price_per_meter(a) for a in analogs) if ppm is not None]

        if len(per_meter) < len(analogs):
            logger.debug(
                f"[FairPriceService] Listing {subject.id}: "
                f"{len(analogs) - len(per_meter)} analogs without a usable price per m²"
            )
        return self.calculate(subject.price, prices, per_meter)
