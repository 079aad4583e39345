"""
Liquidity Service
Liquidity score (0–10) = Σ(score × weight) / Σ(weight) over the criteria,
rounded to one decimal; 5.0 when no criterion has data.

Levels: high >= 7, medium >= 5, low otherwise.
Days to sell: median days for the realty type, scaled by
  2 − score / 10 × 1.5   (score 10 -> ×0.5, score 0 -> ×2)
and clamped to 7..180.

Criteria without data return weight 0 so they do not move the score.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

from valuation.models.listing import UnifiedListing
from valuation.schemas.valuation import FairPrice, Liquidity, LiquidityCriterion, LiquidityLevel
from valuation.services.statistics import round_half_up

logger = logging.getLogger(__name__)

LIQUIDITY_WEIGHTS: Dict[str, float] = {
    "price": 0.23,
    "price_per_meter": 0.10,
}

MEDIAN_DAYS_TO_SELL: Dict[str, int] = {
    "apartment": 30,
    "house": 58,
    "commercial": 51,
    "area": 68,
    "room": 30,
    "garage": 45,
    "default": 45,
}

RECOMMENDATIONS: Dict[str, str] = {
    "price": "Розгляньте можливість зниження ціни для швидшого продажу",
    "price_per_meter": "Ціна за м² вища за ринкову - розгляньте коригування",
}

WEAK_CRITERION_SCORE = 5


# ── Helpers ────────────────────────────────────────────────────────────────────

def _criterion(name: str, score: float, explanation: Optional[str] = None) -> LiquidityCriterion:
    score = max(0.0, min(10.0, score))
    weight = LIQUIDITY_WEIGHTS[name]
    return LiquidityCriterion(
        name=name,
        weight=weight,
        score=score,
        weighted_score=weight * score,
        explanation=explanation,
    )


def _null_criterion(name: str, explanation: str) -> LiquidityCriterion:
    """No data: zero weight, does not affect the score."""
    return LiquidityCriterion(name=name, weight=0, score=0, weighted_score=0, explanation=explanation)


def _ratio_score(ratio: float, steps) -> float:
    for limit, score in steps:
        if ratio <= limit:
            return score
    return steps[-1][1]


def level_for_score(score: float) -> LiquidityLevel:
    if score >= 7:
        return LiquidityLevel.HIGH
    if score >= 5:
        return LiquidityLevel.MEDIUM
    return LiquidityLevel.LOW


def estimate_days_from_score(score: float, realty_type: Optional[str]) -> int:
    base = MEDIAN_DAYS_TO_SELL.get(realty_type or "default", MEDIAN_DAYS_TO_SELL["default"])
    days = round_half_up(base * (2 - score / 10 * 1.5))
    return max(7, min(180, days))


# ── Criteria ───────────────────────────────────────────────────────────────────

def price_criterion(
    subject: UnifiedListing,
    fair_price: Optional[FairPrice],
    analogs: Sequence[UnifiedListing],
) -> LiquidityCriterion:
    """Cheaper than the analogs is better: 10 × (xmax − x) / (xmax − xmin)."""
    if not subject.price:
        return _null_criterion("price", "Немає даних про ціну об'єкта")
    price = float(subject.price)

    prices = [float(a.price) for a in analogs if a.price and a.price > 0]
    if prices:
        xmin, xmax = min(prices), max(prices)
        if xmax == xmin:
            return _criterion("price", 10 if price <= xmin else 0, "Аналоги мають однакову ціну")
        position = max(0.0, min(1.0, (xmax - price) / (xmax - xmin)))
        return _criterion("price", 10 * position, f"Ціна {price:.0f} серед аналогів ({xmin:.0f}-{xmax:.0f})")

    if not fair_price or not fair_price.median:
        return _null_criterion("price", "Немає даних про ринкову ціну аналогів")

    ratio = price / fair_price.median
    score = _ratio_score(ratio, [(0.85, 10), (0.95, 8), (1.05, 6), (1.15, 4), (1.3, 2), (float("inf"), 0)])
    return _criterion("price", score, f"Ціна становить {ratio * 100:.0f}% від медіани ринку")


def price_per_meter_criterion(
    subject: UnifiedListing,
    fair_price: Optional[FairPrice],
    analogs: Sequence[UnifiedListing],
) -> LiquidityCriterion:
    if not fair_price or not fair_price.price_per_meter.median:
        return _null_criterion("price_per_meter", "Немає даних про ціну за м² аналогів")
    if not subject.price or not subject.total_area:
        return _null_criterion("price_per_meter", "Немає даних про ціну або площу об'єкта")

    subject_ppm = subject.price / subject.total_area
    market_ppm = fair_price.price_per_meter.median
    ratio = subject_ppm / market_ppm
    score = _ratio_score(ratio, [(0.85, 10), (0.95, 9), (1.05, 7), (1.15, 5), (1.25, 3), (float("inf"), 2)])
    return _criterion(
        "price_per_meter",
        score,
        f"Ціна за м² ({subject_ppm:.0f}) проти ринкової ({market_ppm:.0f})",
    )


CRITERIA: List[Callable[..., LiquidityCriterion]] = [
    price_criterion,
    price_per_meter_criterion,
]


class LiquidityService:
    def __init__(self, criteria: Optional[List[Callable[..., LiquidityCriterion]]] = None):
        self.criteria = criteria or CRITERIA

    def calculate(
        self,
        subject: UnifiedListing,
        fair_price: Optional[FairPrice] = None,
        analogs: Sequence[UnifiedListing] = (),
    ) -> Liquidity:
        results = [criterion(subject, fair_price, analogs) for criterion in self.criteria]

        total_weight = sum(c.weight for c in results)
        weighted_sum = sum(c.weighted_score for c in results)
        score = round(weighted_sum / total_weight, 1) if total_weight > 0 else 5.0

        recommendations = [
            RECOMMENDATIONS[c.name]
            for c in results
            if c.weight > 0 and c.score < WEAK_CRITERION_SCORE and c.name in RECOMMENDATIONS
        ]

        realty_type = getattr(subject.realty_type, "value", subject.realty_type)
        return Liquidity(
            score=score,
            level=level_for_score(score),
            criteria=results,
            recommendations=recommendations,
            estimated_days_to_sell=estimate_days_from_score(score, realty_type),
        )
