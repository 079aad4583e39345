"""
Valuation Cache Service
Keeps the last valuation report per listing for a fixed TTL (24h default).

  absent -> present (valid) -> present (expired) -> absent

get() treats an expired row as absent and deletes it on the spot;
cleanup_expired() sweeps the rest. Concurrent set() calls for the same
listing are last-write-wins.

Only the raw liquidity breakdown (name -> {score, weight}) is stored;
weighted scores and days to sell are derived again on read.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from valuation.core.config import settings
from valuation.models.valuation_cache import ValuationCache
from valuation.schemas.valuation import (
    AnalogsSummary,
    FairPrice,
    Liquidity,
    LiquidityCriterion,
    PricePerMeter,
    PriceRange,
    PriceVerdict,
    ValuationReport,
)

logger = logging.getLogger(__name__)

DAYS_TO_SELL_BY_LEVEL = {
    "high": 30,
    "medium": 60,
    "low": 120,
}
DEFAULT_DAYS_TO_SELL = 90


# ── Pure helpers ───────────────────────────────────────────────────────────────

def expand_breakdown(breakdown: Optional[Dict[str, Dict[str, Any]]]) -> List[LiquidityCriterion]:
    """{name: {score, weight}} -> criteria list with weighted_score = weight × score."""
    criteria = []
    for name, values in (breakdown or {}).items():
        if not isinstance(values, dict):
            continue
        score = float(values.get("score") or 0)
        weight = float(values.get("weight") or 0)
        criteria.append(LiquidityCriterion(
            name=name,
            score=score,
            weight=weight,
            weighted_score=weight * score,
        ))
    return criteria


def collapse_breakdown(criteria: List[LiquidityCriterion]) -> Dict[str, Dict[str, float]]:
    return {c.name: {"score": c.score, "weight": c.weight} for c in criteria}


def estimate_days_to_sell(level: Optional[str]) -> int:
    return DAYS_TO_SELL_BY_LEVEL.get(level or "", DEFAULT_DAYS_TO_SELL)


class ValuationCacheService:
    def __init__(self, db: Session, ttl_hours: int = settings.VALUATION_CACHE_TTL_HOURS):
        self.db = db
        self.ttl = timedelta(hours=ttl_hours)

    # ==================== Read ====================

    def get(self, listing_id: UUID) -> Optional[ValuationReport]:
        entry = self.db.execute(
            select(ValuationCache).where(ValuationCache.listing_id == listing_id)
        ).scalar_one_or_none()
        if entry is None:
            return None

        if datetime.utcnow() > entry.expires_at:
            logger.info(f"[ValuationCache] Entry for {listing_id} expired at {entry.expires_at}, removing")
            self.db.delete(entry)
            self.db.commit()
            return None

        return self._to_report(entry)

    def _to_report(self, entry: ValuationCache) -> ValuationReport:
        analogs = entry.analogs_data or {}
        fair = entry.fair_price or {}
        liquidity = entry.liquidity or {}
        ppm = fair.get("price_per_meter") or {}
        level = liquidity.get("level")

        fair_price = FairPrice(
            median=fair.get("median", 0),
            average=fair.get("average", 0),
            min=fair.get("min", 0),
            max=fair.get("max", 0),
            q1=fair.get("q1", 0),
            q3=fair.get("q3", 0),
            range=PriceRange(low=fair.get("q1", 0), high=fair.get("q3", 0)),
            price_per_meter=PricePerMeter(median=ppm.get("median", 0), average=ppm.get("average", 0)),
            verdict=fair.get("verdict") or PriceVerdict.IN_MARKET,
            explanation=fair.get("explanation") or "",
            analogs_count=fair.get("analogs_count", analogs.get("count", 0)),
        )

        return ValuationReport(
            analogs=AnalogsSummary(
                count=analogs.get("count", 0),
                analog_ids=analogs.get("analog_ids") or [],
                search_radius=analogs.get("search_radius") or "city",
            ),
            fair_price=fair_price,
            liquidity=Liquidity(
                score=liquidity.get("score", 0),
                level=level or "medium",
                criteria=expand_breakdown(liquidity.get("breakdown")),
                recommendations=liquidity.get("recommendations") or [],
                estimated_days_to_sell=estimate_days_to_sell(level),
            ),
            confidence=analogs.get("confidence", 0),
            notes=analogs.get("notes") or [],
            calculated_at=entry.calculated_at,
            from_cache=True,
        )

    # ==================== Write ====================

    def set(self, listing_id: UUID, report: ValuationReport) -> ValuationCache:
        """Insert or overwrite the entry; expires_at = now + TTL."""
        now = datetime.utcnow()
        fair = report.fair_price

        analogs_data = {
            "count": report.analogs.count,
            "analog_ids": [str(i) for i in report.analogs.analog_ids],
            "search_radius": report.analogs.search_radius.value,
            "confidence": report.confidence,
            "notes": list(report.notes),
        }
        fair_price = {
            "median": fair.median,
            "average": fair.average,
            "min": fair.min,
            "max": fair.max,
            "q1": fair.q1,
            "q3": fair.q3,
            "price_per_meter": {
                "median": fair.price_per_meter.median,
                "average": fair.price_per_meter.average,
            },
            "verdict": fair.verdict.value,
            "explanation": fair.explanation,
            "analogs_count": fair.analogs_count,
        }
        liquidity = {
            "score": report.liquidity.score,
            "level": report.liquidity.level.value,
            "breakdown": collapse_breakdown(report.liquidity.criteria),
            "recommendations": list(report.liquidity.recommendations),
        }

        entry = self.db.execute(
            select(ValuationCache).where(ValuationCache.listing_id == listing_id)
        ).scalar_one_or_none()
        if entry is None:
            entry = ValuationCache(listing_id=listing_id)
            self.db.add(entry)

        entry.analogs_data = analogs_data
        entry.fair_price = fair_price
        entry.liquidity = liquidity
        entry.calculated_at = now
        entry.expires_at = now + self.ttl

        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"[ValuationCache] Stored valuation for {listing_id}, expires {entry.expires_at}")
        return entry

    def invalidate(self, listing_id: UUID) -> bool:
        """Drop the entry for a listing. True when something was deleted."""
        result = self.db.execute(
            delete(ValuationCache).where(ValuationCache.listing_id == listing_id)
        )
        self.db.commit()
        return result.rowcount > 0

    def cleanup_expired(self) -> int:
        result = self.db.execute(
            delete(ValuationCache).where(ValuationCache.expires_at < datetime.utcnow())
        )
        self.db.commit()
        removed = result.rowcount or 0
        if removed:
            logger.info(f"[ValuationCache] Removed {removed} expired entries")
        return removed
