"""
Valuation Routes
Fair price and full valuation reports for a listing.

Endpoints:
  GET    /api/v1/valuation/{id}/fair-price   -> fair price over the analog pool
  GET    /api/v1/valuation/{id}/full         -> fair price + liquidity (cached 24h)
  DELETE /api/v1/valuation/{id}/cache        -> drop the cached report

{id} is a listing UUID or a numeric source id; `source` picks the source
namespace for numeric ids.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from valuation.database import get_db
from valuation.models.listing import SourceType, UnifiedListing
from valuation.schemas.valuation import AnalogsSummary, FairPriceResponse, ValuationReport
from valuation.services.listing_service import ListingService
from valuation.services.valuation_cache import ValuationCacheService
from valuation.services.valuation_service import ValuationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Valuation"])


# ── Helpers ────────────────────────────────────────────────────────────────────

def _get_subject_or_404(db: Session, listing_id: str, source: Optional[SourceType]) -> UnifiedListing:
    subject = ListingService(db).resolve(listing_id, source)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Listing {listing_id} not found",
        )
    return subject


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("/{listing_id}/fair-price", response_model=FairPriceResponse)
def get_fair_price(
    listing_id: str,
    source: SourceType = Query(SourceType.VECTOR, description="Source namespace for numeric ids"),
    db: Session = Depends(get_db),
):
    """
    Median / quartiles of comparable listings after IQR outlier removal,
    the price per m² and the cheap / in_market / expensive verdict.
    """
    try:
        subject = _get_subject_or_404(db, listing_id, source)
        fair_price, found = ValuationService(db).get_fair_price(subject)
        return FairPriceResponse(
            listing_id=subject.id,
            price=subject.price,
            fair_price=fair_price,
            analogs=AnalogsSummary(
                count=found.total_count,
                analog_ids=[a.id for a in found.analogs],
                search_radius=found.search_radius,
            ),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[valuation] fair-price for {listing_id} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate fair price. Please try again.",
        )


@router.get("/{listing_id}/full", response_model=ValuationReport)
def get_full_report(
    listing_id: str,
    source: Optional[SourceType] = Query(None, description="Source namespace for numeric ids"),
    refresh: bool = Query(False, description="Ignore the cached report"),
    db: Session = Depends(get_db),
):
    """Fair price, liquidity, confidence and notes. Served from cache while fresh."""
    try:
        subject = _get_subject_or_404(db, listing_id, source)
        return ValuationService(db).get_full_report(subject, force_refresh=refresh)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[valuation] full report for {listing_id} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build valuation report. Please try again.",
        )


@router.delete("/{listing_id}/cache")
def invalidate_cache(
    listing_id: str,
    source: Optional[SourceType] = Query(None),
    db: Session = Depends(get_db),
):
    try:
        subject = _get_subject_or_404(db, listing_id, source)
        removed = ValuationCacheService(db).invalidate(subject.id)
        return {"success": True, "listing_id": str(subject.id), "removed": removed}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[valuation] cache invalidation for {listing_id} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to invalidate cached valuation.",
        )
