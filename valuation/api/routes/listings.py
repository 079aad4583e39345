"""
Listing Routes

Endpoints:
  GET /api/v1/listings/search?external_url=...                 -> by URL on the source site
  GET /api/v1/listings/search?source_id=...&source_type=...    -> by source identity
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from valuation.database import get_db
from valuation.models.listing import SourceType
from valuation.schemas.listing import ListingSearchOut
from valuation.services.listing_service import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Listings"])


@router.get("/search", response_model=ListingSearchOut)
def search_listing(
    external_url: Optional[str] = Query(None, description="Listing URL, protocol and www optional"),
    source_id: Optional[int] = Query(None),
    source_type: Optional[SourceType] = Query(None),
    db: Session = Depends(get_db),
):
    """Exact URL match first, then a case-insensitive partial match."""
    try:
        listing = ListingService(db).search(
            external_url=external_url,
            source_id=source_id,
            source_type=source_type,
        )
    except Exception as e:
        logger.error(f"[listings] search failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search listings.",
        )

    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return listing
