"""
Listing Service
Resolves listings by internal UUID, by (source_type, source_id) or by the
listing's URL on its source site.
"""
import logging
import re
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from valuation.models.listing import SourceType, UnifiedListing

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Strip protocol, leading "www." and the trailing slash."""
    url = re.sub(r"^https?://", "", url.strip(), flags=re.IGNORECASE)
    url = re.sub(r"^www\.", "", url, flags=re.IGNORECASE)
    return re.sub(r"/$", "", url)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ListingService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, listing_id: UUID) -> Optional[UnifiedListing]:
        return self.db.get(UnifiedListing, listing_id)

    def get_by_source(self, source_id: int, source_type: Union[SourceType, str]) -> Optional[UnifiedListing]:
        stmt = select(UnifiedListing).where(
            UnifiedListing.source_type == SourceType(source_type),
            UnifiedListing.source_id == source_id,
        )
        return self.db.execute(stmt).scalars().first()

    def resolve(self, identifier: str, source: Optional[SourceType] = None) -> Optional[UnifiedListing]:
        """
        Find the subject of a valuation request.

        `identifier` is either a listing UUID or a numeric source id. Numeric
        ids are looked up in `source`'s namespace; without a source they are
        tried as aggregator first, then vector.
        """
        identifier = (identifier or "").strip()
        if identifier.isdigit():
            source_id = int(identifier)
            namespaces = [source] if source else [SourceType.AGGREGATOR, SourceType.VECTOR]
            for namespace in namespaces:
                listing = self.get_by_source(source_id, namespace)
                if listing:
                    return listing
            return None

        try:
            listing_id = UUID(identifier)
        except ValueError:
            logger.debug(f"[ListingService] '{identifier}' is neither a UUID nor a source id")
            return None
        return self.get_by_id(listing_id)

    def find_by_external_url(self, url: str) -> Optional[UnifiedListing]:
        normalized = normalize_url(url)
        logger.debug(f"[ListingService] Searching listing by external URL: {normalized}")

        listing = self.db.execute(
            select(UnifiedListing).where(UnifiedListing.external_url == url)
        ).scalars().first()
        if listing:
            return listing

        if not normalized:
            return None
        return self.db.execute(
            select(UnifiedListing)
            .where(UnifiedListing.external_url.ilike(f"%{_escape_like(normalized)}%", escape="\\"))
            .order_by(UnifiedListing.created_at)
        ).scalars().first()

    def search(
        self,
        external_url: Optional[str] = None,
        source_id: Optional[int] = None,
        source_type: Optional[SourceType] = None,
    ) -> Optional[UnifiedListing]:
        if external_url:
            return self.find_by_external_url(external_url)
        if source_id is not None and source_type:
            return self.get_by_source(source_id, source_type)
        return None
