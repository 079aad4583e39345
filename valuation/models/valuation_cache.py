"""
Valuation Cache Model
Stores the last computed valuation report per listing.
One row per listing_id. Upserted by ValuationCacheService.set().

expires_at = calculated_at + TTL (24h by default). A row read after
expires_at is treated as absent and deleted on the spot.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, JSON, Uuid

from valuation.db.base import Base


class ValuationCache(Base):
    __tablename__ = "valuation_cache"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id = Column(
        Uuid,
        ForeignKey("unified_listings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # Format: {"count": 12, "analog_ids": ["..."], "search_radius": "street"}
    analogs_data = Column(JSON, nullable=False)

    # Format: {"median": .., "average": .., "min": .., "max": .., "q1": .., "q3": ..,
    #          "price_per_meter": {"median": .., "average": ..}, "verdict": "in_market",
    #          "explanation": "..."}
    fair_price = Column(JSON, nullable=False)

    # Format: {"score": 6.4, "level": "medium",
    #          "breakdown": {"price": {"score": 7.0, "weight": 0.23}, ...}}
    liquidity = Column(JSON, nullable=False)

    calculated_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)
