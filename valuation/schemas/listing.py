"""
Listing Schemas
"""
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from valuation.models.listing import SourceType


class ListingSearchOut(BaseModel):
    id: UUID
    source_type: SourceType
    source_id: int
    external_url: Optional[str] = None

    model_config = {"from_attributes": True}


class NormalizedPrimaryData(BaseModel):
    """Common field set every platform adapter produces."""
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    area: Optional[float] = None
    condition_code: Optional[str] = None
