"""
Valuation Schemas
Pydantic models for fair price, liquidity and the full valuation report.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PriceVerdict(str, Enum):
    CHEAP = "cheap"
    IN_MARKET = "in_market"
    EXPENSIVE = "expensive"


class LiquidityLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SearchRadius(str, Enum):
    BUILDING = "building"
    STREET = "street"
    DISTRICT = "district"
    CITY = "city"


# ── Statistics ─────────────────────────────────────────────────────────────────

class PriceStatistics(BaseModel):
    median: float = 0
    average: float = 0
    min: float = 0
    max: float = 0
    q1: float = 0
    q3: float = 0
    iqr: float = 0
    count: int = 0


class OutlierResult(BaseModel):
    filtered: List[float] = []
    removed: List[float] = []


# ── Fair price ─────────────────────────────────────────────────────────────────

class PricePerMeter(BaseModel):
    median: float = 0
    average: float = 0


class PriceRange(BaseModel):
    low: float = 0     # q1
    high: float = 0    # q3


class FairPrice(BaseModel):
    median: float = 0
    average: float = 0
    min: float = 0
    max: float = 0
    q1: float = 0
    q3: float = 0
    range: PriceRange = Field(default_factory=PriceRange)
    price_per_meter: PricePerMeter = Field(default_factory=PricePerMeter)
    verdict: PriceVerdict = PriceVerdict.IN_MARKET
    explanation: str = ""
    analogs_count: int = 0


# ── Liquidity ──────────────────────────────────────────────────────────────────

class LiquidityCriterion(BaseModel):
    name: str
    weight: float
    score: float                   # 0–10
    weighted_score: float          # weight × score, never stored
    explanation: Optional[str] = None


class Liquidity(BaseModel):
    score: float = 0               # 0–10, one decimal
    level: LiquidityLevel = LiquidityLevel.MEDIUM
    criteria: List[LiquidityCriterion] = []
    recommendations: List[str] = []
    estimated_days_to_sell: int = 90


# ── Report ─────────────────────────────────────────────────────────────────────

class PropertyInfo(BaseModel):
    id: UUID
    source_type: str
    source_id: int
    realty_type: Optional[str] = None
    deal_type: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    total_area: Optional[float] = None
    rooms: Optional[int] = None
    complex_id: Optional[int] = None
    street_id: Optional[int] = None


class AnalogsSummary(BaseModel):
    count: int = 0
    analog_ids: List[UUID] = []
    search_radius: SearchRadius = SearchRadius.CITY


class ValuationReport(BaseModel):
    property: Optional[PropertyInfo] = None
    analogs: AnalogsSummary = Field(default_factory=AnalogsSummary)
    fair_price: FairPrice = Field(default_factory=FairPrice)
    liquidity: Liquidity = Field(default_factory=Liquidity)
    confidence: float = 0
    notes: List[str] = []
    calculated_at: Optional[datetime] = None
    from_cache: bool = False


class FairPriceResponse(BaseModel):
    """Payload of GET /valuation/{id}/fair-price."""
    listing_id: UUID
    price: Optional[float] = None
    fair_price: FairPrice
    analogs: AnalogsSummary
