"""
Unified Listing Model
One row per listing synced from a source (CRM or aggregator platform).
Platform-specific raw attributes live in `primary_data`; the multilingual
description in `description` ({"uk": ..., "ru": ..., "en": ...}).
"""
import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Column, String, Integer, Float, Text, DateTime, Boolean,
    ForeignKey, Enum, JSON, Index, Uuid
)
from sqlalchemy.orm import relationship

from valuation.db.base import Base


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# ── Enums ──────────────────────────────────────────────────────────────────────

class SourceType(str, PyEnum):
    VECTOR = "vector"
    AGGREGATOR = "aggregator"
    VECTOR_CRM = "vector_crm"


class RealtyPlatform(str, PyEnum):
    OLX = "olx"
    DOM_RIA = "domRia"
    REALTOR_UA = "realtorUa"
    REAL_ESTATE_LVIV_UA = "realEstateLvivUa"
    MLS_UKRAINE = "mlsUkraine"


class DealType(str, PyEnum):
    SELL = "sell"
    RENT = "rent"


class RealtyType(str, PyEnum):
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    AREA = "area"
    ROOM = "room"
    GARAGE = "garage"


# ── Models ─────────────────────────────────────────────────────────────────────

class UnifiedListing(Base):
    __tablename__ = "unified_listings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Source
    source_type = Column(
        Enum(SourceType, name="sourcetype", values_callable=_enum_values),
        nullable=False,
    )
    source_id = Column(Integer, nullable=False)
    realty_platform = Column(String(50), nullable=True, index=True)   # olx, domRia, ... (aggregator only)

    deal_type = Column(
        Enum(DealType, name="dealtype", values_callable=_enum_values),
        nullable=False,
        default=DealType.SELL,
    )
    realty_type = Column(
        Enum(RealtyType, name="realtytype", values_callable=_enum_values),
        nullable=False,
        default=RealtyType.APARTMENT,
    )

    # Geography
    geo_id = Column(Integer, nullable=True)
    street_id = Column(Integer, ForeignKey("streets.id", ondelete="SET NULL"), nullable=True)
    complex_id = Column(Integer, ForeignKey("apartment_complexes.id", ondelete="SET NULL"), nullable=True)
    house_number = Column(String(50), nullable=True)
    apartment_number = Column(String(50), nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    # Price
    price = Column(Float, nullable=True)
    currency = Column(String(10), nullable=False, default="USD")
    price_per_meter = Column(Float, nullable=True)

    # Characteristics
    total_area = Column(Float, nullable=True)
    rooms = Column(Integer, nullable=True)
    floor = Column(Integer, nullable=True)
    total_floors = Column(Integer, nullable=True)
    condition = Column(String(255), nullable=True)

    # Semi-structured source data (compatible with SQLite + PostgreSQL)
    primary_data = Column(JSON, nullable=True)
    description = Column(JSON, nullable=True)

    external_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    street = relationship("Street")
    complex = relationship("ApartmentComplex")

    __table_args__ = (
        Index("ix_unified_listings_source", "source_type", "source_id", unique=True),
        Index("ix_unified_listings_realty_deal", "realty_type", "deal_type"),
        Index("ix_unified_listings_complex", "complex_id"),
        Index("ix_unified_listings_geo_street", "geo_id", "street_id"),
    )
