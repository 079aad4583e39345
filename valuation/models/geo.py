"""
Geo Reference Models
Streets and apartment complexes are reference data owned by the geo sync;
this service only reads them for matching.
"""
from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, DateTime, JSON

from valuation.db.base import Base


class Street(Base):
    """
    A street with its name variants per language.
    names_uk / names_ru are ordered lists: index 0 is the current name,
    the rest are historical names (renamed streets).
    """
    __tablename__ = "streets"

    id = Column(Integer, primary_key=True)
    geo_id = Column(Integer, nullable=True, index=True)

    names_uk = Column(JSON, nullable=False, default=list)   # ["Шевченка", "Леніна"]
    names_ru = Column(JSON, nullable=False, default=list)

    synced_at = Column(DateTime, default=datetime.utcnow)


class ApartmentComplex(Base):
    __tablename__ = "apartment_complexes"

    id = Column(Integer, primary_key=True)
    name_uk = Column(String(255), nullable=True)
    name_ru = Column(String(255), nullable=True)
    name_en = Column(String(255), nullable=True)

    geo_id = Column(Integer, nullable=True, index=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    synced_at = Column(DateTime, default=datetime.utcnow)
