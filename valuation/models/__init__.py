# Import all models in correct order so foreign keys resolve
from valuation.models.geo import Street, ApartmentComplex
from valuation.models.listing import (
    UnifiedListing,
    SourceType,
    RealtyPlatform,
    DealType,
    RealtyType,
)
from valuation.models.valuation_cache import ValuationCache

__all__ = [
    "Street",
    "ApartmentComplex",
    "UnifiedListing",
    "SourceType",
    "RealtyPlatform",
    "DealType",
    "RealtyType",
    "ValuationCache",
]
