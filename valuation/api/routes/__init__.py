from valuation.api.routes.valuation import router as valuation_router
from valuation.api.routes.listings import router as listings_router

__all__ = [
    "valuation_router",
    "listings_router",
]
