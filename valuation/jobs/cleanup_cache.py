"""
Periodic sweep of expired valuation cache entries.

    python -m valuation.jobs.cleanup_cache
"""
import logging
import sys

from valuation.core.config import settings
from valuation.database import SessionLocal
from valuation.services.valuation_cache import ValuationCacheService

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    db = SessionLocal()
    try:
        removed = ValuationCacheService(db).cleanup_expired()
        logger.info(f"[cleanup_cache] Removed {removed} expired valuation(s)")
        return 0
    except Exception as e:
        db.rollback()
        logger.error(f"[cleanup_cache] Sweep failed: {e}", exc_info=True)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
