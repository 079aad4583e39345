"""
Batch job: link unresolved listings to apartment complexes.

    python -m valuation.jobs.match_complexes --platform olx --realty-type apartment

Run one instance at a time per platform / type: two concurrent runs could
both match the same rows.
"""
import argparse
import logging
import sys

from valuation.core.config import settings
from valuation.database import SessionLocal
from valuation.models.listing import RealtyPlatform, RealtyType
from valuation.services.complex_batch_matcher import ComplexBatchMatcher

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Resolve apartment complexes from listing text")
    parser.add_argument("--platform", default=RealtyPlatform.OLX.value,
                        choices=[p.value for p in RealtyPlatform])
    parser.add_argument("--realty-type", default=RealtyType.APARTMENT.value,
                        choices=[t.value for t in RealtyType])
    parser.add_argument("--page-size", type=int, default=settings.COMPLEX_MATCH_PAGE_SIZE)
    parser.add_argument("--min-score", type=float, default=settings.COMPLEX_MATCH_MIN_SCORE)
    parser.add_argument("--progress-every", type=int, default=settings.COMPLEX_MATCH_PROGRESS_EVERY)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = parse_args(argv)

    db = SessionLocal()
    try:
        matcher = ComplexBatchMatcher(
            db,
            page_size=args.page_size,
            min_score=args.min_score,
            progress_every=args.progress_every,
        )
        stats = matcher.run(args.platform, args.realty_type)
        logger.info(f"[match_complexes] Finished: {stats.model_dump()}")
        return 0
    except Exception as e:
        logger.error(f"[match_complexes] Run aborted: {e}", exc_info=True)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
