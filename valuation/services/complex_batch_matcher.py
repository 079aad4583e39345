"""
Complex Batch Matcher
Links unresolved listings (complex_id IS NULL) of one platform / realty type
to apartment complexes by searching their title and descriptions.

Pages are processed strictly one after another. Each page's matches are
written with a single bulk UPDATE and committed, so an interrupted run keeps
every finished page and can simply be started again: resolved rows no longer
satisfy the filter.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from valuation.core.config import settings
from valuation.models.geo import ApartmentComplex
from valuation.models.listing import RealtyType, UnifiedListing
from valuation.schemas.matching import BatchMatchStats
from valuation.services.complex_matcher import ComplexMatcher
from valuation.services.primary_data import build_search_text

logger = logging.getLogger(__name__)

MIN_SEARCH_TEXT_LENGTH = 10


class ComplexBatchMatcher:
    def __init__(
        self,
        db: Session,
        matcher: Optional[ComplexMatcher] = None,
        page_size: int = settings.COMPLEX_MATCH_PAGE_SIZE,
        min_score: float = settings.COMPLEX_MATCH_MIN_SCORE,
        progress_every: int = settings.COMPLEX_MATCH_PROGRESS_EVERY,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.db = db
        self.matcher = matcher
        self.page_size = page_size
        self.min_score = min_score
        self.progress_every = max(progress_every, 1)

    def _load_matcher(self) -> ComplexMatcher:
        complexes = self.db.execute(select(ApartmentComplex)).scalars().all()
        return ComplexMatcher(complexes)

    def _fetch_page(self, realty_platform: str, realty_type: RealtyType, offset: int) -> List[UnifiedListing]:
        stmt = (
            select(UnifiedListing)
            .where(
                UnifiedListing.realty_platform == realty_platform,
                UnifiedListing.realty_type == realty_type,
                UnifiedListing.complex_id.is_(None),
            )
            .order_by(UnifiedListing.id)
            .limit(self.page_size)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars().all())

    def _apply_matches(self, matches: List[dict]) -> None:
        if not matches:
            return
        self.db.execute(update(UnifiedListing), matches)
        self.db.commit()

    def run(self, realty_platform: str = "olx", realty_type: str = "apartment") -> BatchMatchStats:
        """
        Resolve every unresolved listing of the given platform and type.
        Database errors roll back the current page and propagate.
        """
        realty_type = RealtyType(realty_type)
        if self.matcher is None:
            self.matcher = self._load_matcher()

        stats = BatchMatchStats()
        if len(self.matcher) == 0:
            logger.warning("[ComplexBatchMatcher] No complexes to match against, nothing to do")
            return stats

        logger.info(
            f"[ComplexBatchMatcher] Start: platform={realty_platform} type={realty_type.value} "
            f"page_size={self.page_size} min_score={self.min_score}"
        )

        offset = 0
        next_report = self.progress_every
        while True:
            try:
                rows = self._fetch_page(realty_platform, realty_type, offset)
                if not rows:
                    break

                matches = []
                for listing in rows:
                    text = build_search_text(listing)
                    if len(text) < MIN_SEARCH_TEXT_LENGTH:
                        stats.skipped += 1
                        continue
                    found = self.matcher.find_complex_in_text(text, min_score=self.min_score)
                    if found:
                        matches.append({"id": listing.id, "complex_id": found.complex_id})

                self._apply_matches(matches)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"[ComplexBatchMatcher] Page at offset {offset} failed: {e}", exc_info=True
                )
                raise

            stats.pages += 1
            stats.processed += len(rows)
            stats.matched += len(matches)

            last_page = len(rows) < self.page_size
            if stats.processed >= next_report or last_page:
                logger.info(
                    f"[ComplexBatchMatcher] Progress: processed={stats.processed} "
                    f"matched={stats.matched} skipped={stats.skipped}"
                )
                while next_report <= stats.processed:
                    next_report += self.progress_every

            if last_page:
                break
            # Matched rows drop out of the filter; only unresolved ones shift the window
            offset += len(rows) - len(matches)

        logger.info(
            f"[ComplexBatchMatcher] Done: processed={stats.processed} matched={stats.matched} "
            f"pages={stats.pages}"
        )
        return stats
