"""
Listing ranker: fetches candidate listings and, for activity sorts, their bulk
counts, then delegates ordering and pagination to ranking.stages.listings.
"""

import logging
from typing import List, Optional

from ranking.errors import EngineFailure, RankingError
from ranking.models import Listing, RankedListing, RankingConfig, RelevanceWeights, resolve_config
from ranking.stages.listings import RELEVANCE, needs_activity, rank_listings

from .content_provider import ContentProvider
from .tracker import ActivityTracker

logger = logging.getLogger(__name__)


class ListingRanker:
    def __init__(
        self,
        content: ContentProvider,
        tracker: ActivityTracker,
        config: Optional[RankingConfig] = None,
    ):
        self._content = content
        self._tracker = tracker
        self._config = resolve_config(config)

    async def rank(
        self,
        sort_by: str = RELEVANCE,
        page: int = 1,
        page_size: Optional[int] = None,
        category: Optional[str] = None,
        listings: Optional[List[Listing]] = None,
        weights: Optional[RelevanceWeights] = None,
    ) -> List[RankedListing]:
        """
        Rank active listings (or the given candidates). Activity sorts read
        bulk counts for at most max_bulk_ids of the newest candidates.
        """
        try:
            candidates = listings
            if candidates is None:
                candidates = await self._content.get_listings(status="Active", category=category)
            counts_by_id = None
            if needs_activity(sort_by) and candidates:
                limit = self._config.max_bulk_ids
                if len(candidates) > limit:
                    logger.warning(
                        "[listings] CANDIDATES_TRUNCATED count=%d limit=%d", len(candidates), limit
                    )
                    candidates = sorted(candidates, key=lambda x: x.created_at, reverse=True)[:limit]
                counts_by_id = await self._tracker.bulk_counts([x.id for x in candidates])
        except RankingError:
            raise
        except Exception as exc:
            logger.exception("[listings] STORAGE_FAILURE sort_by=%s", sort_by)
            raise EngineFailure("listing ranking failed") from exc
        return rank_listings(
            candidates,
            counts_by_id,
            sort_by=sort_by,
            page=page,
            page_size=page_size,
            weights=weights or self._config.relevance_weights,
        )

    async def recommendations(self, limit: int = 10) -> List[RankedListing]:
        """Top active listings by relevance."""
        return await self.rank(sort_by=RELEVANCE, page=1, page_size=limit)
