"""
Activity tracker: validated, deduplicated listing event admission plus the
aggregate reads the marketplace ranks by.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ranking.errors import ValidationError
from ranking.models import (
    EVENT_TYPES,
    ActivityCounts,
    ActivityEvent,
    BulkTrackError,
    BulkTrackResult,
    RankingConfig,
    TrackResult,
    resolve_config,
)
from ranking.stages import relevance_score

from .activity_store import ActivityStore

logger = logging.getLogger(__name__)

TIMEFRAMES = {
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}
DEFAULT_TIMEFRAME = "7d"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_event_type(event_type: Optional[str]) -> str:
    if event_type not in EVENT_TYPES:
        raise ValidationError(
            f"Invalid activity type {event_type!r}. Must be one of: {', '.join(EVENT_TYPES)}"
        )
    return event_type


class ActivityTracker:
    def __init__(
        self,
        store: ActivityStore,
        config: Optional[RankingConfig] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._store = store
        self._config = resolve_config(config)
        self._clock = clock

    @property
    def dedup_window(self) -> timedelta:
        return timedelta(seconds=self._config.dedup_window_seconds)

    async def track(
        self,
        listing_id: Optional[str],
        user_id: Optional[str],
        event_type: Optional[str],
        metadata: Optional[Dict[str, Any]] = None,
        timestamp: Optional[datetime] = None,
    ) -> TrackResult:
        """
        Admit one event. A duplicate of an event inside the dedup window
        returns TrackResult.suppressed(); bad input raises ValidationError.
        """
        if not listing_id or not user_id or not event_type:
            raise ValidationError("Missing required fields: listing_id, user_id, event_type")
        validate_event_type(event_type)
        if metadata is not None and not isinstance(metadata, dict):
            raise ValidationError("metadata must be an object")
        ts = timestamp or self._clock()
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        event = ActivityEvent(
            listing_id=str(listing_id),
            user_id=str(user_id),
            event_type=event_type,
            timestamp=ts,
            metadata=metadata or {},
        )
        if not await self._store.admit(event, self.dedup_window):
            logger.info(
                "[tracker] SUPPRESSED listing_id=%s user_id=%s type=%s",
                listing_id, user_id, event_type,
            )
            return TrackResult.suppressed()
        return TrackResult(admitted=True, event=event)

    async def track_bulk(self, items: List[Any]) -> BulkTrackResult:
        """Track each item independently; one failure never aborts the batch."""
        if not isinstance(items, list) or not items:
            raise ValidationError("Activities must be a non-empty array")
        result = BulkTrackResult()
        for index, item in enumerate(items):
            data = item if isinstance(item, dict) else {}
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Activity must be an object")
                outcome = await self.track(
                    item.get("listing_id"),
                    item.get("user_id"),
                    item.get("event_type"),
                    item.get("metadata"),
                )
            except Exception as e:
                logger.warning("[tracker] BULK_ITEM_FAILED index=%d: %s", index, e)
                result.errors.append(BulkTrackError(index=index, item=data, error=str(e)))
                continue
            if outcome.admitted:
                result.tracked += 1
            else:
                result.suppressed += 1
        return result

    async def counts_for(self, listing_id: str) -> ActivityCounts:
        return await self._store.counts_for(listing_id)

    async def bulk_counts(self, listing_ids: List[str]) -> Dict[str, ActivityCounts]:
        if len(listing_ids) > self._config.max_bulk_ids:
            raise ValidationError(
                f"Too many listing ids: {len(listing_ids)} > {self._config.max_bulk_ids}"
            )
        return await self._store.bulk_counts(listing_ids)

    async def listing_relevance(self, listing_id: str) -> Dict[str, Any]:
        counts = await self.counts_for(listing_id)
        return {
            "listing_id": listing_id,
            "counts": counts,
            "score": relevance_score(counts, self._config.relevance_weights),
        }

    async def user_history(
        self,
        user_id: str,
        event_type: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """Paginated events for one user, newest first. Unknown event_type filters are ignored."""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be >= 1")
        if event_type not in EVENT_TYPES:
            event_type = None
        events, total = await self._store.events_for_user(
            user_id, event_type, limit=limit, offset=(page - 1) * limit
        )
        return {
            "activities": events,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    async def stats(self, timeframe: str = DEFAULT_TIMEFRAME) -> Dict[str, Any]:
        if timeframe not in TIMEFRAMES:
            timeframe = DEFAULT_TIMEFRAME
        counts = await self._store.counts_since(self._clock() - TIMEFRAMES[timeframe])
        return {
            "timeframe": timeframe,
            "stats": {**counts.model_dump(), "total": counts.total},
        }
