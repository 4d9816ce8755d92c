"""
Activity store abstraction.

Persists listing activity events and aggregates their counts. Admission is a
single conditional insert: an event is stored only if no event with the same
(listing, user, type) lies inside the dedup window. Implementations:
in-memory (default, tests) and Firestore (production).
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Protocol, Tuple

from ranking.models import ActivityCounts, ActivityEvent

logger = logging.getLogger(__name__)


class ActivityStore(Protocol):
    """Protocol for listing activity persistence and aggregation."""

    async def admit(self, event: ActivityEvent, window: timedelta) -> bool:
        """Atomically store event unless a same-key event is within window. True if stored."""
        ...

    async def counts_for(self, listing_id: str) -> ActivityCounts:
        ...

    async def bulk_counts(self, listing_ids: List[str]) -> Dict[str, ActivityCounts]:
        """Counts for every requested id; ids with no events map to all-zero counts."""
        ...

    async def events_for_user(
        self,
        user_id: str,
        event_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ActivityEvent], int]:
        """(events newest first, total matching)."""
        ...

    async def counts_since(self, since: datetime) -> ActivityCounts:
        """Counts of all events with timestamp >= since."""
        ...


def add_to_counts(counts: ActivityCounts, event_type: str) -> None:
    if event_type in ActivityCounts.model_fields:
        setattr(counts, event_type, getattr(counts, event_type) + 1)


class InMemoryActivityStore:
    """
    Activity store kept in process memory.
    One asyncio.Lock guards admission, so the window check and the insert are atomic.
    """

    def __init__(self):
        self._events: List[ActivityEvent] = []
        self._times_by_key: Dict[tuple, List[datetime]] = {}
        self._lock = asyncio.Lock()

    async def admit(self, event: ActivityEvent, window: timedelta) -> bool:
        key = event.dedup_key
        async with self._lock:
            for ts in self._times_by_key.get(key, []):
                if abs(event.timestamp - ts) < window:
                    logger.debug("[activity] DUPLICATE key=%s", key)
                    return False
            self._events.append(event)
            self._times_by_key.setdefault(key, []).append(event.timestamp)
        return True

    async def counts_for(self, listing_id: str) -> ActivityCounts:
        counts = ActivityCounts()
        for event in self._events:
            if event.listing_id == listing_id:
                add_to_counts(counts, event.event_type.value)
        return counts

    async def bulk_counts(self, listing_ids: List[str]) -> Dict[str, ActivityCounts]:
        out = {str(lid): ActivityCounts() for lid in listing_ids}
        for event in self._events:
            counts = out.get(event.listing_id)
            if counts is not None:
                add_to_counts(counts, event.event_type.value)
        return out

    async def events_for_user(
        self,
        user_id: str,
        event_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ActivityEvent], int]:
        matching = [
            e for e in self._events
            if e.user_id == user_id and (event_type is None or e.event_type.value == event_type)
        ]
        matching.sort(key=lambda e: e.timestamp, reverse=True)
        return matching[offset:offset + limit], len(matching)

    async def counts_since(self, since: datetime) -> ActivityCounts:
        counts = ActivityCounts()
        for event in self._events:
            if event.timestamp >= since:
                add_to_counts(counts, event.event_type.value)
        return counts
