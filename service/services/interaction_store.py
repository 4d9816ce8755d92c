"""
Interaction vector store abstraction.

Holds one tag vector per user and applies like/unlike/comment/view actions to
it. Implementations: in-memory (default, tests) and Firestore (production).
Both make apply_action a single atomic read-modify-write per user.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from ranking.errors import ValidationError
from ranking.models import DEFAULT_CONFIG, TagVector, TagVectorRecord

logger = logging.getLogger(__name__)

ACTIONS = ("like", "comment", "view", "unlike")


class InteractionStore(Protocol):
    """Protocol for per-user tag vector read/write."""

    async def get(self, user_id: str) -> TagVector:
        """Normalized vector for user_id; {} when the user has no record."""
        ...

    async def get_record(self, user_id: str) -> Optional[TagVectorRecord]:
        ...

    async def apply_action(
        self,
        user_id: Optional[str],
        tags: Iterable[str],
        action: str,
    ) -> Optional[TagVectorRecord]:
        """
        Add the action's delta to each tag occurrence, clamped at 0.
        No-op (returns None) when user_id or tags is empty.
        """
        ...

    async def all_vectors(self, limit: Optional[int] = None) -> Dict[str, TagVector]:
        """Normalized vectors of every user (most recently updated first when limited)."""
        ...


def resolve_delta(action: str, action_weights: Mapping[str, float]) -> float:
    if action not in action_weights:
        raise ValidationError(
            f"Invalid action {action!r}. Must be one of: {', '.join(action_weights)}"
        )
    return action_weights[action]


def apply_delta(current: Mapping[str, float], tags: List[str], delta: float) -> Dict[str, float]:
    """New raw tag map with delta applied once per tag occurrence, never below 0."""
    updated = dict(current)
    for raw in tags:
        tag = str(raw).lower()
        updated[tag] = max(0.0, float(updated.get(tag, 0.0)) + delta)
    return updated


def clean_tags(tags: Optional[Iterable[str]]) -> List[str]:
    return [str(t) for t in (tags or []) if t is not None and str(t).strip()]


class InMemoryInteractionStore:
    """
    Interaction store kept in process memory.
    A per-user asyncio.Lock serializes read-modify-write so no update is lost.
    """

    def __init__(self, action_weights: Optional[Mapping[str, float]] = None):
        self._action_weights = dict(action_weights or DEFAULT_CONFIG.action_weights)
        self._records: Dict[str, TagVectorRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get(self, user_id: str) -> TagVector:
        record = self._records.get(user_id)
        return record.vector() if record else {}

    async def get_record(self, user_id: str) -> Optional[TagVectorRecord]:
        return self._records.get(user_id)

    async def apply_action(
        self,
        user_id: Optional[str],
        tags: Iterable[str],
        action: str,
    ) -> Optional[TagVectorRecord]:
        tag_list = clean_tags(tags)
        if not user_id or not tag_list:
            return None
        delta = resolve_delta(action, self._action_weights)
        async with self._locks[user_id]:
            record = self._records.get(user_id)
            current = record.tag_interactions if record else {}
            updated = TagVectorRecord(
                user_id=user_id,
                tag_interactions=apply_delta(current, tag_list, delta),
                last_updated=datetime.now(timezone.utc),
            )
            self._records[user_id] = updated
        logger.debug("[interactions] %s user_id=%s tags=%s", action, user_id, tag_list)
        return updated

    async def all_vectors(self, limit: Optional[int] = None) -> Dict[str, TagVector]:
        records = list(self._records.values())
        if limit is not None and len(records) > limit:
            logger.warning(
                "[interactions] SCAN_TRUNCATED users=%d limit=%d", len(records), limit
            )
            records.sort(key=lambda r: r.last_updated, reverse=True)
            records = records[:limit]
        return {r.user_id: r.vector() for r in records}

    def seed(self, vectors: Mapping[str, Mapping[str, float]]) -> None:
        """Load raw vectors directly (fixtures, JSON import)."""
        for user_id, raw in vectors.items():
            self._records[user_id] = TagVectorRecord(
                user_id=user_id, tag_interactions=dict(raw)
            )
