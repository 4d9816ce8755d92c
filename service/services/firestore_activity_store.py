"""
Firestore activity store.

Events live in listing_activities/{event_id}. Each (listing, user, type) key
also has a guard document in listing_activity_guards holding the newest timestamp
admitted for that key; admit() reads the guard and writes guard + event in
one transaction, so two near-simultaneous requests cannot both be admitted.
"""

import hashlib
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ranking.models import ActivityCounts, ActivityEvent

from .activity_store import add_to_counts
from .firestore_client import create_async_client

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "listing_activities"
GUARDS_COLLECTION = "listing_activity_guards"
# Firestore caps "in" filters at 30 values.
IN_QUERY_CHUNK = 30


def _guard_id(key: tuple) -> str:
    return hashlib.sha256("|".join(key).encode("utf-8")).hexdigest()[:40]


def _doc_to_event(doc) -> ActivityEvent:
    d = doc.to_dict() or {}
    return ActivityEvent(
        id=doc.id,
        listing_id=d.get("listing_id", ""),
        user_id=d.get("user_id", ""),
        event_type=d.get("event_type", "view"),
        timestamp=d.get("timestamp"),
        metadata=d.get("metadata") or {},
    )


class FirestoreActivityStore:
    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        client=None,
    ):
        self._db = client or create_async_client(project_id, credentials_path)
        self._events = self._db.collection(EVENTS_COLLECTION)
        self._guards = self._db.collection(GUARDS_COLLECTION)

    async def admit(self, event: ActivityEvent, window: timedelta) -> bool:
        from google.cloud.firestore import async_transactional

        guard_ref = self._guards.document(_guard_id(event.dedup_key))
        event_ref = self._events.document(event.id)
        data = {
            "listing_id": event.listing_id,
            "user_id": event.user_id,
            "event_type": event.event_type.value,
            "timestamp": event.timestamp,
            "metadata": event.metadata,
        }

        @async_transactional
        async def _admit(transaction) -> bool:
            guard = await guard_ref.get(transaction=transaction)
            last = None
            if guard.exists:
                last = (guard.to_dict() or {}).get("last_admitted_at")
                if last is not None and abs(event.timestamp - last) < window:
                    return False
            # Guard timestamp never moves backwards.
            newest = event.timestamp if last is None else max(last, event.timestamp)
            transaction.set(guard_ref, {
                "listing_id": event.listing_id,
                "user_id": event.user_id,
                "event_type": event.event_type.value,
                "last_admitted_at": newest,
            })
            transaction.create(event_ref, data)
            return True

        try:
            return await _admit(self._db.transaction())
        except Exception as e:
            logger.error("[FirestoreActivityStore] admit failed for key=%s: %s", event.dedup_key, e)
            raise

    async def counts_for(self, listing_id: str) -> ActivityCounts:
        return (await self.bulk_counts([listing_id]))[str(listing_id)]

    async def bulk_counts(self, listing_ids: List[str]) -> Dict[str, ActivityCounts]:
        from google.cloud.firestore_v1.base_query import FieldFilter

        ids = [str(lid) for lid in listing_ids]
        out = {lid: ActivityCounts() for lid in ids}
        for start in range(0, len(ids), IN_QUERY_CHUNK):
            chunk = ids[start:start + IN_QUERY_CHUNK]
            query = self._events.where(filter=FieldFilter("listing_id", "in", chunk)).select(
                ["listing_id", "event_type"]
            )
            async for doc in query.stream():
                d = doc.to_dict() or {}
                counts = out.get(d.get("listing_id"))
                if counts is not None:
                    add_to_counts(counts, d.get("event_type", ""))
        return out

    async def events_for_user(
        self,
        user_id: str,
        event_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ActivityEvent], int]:
        from google.cloud.firestore_v1.base_query import FieldFilter
        from google.cloud.firestore_v1.query import Query as FirestoreQuery

        query = self._events.where(filter=FieldFilter("user_id", "==", user_id))
        if event_type:
            query = query.where(filter=FieldFilter("event_type", "==", event_type))
        count_result = await query.count().get()
        total = int(count_result[0][0].value) if count_result else 0
        page = query.order_by("timestamp", direction=FirestoreQuery.DESCENDING).offset(offset).limit(limit)
        events = [_doc_to_event(doc) async for doc in page.stream()]
        return events, total

    async def counts_since(self, since: datetime) -> ActivityCounts:
        from google.cloud.firestore_v1.base_query import FieldFilter

        counts = ActivityCounts()
        query = self._events.where(filter=FieldFilter("timestamp", ">=", since)).select(["event_type"])
        async for doc in query.stream():
            add_to_counts(counts, (doc.to_dict() or {}).get("event_type", ""))
        return counts
