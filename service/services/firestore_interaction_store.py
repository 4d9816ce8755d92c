"""
Firestore interaction store: one document per user in tag_interactions/{user_id}.

Each document: { user_id, tag_interactions: {tag: weight}, last_updated }.
apply_action runs as an async transaction, so concurrent updates for the same
user are retried by Firestore instead of overwriting each other.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

from ranking.models import DEFAULT_CONFIG, TagVector, TagVectorRecord

from .firestore_client import create_async_client
from .interaction_store import apply_delta, clean_tags, resolve_delta

logger = logging.getLogger(__name__)

COLLECTION = "tag_interactions"


def _doc_to_record(doc) -> TagVectorRecord:
    d = doc.to_dict() or {}
    return TagVectorRecord(
        user_id=d.get("user_id") or doc.id,
        tag_interactions=d.get("tag_interactions") or {},
        last_updated=d.get("last_updated") or datetime.now(timezone.utc),
    )


class FirestoreInteractionStore:
    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        action_weights: Optional[Mapping[str, float]] = None,
        client=None,
    ):
        self._db = client or create_async_client(project_id, credentials_path)
        self._coll = self._db.collection(COLLECTION)
        self._action_weights = dict(action_weights or DEFAULT_CONFIG.action_weights)

    async def get_record(self, user_id: str) -> Optional[TagVectorRecord]:
        if not user_id:
            return None
        doc = await self._coll.document(user_id).get()
        return _doc_to_record(doc) if doc.exists else None

    async def get(self, user_id: str) -> TagVector:
        record = await self.get_record(user_id)
        return record.vector() if record else {}

    async def apply_action(
        self,
        user_id: Optional[str],
        tags: Iterable[str],
        action: str,
    ) -> Optional[TagVectorRecord]:
        from google.cloud.firestore import async_transactional

        tag_list = clean_tags(tags)
        if not user_id or not tag_list:
            return None
        delta = resolve_delta(action, self._action_weights)
        doc_ref = self._coll.document(user_id)

        @async_transactional
        async def _update(transaction):
            snapshot = await doc_ref.get(transaction=transaction)
            current = {}
            if snapshot.exists:
                current = (snapshot.to_dict() or {}).get("tag_interactions") or {}
            data = {
                "user_id": user_id,
                "tag_interactions": apply_delta(current, tag_list, delta),
                "last_updated": datetime.now(timezone.utc),
            }
            transaction.set(doc_ref, data)
            return data

        try:
            data = await _update(self._db.transaction())
        except Exception as e:
            logger.error("[FirestoreInteractionStore] apply_action failed for user=%r: %s", user_id, e)
            raise
        return TagVectorRecord.model_validate(data)

    async def all_vectors(self, limit: Optional[int] = None) -> Dict[str, TagVector]:
        from google.cloud.firestore_v1.query import Query as FirestoreQuery

        query = self._coll
        if limit is not None:
            query = query.order_by("last_updated", direction=FirestoreQuery.DESCENDING).limit(limit)
        out: Dict[str, TagVector] = {}
        async for doc in query.stream():
            record = _doc_to_record(doc)
            out[record.user_id] = record.vector()
        return out
