"""
Firestore-backed store tests against an in-process fake client.

The fake keeps documents in dicts and applies transaction writes immediately;
async_transactional is replaced by a pass-through so the transaction bodies
run as written.

Run:
----
    pytest tests/test_firestore_stores.py -v
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from ranking.models import ActivityEvent
from service.services import (
    FirestoreActivityStore,
    FirestoreContentProvider,
    FirestoreInteractionStore,
)

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
WINDOW = timedelta(minutes=5)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, docs, doc_id):
        self._docs = docs
        self.id = doc_id

    async def get(self, transaction=None):
        return FakeSnapshot(self.id, self._docs.get(self.id))


class FakeQuery:
    def __init__(self, docs, field=None, descending=False):
        self._docs = docs
        self._field = field
        self._descending = descending

    async def stream(self):
        items = list(self._docs.items())
        if self._field:
            items.sort(key=lambda kv: kv[1][self._field], reverse=self._descending)
        for doc_id, data in items:
            yield FakeSnapshot(doc_id, data)


class FakeCollection:
    def __init__(self):
        self.docs = {}

    def document(self, doc_id):
        return FakeDocument(self.docs, doc_id)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self.docs, field, direction == "DESCENDING")


class FakeTransaction:
    def set(self, ref, data):
        ref._docs[ref.id] = dict(data)

    def create(self, ref, data):
        if ref.id in ref._docs:
            raise ValueError(f"document already exists: {ref.id}")
        ref._docs[ref.id] = dict(data)


class FakeClient:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def transaction(self):
        return FakeTransaction()


@pytest.fixture(autouse=True)
def pass_through_transactions(monkeypatch):
    monkeypatch.setattr("google.cloud.firestore.async_transactional", lambda fn: fn)


class TestFirestoreActivityStore:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.client = FakeClient()
        self.store = FirestoreActivityStore(client=self.client)

    def admit(self, timestamp, event_type="view"):
        event = ActivityEvent(listing_id="L1", user_id="U1", event_type=event_type, timestamp=timestamp)
        return asyncio.run(self.store.admit(event, WINDOW))

    def test_duplicate_inside_window_suppressed(self):
        assert self.admit(T0)
        assert not self.admit(T0 + timedelta(minutes=4))
        assert self.admit(T0 + timedelta(minutes=6))
        assert len(self.client.collection("listing_activities").docs) == 2

    def test_backfilled_event_does_not_reopen_window(self):
        assert self.admit(T0)
        assert self.admit(T0 - timedelta(hours=1))
        assert not self.admit(T0 + timedelta(minutes=1))
        guard = next(iter(self.client.collection("listing_activity_guards").docs.values()))
        assert guard["last_admitted_at"] == T0

    def test_keys_are_independent(self):
        assert self.admit(T0, "view")
        assert self.admit(T0, "click")


class TestFirestoreInteractionStore:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.client = FakeClient()
        self.store = FirestoreInteractionStore(client=self.client)

    def test_apply_action_accumulates_and_clamps(self):
        asyncio.run(self.store.apply_action("u1", ["books", "Art"], "like"))
        record = asyncio.run(self.store.apply_action("u1", ["books"], "comment"))
        assert record.tag_interactions == {"books": 3.0, "art": 1.0}
        asyncio.run(self.store.apply_action("u1", ["art", "art"], "unlike"))
        assert asyncio.run(self.store.get("u1")) == {"books": 3.0}
        stored = self.client.collection("tag_interactions").docs["u1"]
        assert stored["tag_interactions"]["art"] == 0.0

    def test_noop_without_tags(self):
        assert asyncio.run(self.store.apply_action("u1", [], "like")) is None
        assert self.client.collection("tag_interactions").docs == {}


class TestFirestoreContentProvider:
    def test_get_posts_keeps_newest_and_skips_viewer(self):
        client = FakeClient()
        posts = client.collection("posts").docs
        for i in range(6):
            author = "viewer" if i == 5 else "other"
            posts[f"p{i}"] = {"user_id": author, "created_at": T0 + timedelta(minutes=i)}
        provider = FirestoreContentProvider(client=client)
        result = asyncio.run(provider.get_posts(exclude_user_id="viewer", limit=3))
        assert [p.id for p in result] == ["p4", "p3", "p2"]
