"""
In-memory interaction store tests: action deltas, clamping, atomic updates.

Run:
----
    pytest tests/test_interaction_store.py -v
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from ranking.errors import ValidationError
from ranking.models import TagVectorRecord
from service.services import InMemoryInteractionStore


class TestInMemoryInteractionStore:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.store = InMemoryInteractionStore()

    def test_like_adds_weight_per_tag(self):
        asyncio.run(self.store.apply_action("u1", ["books", "Art"], "like"))
        assert asyncio.run(self.store.get("u1")) == {"books": 1.0, "art": 1.0}

    def test_action_weights(self):
        asyncio.run(self.store.apply_action("u1", ["books"], "comment"))
        asyncio.run(self.store.apply_action("u1", ["books"], "view"))
        assert asyncio.run(self.store.get("u1")) == {"books": 2.5}

    def test_duplicate_tags_apply_per_occurrence(self):
        asyncio.run(self.store.apply_action("u1", ["books", "books"], "like"))
        assert asyncio.run(self.store.get("u1")) == {"books": 2.0}

    def test_unlike_never_goes_negative(self):
        asyncio.run(self.store.apply_action("u1", ["books"], "like"))
        for _ in range(3):
            record = asyncio.run(self.store.apply_action("u1", ["books", "art"], "unlike"))
            assert all(w >= 0 for w in record.tag_interactions.values())
        assert record.tag_interactions == {"books": 0.0, "art": 0.0}
        assert asyncio.run(self.store.get("u1")) == {}

    def test_noop_without_user_or_tags(self):
        assert asyncio.run(self.store.apply_action("", ["books"], "like")) is None
        assert asyncio.run(self.store.apply_action("u1", [], "like")) is None
        assert asyncio.run(self.store.apply_action("u1", [], "bogus")) is None
        assert asyncio.run(self.store.get_record("u1")) is None

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            asyncio.run(self.store.apply_action("u1", ["books"], "share"))
        assert asyncio.run(self.store.get_record("u1")) is None

    def test_concurrent_updates_are_not_lost(self):
        async def run():
            await asyncio.gather(
                *(self.store.apply_action("u1", ["books"], "like") for _ in range(50))
            )
            return await self.store.get("u1")

        assert asyncio.run(run()) == {"books": 50.0}

    def test_all_vectors_limit_keeps_most_recent(self):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i, uid in enumerate(("old", "mid", "new")):
            self.store._records[uid] = TagVectorRecord(
                user_id=uid, tag_interactions={"books": 1.0}, last_updated=t0 + timedelta(hours=i)
            )
        vectors = asyncio.run(self.store.all_vectors(limit=2))
        assert set(vectors) == {"mid", "new"}

    def test_seed(self):
        self.store.seed({"u9": {"Books": 3}})
        assert asyncio.run(self.store.get("u9")) == {"books": 3.0}
