"""
HTTP API tests against an in-memory AppState.

Run:
----
    pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from service.app import create_app
from service.state import AppState, get_state

CONTENT = {
    "users": [
        {"id": "alice", "username": "alice", "interests": ["books"]},
        {"id": "bob", "username": "bob"},
        {"id": "carol", "username": "carol"},
        {"id": "newbie", "username": "newbie"},
    ],
    "posts": [
        {"id": "p1", "user_id": "bob", "desc": "Great read #books", "created_at": "2024-01-01T10:00:00Z"},
        {"id": "p2", "user_id": "carol", "desc": "Weekend drive #cars", "likes": ["bob"],
         "created_at": "2024-01-02T10:00:00Z"},
        {"id": "p3", "user_id": "alice", "desc": "My shelf #books", "created_at": "2024-01-03T10:00:00Z"},
        {"id": "p4", "user_id": "carol", "desc": "no tags", "created_at": "2024-01-04T10:00:00Z"},
    ],
    "comments": [
        {"id": "c1", "post_id": "p2", "user_id": "bob", "text": "nice"},
    ],
    "listings": [
        {"id": "L1", "user_id": "bob", "name": "Amp", "category": "music", "price": 120,
         "created_at": "2024-01-01T00:00:00Z"},
        {"id": "L2", "user_id": "carol", "name": "Bike", "category": "sports", "price": 80,
         "created_at": "2024-01-02T00:00:00Z"},
        {"id": "L3", "user_id": "carol", "name": "Chair", "category": "home", "price": 40,
         "status": "Sold", "created_at": "2024-01-03T00:00:00Z"},
    ],
}


class TestApi:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.state = AppState.in_memory(CONTENT)
        self.app = create_app()
        self.app.dependency_overrides[get_state] = lambda: self.state
        self.client = TestClient(self.app)
        yield
        self.app.dependency_overrides.clear()

    def track(self, listing_id, user_id, event_type, **extra):
        body = {"listing_id": listing_id, "user_id": user_id, "event_type": event_type, **extra}
        return self.client.post("/api/activities/track", json=body)

    def interact(self, user_id, post_id, action):
        body = {"user_id": user_id, "post_id": post_id, "action": action}
        return self.client.post("/api/interactions", json=body)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def test_root(self):
        assert self.client.get("/").json()["status"] == "ok"

    def test_track_then_duplicate(self):
        first = self.track("L1", "alice", "view")
        assert first.status_code == 200
        assert first.json()["admitted"] is True
        assert first.json()["event"]["event_type"] == "view"
        second = self.track("L1", "alice", "view")
        assert second.status_code == 200
        assert second.json()["admitted"] is False
        assert second.json()["event"] is None

    def test_track_validation_errors(self):
        assert self.client.post("/api/activities/track", json={"listing_id": "L1"}).status_code == 400
        response = self.track("L1", "alice", "purchase")
        assert response.status_code == 400
        assert "Invalid activity type" in response.json()["detail"]

    def test_track_unknown_listing(self):
        response = self.track("nope", "alice", "view")
        assert response.status_code == 404
        assert response.json()["detail"] == "listing not found: nope"

    def test_track_bad_type_on_unknown_listing_is_validation_error(self):
        response = self.track("nope", "alice", "purchase")
        assert response.status_code == 400

    def test_track_null_metadata(self):
        response = self.track("L1", "alice", "view", metadata=None)
        assert response.status_code == 200
        assert response.json()["event"]["metadata"] == {}

    def test_track_bulk(self):
        response = self.client.post("/api/activities/track-bulk", json={"activities": [
            {"listing_id": "L1", "user_id": "alice", "event_type": "click"},
            {"listing_id": "L1", "user_id": "alice", "event_type": "click"},
            {"listing_id": "L1", "event_type": "click"},
        ]})
        assert response.status_code == 200
        body = response.json()
        assert (body["tracked"], body["suppressed"]) == (1, 1)
        assert body["errors"][0]["index"] == 2

    def test_track_bulk_empty(self):
        response = self.client.post("/api/activities/track-bulk", json={"activities": []})
        assert response.status_code == 400

    def test_listing_relevance(self):
        self.track("L1", "alice", "view")
        self.track("L1", "bob", "offer")
        body = self.client.get("/api/activities/listing/L1").json()
        assert body["counts"] == {"view": 1, "click": 0, "offer": 1}
        assert body["score"] == pytest.approx(0.7)
        assert self.client.get("/api/activities/listing/missing").status_code == 404

    def test_user_history_and_stats(self):
        self.track("L1", "alice", "view")
        self.track("L2", "alice", "click")
        history = self.client.get("/api/activities/user/alice", params={"limit": 1}).json()
        assert history["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
        assert len(history["activities"]) == 1
        stats = self.client.get("/api/activities/stats", params={"timeframe": "1d"}).json()
        assert stats["timeframe"] == "1d"
        assert stats["stats"]["total"] == 2

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def test_listings_by_relevance_exclude_inactive(self):
        self.track("L1", "alice", "offer")
        body = self.client.get("/api/listings").json()
        assert [r["listing"]["id"] for r in body] == ["L1", "L2"]
        assert body[0]["relevance_score"] == pytest.approx(0.6)

    def test_listings_field_sort_and_category(self):
        body = self.client.get("/api/listings", params={"sort_by": "price-low"}).json()
        assert [r["listing"]["id"] for r in body] == ["L2", "L1"]
        body = self.client.get("/api/listings", params={"category": "music"}).json()
        assert [r["listing"]["id"] for r in body] == ["L1"]

    def test_listings_pagination(self):
        body = self.client.get("/api/listings", params={"sort_by": "newest", "page": 2, "page_size": 1}).json()
        assert [r["listing"]["id"] for r in body] == ["L1"]
        assert self.client.get("/api/listings", params={"page": 0}).status_code == 400

    def test_listing_recommendations(self):
        self.track("L2", "alice", "click")
        body = self.client.get("/api/listings/recommendations", params={"limit": 1}).json()
        assert [r["listing"]["id"] for r in body] == ["L2"]

    # ------------------------------------------------------------------
    # Interactions and feed
    # ------------------------------------------------------------------

    def test_record_interaction(self):
        response = self.interact("alice", "p1", "like")
        assert response.status_code == 200
        body = response.json()
        assert body["tags"] == ["books"]
        assert body["updated"] is True
        assert body["vector"] == {"books": 1.0}
        assert self.client.get("/api/interactions/alice").json()["vector"] == {"books": 1.0}

    def test_record_interaction_errors(self):
        assert self.interact("alice", "missing", "like").status_code == 404
        assert self.interact("alice", "p1", "share").status_code == 422

    def test_untagged_post_interaction_is_noop(self):
        body = self.interact("alice", "p4", "like").json()
        assert body["updated"] is False
        assert body["vector"] == {}

    def test_similarities(self):
        self.interact("alice", "p1", "like")
        self.interact("bob", "p3", "comment")
        self.interact("carol", "p2", "like")
        edges = self.client.get("/api/interactions/similarities").json()
        assert len(edges) == 1
        assert {edges[0]["user_a"], edges[0]["user_b"]} == {"alice", "bob"}
        assert edges[0]["similarity"] == 1.0

    def test_feed_cold_start(self):
        body = self.client.get("/api/feed/newbie").json()
        assert body["strategy"] == "feed_ranking"
        assert body["cold_start"] is True
        assert [p["id"] for p in body["posts"]] == ["p4", "p3", "p2", "p1"]

    def test_feed_ranking_uses_interests(self):
        body = self.client.get("/api/feed/alice").json()
        assert body["cold_start"] is False
        ids = [p["id"] for p in body["posts"]]
        assert ids[0] == "p1"
        assert "p3" not in ids
        assert "p4" not in ids

    def test_feed_unknown_user(self):
        assert self.client.get("/api/feed/ghost").status_code == 404

    def test_feed_dedicated(self):
        self.interact("alice", "p1", "like")
        self.interact("bob", "p3", "like")
        body = self.client.get("/api/feed/alice", params={"strategy": "dedicated"}).json()
        assert body["strategy"] == "dedicated"
        assert [p["id"] for p in body["posts"]] == ["p1", "p2"]
        assert body["scores"][0]["content_score"] == 1.0
        assert body["scores"][1]["collab_score"] == 1.0

    def test_feed_dedicated_without_vector(self):
        body = self.client.get("/api/feed/carol", params={"strategy": "dedicated"}).json()
        assert body["posts"] == []

    @pytest.mark.parametrize("strategy", ["feed_ranking", "dedicated"])
    @pytest.mark.parametrize("limit", [0, -1])
    def test_feed_rejects_bad_limit(self, strategy, limit):
        self.interact("alice", "p1", "like")
        response = self.client.get("/api/feed/alice", params={"strategy": strategy, "limit": limit})
        assert response.status_code == 400
        assert "limit" in response.json()["detail"]

    def test_feed_limit(self):
        body = self.client.get("/api/feed/newbie", params={"limit": 2}).json()
        assert [p["id"] for p in body["posts"]] == ["p4", "p3"]

    def test_feed_unknown_strategy(self):
        response = self.client.get("/api/feed/alice", params={"strategy": "random"})
        assert response.status_code == 400

    def test_extract_tags(self):
        body = self.client.post("/api/posts/tags", json={"text": "#Hello #world"}).json()
        assert body == {"tags": ["hello", "world"]}

    def test_stats(self):
        self.interact("alice", "p1", "like")
        body = self.client.get("/api/stats").json()
        assert body["users_with_vectors"] == 1
        assert body["interaction_store"] == "InMemoryInteractionStore"
