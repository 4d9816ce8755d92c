"""
FeedRanking strategy tests: base vector, content/collab scores, cold start.

Run:
----
    pytest tests/test_feed_ranking.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from ranking.models import Comment, Neighbor, Post, RankingConfig
from ranking.stages import rank_feed
from ranking.stages.feed import build_base_vector, comment_weights_by_post, content_score

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _post(pid, author, tags, minutes=0, likes=None):
    return Post(
        id=pid,
        user_id=author,
        tags=tags,
        likes=likes or [],
        created_at=T0 + timedelta(minutes=minutes),
    )


class TestBaseVector:
    def test_interest_boost_is_added(self):
        base = build_base_vector({"books": 1.0}, ["Books", "art", ""], boost=1.0)
        assert base == {"books": 2.0, "art": 1.0}

    def test_stored_vector_normalized(self):
        assert build_base_vector({"Music": 2, "bad": -1}) == {"music": 2.0}


class TestContentScore:
    def test_tagged_post_beats_untagged(self):
        base = {"books": 2.0}
        assert content_score(base, ["books"]) > content_score(base, [])

    def test_duplicate_tags_count_each_time(self):
        assert content_score({"books": 2.0}, ["books", "Books"]) == 4.0


class TestCommentWeights:
    def test_each_neighbor_comment_counts(self):
        comments = [
            Comment(post_id="p1", user_id="n1"),
            Comment(post_id="p1", user_id="n1"),
            Comment(post_id="p1", user_id="stranger"),
            Comment(post_id="p2", user_id="n2"),
        ]
        weights = comment_weights_by_post(comments, {"n1": 0.5, "n2": 0.25})
        assert weights == {"p1": 1.0, "p2": 0.25}


class TestRankFeed:
    def test_cold_start_returns_recent_posts_by_others(self):
        posts = [_post(f"p{i}", f"author{i % 3}", ["x"], minutes=i) for i in range(25)]
        posts += [_post(f"mine{i}", "viewer", ["x"], minutes=100 + i) for i in range(3)]
        result = rank_feed("viewer", {}, [], {}, posts, [])
        assert result.cold_start and result.fallback
        assert len(result.posts) == 20
        assert all(p.user_id != "viewer" for p in result.posts)
        assert [p.id for p in result.posts[:2]] == ["p24", "p23"]

    def test_content_drives_order(self):
        posts = [
            _post("cars", "a", ["cars"], minutes=5),
            _post("books", "a", ["books"], minutes=1),
        ]
        result = rank_feed("viewer", {"books": 2.0}, [], {}, posts, [])
        assert not result.fallback
        assert [p.id for p in result.posts] == ["books", "cars"]

    def test_skips_own_and_untagged_posts(self):
        posts = [
            _post("own", "viewer", ["books"]),
            _post("untagged", "a", []),
            _post("tagged", "a", ["books"]),
        ]
        result = rank_feed("viewer", {"books": 1.0}, [], {}, posts, [])
        assert [p.id for p in result.posts] == ["tagged"]

    def test_neighbor_likes_and_comments_lift_posts(self):
        vectors = {"viewer": {"books": 1.0}, "n1": {"books": 2.0}}
        posts = [
            _post("plain", "a", ["music"], minutes=2),
            _post("liked", "a", ["music"], minutes=1, likes=["n1"]),
            _post("commented", "a", ["music"], minutes=0),
        ]
        comments = [
            Comment(post_id="commented", user_id="n1"),
            Comment(post_id="commented", user_id="n1"),
        ]
        result = rank_feed("viewer", {"books": 1.0}, [], vectors, posts, comments)
        # commented: 0.4 * 1.2 * 2 = 0.96; liked: 0.4 * 1 = 0.4; plain: 0
        assert [p.id for p in result.posts] == ["commented", "liked", "plain"]
        assert [n.user_id for n in result.neighbors] == ["n1"]
        assert result.neighbors[0].similarity == pytest.approx(1.0)

    def test_interests_alone_avoid_cold_start(self):
        posts = [_post("p1", "a", ["art"]), _post("p2", "a", ["cars"], minutes=3)]
        result = rank_feed("viewer", {}, ["art"], {}, posts, [])
        assert not result.cold_start
        assert result.posts[0].id == "p1"

    def test_nothing_scorable_falls_back(self):
        posts = [_post("own", "viewer", ["books"]), _post("untagged", "a", [])]
        result = rank_feed("viewer", {"books": 1.0}, [], {}, posts, [])
        assert result.fallback and not result.cold_start
        assert [p.id for p in result.posts] == ["untagged"]

    def test_result_limit_from_config(self):
        config = RankingConfig(feed_result_limit=2)
        posts = [_post(f"p{i}", "a", ["books"], minutes=i) for i in range(5)]
        result = rank_feed("viewer", {"books": 1.0}, [], {}, posts, [], config)
        assert len(result.posts) == 2

    def test_precomputed_neighbors_are_used(self):
        posts = [
            _post("plain", "a", ["music"], minutes=1),
            _post("liked", "a", ["music"], likes=["n1"]),
        ]
        neighbors = [Neighbor(user_id="n1", similarity=0.5)]
        result = rank_feed("viewer", {"books": 1.0}, [], {}, posts, [], neighbors=neighbors)
        assert [p.id for p in result.posts] == ["liked", "plain"]
        assert result.neighbors == neighbors
