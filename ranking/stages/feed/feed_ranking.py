"""
FeedRanking strategy: the general personalized feed.

Base vector = stored tag vector plus a boost per declared interest. Content
score is a weighted-presence dot product of the base vector with the post's
tags (not a cosine); collaborative score weights likes and comments of the
top similar users by their similarity.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel

from ...models.config import DEFAULT_CONFIG, RankingConfig
from ...models.content import Comment, Post
from ...models.scoring import Neighbor
from ...models.tag_vector import TagVector, normalize_tag_vector
from ...utils.tags import tags_for_post
from ..similarity import top_neighbors
from .cold_start import recency_fallback

logger = logging.getLogger(__name__)


class FeedRankingResult(BaseModel):
    posts: List[Post]
    cold_start: bool = False
    fallback: bool = False
    neighbors: List[Neighbor] = []


def build_base_vector(
    stored_vector: TagVector,
    interests: Optional[List[str]] = None,
    boost: float = 1.0,
) -> TagVector:
    """Normalized stored vector, plus boost added (not replaced) per declared interest."""
    base = normalize_tag_vector(stored_vector)
    for raw in interests or []:
        tag = str(raw or "").strip().lower()
        if not tag:
            continue
        base[tag] = base.get(tag, 0.0) + boost
    return base


def content_score(base_vector: TagVector, tags: List[str]) -> float:
    """Sum of base-vector weights over the post's tags (each occurrence counts)."""
    return sum(base_vector.get(str(t).lower(), 0.0) for t in tags)


def comment_weights_by_post(
    comments: List[Comment],
    similarity_by_user: Dict[str, float],
) -> Dict[str, float]:
    """post_id -> sum of commenter similarity, one term per comment by a neighbor."""
    weights: Dict[str, float] = {}
    for comment in comments:
        sim = similarity_by_user.get(str(comment.user_id), 0.0)
        if sim:
            pid = str(comment.post_id)
            weights[pid] = weights.get(pid, 0.0) + sim
    return weights


def collab_score(
    post: Post,
    similarity_by_user: Dict[str, float],
    comment_weights: Dict[str, float],
    comment_multiplier: float = 1.2,
) -> float:
    like_score = sum(similarity_by_user.get(liker, 0.0) for liker in post.likes)
    return like_score + comment_multiplier * comment_weights.get(post.id, 0.0)


def rank_feed(
    user_id: str,
    stored_vector: TagVector,
    interests: Optional[List[str]],
    vectors: Dict[str, TagVector],
    posts: List[Post],
    comments: List[Comment],
    config: RankingConfig = DEFAULT_CONFIG,
    neighbors: Optional[List[Neighbor]] = None,
) -> FeedRankingResult:
    """
    Rank posts for user_id with FeedRanking.

    vectors: every stored user vector (the viewer's own entry is ignored).
    comments: comments to weigh; only those by top neighbors contribute.
    neighbors: top neighbors already computed from the same base vector;
    computed here when omitted.
    Falls back to the newest posts when there is no signal at all or when
    scoring leaves nothing to show.
    """
    limit = config.feed_result_limit
    base_vector = build_base_vector(stored_vector, interests, config.feed_interest_boost)
    if neighbors is None:
        neighbors = top_neighbors(user_id, base_vector, vectors, config.feed_top_neighbors)

    if not base_vector and not neighbors:
        logger.info("[feed] COLD_START user_id=%s no vector, interests or neighbors", user_id)
        return FeedRankingResult(
            posts=recency_fallback(user_id, posts, limit),
            cold_start=True,
            fallback=True,
        )

    similarity_by_user = {n.user_id: n.similarity for n in neighbors}
    comment_weights = comment_weights_by_post(comments, similarity_by_user)

    scored = []
    for post in posts:
        if post.user_id == user_id:
            continue
        tags = tags_for_post(post)
        if not tags:
            continue
        content = content_score(base_vector, tags)
        collab = collab_score(
            post, similarity_by_user, comment_weights, config.feed_comment_multiplier
        )
        final = config.feed_weight_content * content + config.feed_weight_collab * collab
        scored.append((final, post))

    scored.sort(key=lambda x: x[0], reverse=True)
    ranked = [post for _, post in scored[:limit]]
    if not ranked:
        logger.info("[feed] EMPTY_RANKING user_id=%s falling back to recent posts", user_id)
        return FeedRankingResult(
            posts=recency_fallback(user_id, posts, limit),
            fallback=True,
            neighbors=neighbors,
        )
    return FeedRankingResult(posts=ranked, neighbors=neighbors)
