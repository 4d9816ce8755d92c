"""
DedicatedRecommender strategy: standalone recommendation with score breakdown.

Content score is the cosine between the user's stored vector and the post's
binary tag vector; collaborative score credits neighbors (similarity above a
threshold) who liked or authored the post.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ...errors import ValidationError
from ...models.config import DEFAULT_CONFIG, RankingConfig
from ...models.content import Post
from ...models.scoring import Neighbor, ScoredPost
from ...models.tag_vector import TagVector, binary_tag_vector, normalize_tag_vector
from ...utils.similarity import cosine_similarity
from ...utils.tags import tags_for_post
from ..similarity import all_pair_similarities, neighbors_from_edges

logger = logging.getLogger(__name__)


def score_post_for_user(
    user_vector: TagVector,
    tags: List[str],
    post: Post,
    neighbors: List[Neighbor],
    user_id: str,
    config: RankingConfig = DEFAULT_CONFIG,
) -> Tuple[float, float, float]:
    """Return (content, collab, final) rounded to config.score_precision."""
    content = cosine_similarity(user_vector, binary_tag_vector(tags))
    likes = set(post.likes)
    collab = 0.0
    for neighbor in neighbors:
        if neighbor.user_id == user_id or neighbor.similarity <= 0:
            continue
        if neighbor.user_id in likes:
            collab += neighbor.similarity
        if post.user_id == neighbor.user_id:
            collab += neighbor.similarity * config.dedicated_author_multiplier
    final = (
        config.dedicated_weight_content * content
        + config.dedicated_weight_collab * collab
    )
    p = config.score_precision
    return round(content, p), round(collab, p), round(final, p)


def recommend_posts(
    user_id: str,
    vectors: Dict[str, TagVector],
    posts: List[Post],
    config: RankingConfig = DEFAULT_CONFIG,
    limit: Optional[int] = None,
) -> List[ScoredPost]:
    """
    Rank posts for user_id with DedicatedRecommender.

    vectors: every stored user vector. A user with no stored record gets [].
    """
    limit = config.dedicated_default_limit if limit is None else limit
    if limit < 1:
        raise ValidationError(f"limit must be >= 1, got {limit}")
    if user_id not in vectors:
        logger.info("[dedicated] NO_VECTOR user_id=%s", user_id)
        return []
    user_vector = normalize_tag_vector(vectors[user_id])
    edges = all_pair_similarities(vectors, config.score_precision)
    neighbors = neighbors_from_edges(user_id, edges, config.dedicated_similarity_threshold)

    scored: List[ScoredPost] = []
    for post in posts:
        if post.user_id == user_id:
            continue
        tags = tags_for_post(post)
        if not tags:
            continue
        content, collab, final = score_post_for_user(
            user_vector, tags, post, neighbors, user_id, config
        )
        scored.append(
            ScoredPost(
                post=post,
                tags=tags,
                content_score=content,
                collab_score=collab,
                final_score=final,
            )
        )
    scored.sort(key=lambda s: s.final_score, reverse=True)
    return scored[:limit]
