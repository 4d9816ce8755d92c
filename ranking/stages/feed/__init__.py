"""
Feed ranking strategies.

Two formulas rank the same inputs differently and are kept side by side:
- feed_ranking: interest-boosted dot-product content score, likes + comments collab, 0.6/0.4
- dedicated: cosine content score, likes + authorship collab, 0.7/0.3
"""

from enum import Enum

from .cold_start import recency_fallback
from .dedicated import recommend_posts, score_post_for_user
from .feed_ranking import (
    FeedRankingResult,
    build_base_vector,
    collab_score,
    comment_weights_by_post,
    content_score,
    rank_feed,
)


class FeedStrategy(str, Enum):
    FEED_RANKING = "feed_ranking"
    DEDICATED = "dedicated"


__all__ = [
    "FeedRankingResult",
    "FeedStrategy",
    "build_base_vector",
    "collab_score",
    "comment_weights_by_post",
    "content_score",
    "rank_feed",
    "recency_fallback",
    "recommend_posts",
    "score_post_for_user",
]
