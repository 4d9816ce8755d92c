"""
Tag-affinity ranking engine

Single entry point for the ranking package:
- models/: RankingConfig, TagVector, Post/Listing content, activity events, score models
- utils/: tag extraction, cosine similarity
- stages/: pairwise similarity, feed strategies (feed_ranking, dedicated), relevance, listing ranking

Everything here is pure; storage and request handling live in the service package.
"""

from .errors import EngineFailure, NotFoundError, RankingError, ValidationError
from .models import (
    DEFAULT_CONFIG,
    ActivityCounts,
    ActivityEvent,
    EventType,
    Listing,
    Post,
    RankingConfig,
    RelevanceWeights,
    SimilarityEdge,
    TagVector,
    normalize_tag_vector,
    resolve_config,
)
from .stages import (
    FeedStrategy,
    all_pair_similarities,
    rank_feed,
    rank_listings,
    recommend_posts,
    relevance_score,
)
from .utils import cosine_similarity, extract_tags, tags_for_post

__all__ = [
    "ActivityCounts",
    "ActivityEvent",
    "DEFAULT_CONFIG",
    "EngineFailure",
    "EventType",
    "FeedStrategy",
    "Listing",
    "NotFoundError",
    "Post",
    "RankingConfig",
    "RankingError",
    "RelevanceWeights",
    "SimilarityEdge",
    "TagVector",
    "ValidationError",
    "all_pair_similarities",
    "cosine_similarity",
    "extract_tags",
    "normalize_tag_vector",
    "rank_feed",
    "rank_listings",
    "recommend_posts",
    "relevance_score",
    "resolve_config",
    "tags_for_post",
]
