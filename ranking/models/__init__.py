"""Data models for the ranking engine."""

from .activity import (
    EVENT_TYPES,
    ActivityCounts,
    ActivityEvent,
    BulkTrackError,
    BulkTrackResult,
    EventType,
    TrackResult,
)
from .config import DEFAULT_CONFIG, RankingConfig, RelevanceWeights, resolve_config
from .content import (
    Comment,
    Listing,
    Post,
    UserProfile,
    ensure_comments,
    ensure_listings,
    ensure_posts,
)
from .scoring import Neighbor, RankedListing, ScoredPost, SimilarityEdge
from .tag_vector import TagVector, TagVectorRecord, binary_tag_vector, normalize_tag_vector

__all__ = [
    "EVENT_TYPES",
    "ActivityCounts",
    "ActivityEvent",
    "BulkTrackError",
    "BulkTrackResult",
    "Comment",
    "DEFAULT_CONFIG",
    "EventType",
    "Listing",
    "Neighbor",
    "Post",
    "RankedListing",
    "RankingConfig",
    "RelevanceWeights",
    "ScoredPost",
    "SimilarityEdge",
    "TagVector",
    "TagVectorRecord",
    "TrackResult",
    "UserProfile",
    "binary_tag_vector",
    "ensure_comments",
    "ensure_listings",
    "ensure_posts",
    "normalize_tag_vector",
    "resolve_config",
]
