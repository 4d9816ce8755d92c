"""Pydantic request/response models for the API."""

from .activities import (
    ActivityStatsResponse,
    BulkTrackRequest,
    BulkTrackResponse,
    ListingRelevanceResponse,
    TrackRequest,
    TrackResponse,
    UserHistoryResponse,
)
from .feed import FeedResponse
from .interactions import (
    ExtractTagsRequest,
    ExtractTagsResponse,
    InteractionRequest,
    InteractionResponse,
    VectorResponse,
)

__all__ = [
    "ActivityStatsResponse",
    "BulkTrackRequest",
    "BulkTrackResponse",
    "ExtractTagsRequest",
    "ExtractTagsResponse",
    "FeedResponse",
    "InteractionRequest",
    "InteractionResponse",
    "ListingRelevanceResponse",
    "TrackRequest",
    "TrackResponse",
    "UserHistoryResponse",
    "VectorResponse",
]
