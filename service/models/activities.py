"""Activity tracking request/response models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ranking.models import ActivityCounts, ActivityEvent, BulkTrackError


class TrackRequest(BaseModel):
    # Optional here so missing fields reach the tracker and come back as a 400.
    listing_id: Optional[str] = None
    user_id: Optional[str] = None
    event_type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class TrackResponse(BaseModel):
    admitted: bool
    event: Optional[ActivityEvent] = None
    message: str


class BulkTrackRequest(BaseModel):
    activities: List[Any] = []


class BulkTrackResponse(BaseModel):
    tracked: int
    suppressed: int
    errors: List[BulkTrackError] = []


class ListingRelevanceResponse(BaseModel):
    listing_id: str
    counts: ActivityCounts
    score: float


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserHistoryResponse(BaseModel):
    activities: List[ActivityEvent]
    pagination: Pagination


class ActivityStats(BaseModel):
    view: int = 0
    click: int = 0
    offer: int = 0
    total: int = 0


class ActivityStatsResponse(BaseModel):
    timeframe: str
    stats: ActivityStats
