"""Listing activity tracking endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from ranking.errors import NotFoundError, ValidationError

from ..models import (
    ActivityStatsResponse,
    BulkTrackRequest,
    BulkTrackResponse,
    ListingRelevanceResponse,
    TrackRequest,
    TrackResponse,
    UserHistoryResponse,
)
from ..services.tracker import validate_event_type
from ..state import AppState, get_state

router = APIRouter()


@router.post("/track", response_model=TrackResponse)
async def track_activity(request: TrackRequest, state: AppState = Depends(get_state)):
    """Track one view/click/offer. Duplicates inside the dedup window come back admitted=false."""
    if not request.listing_id or not request.user_id or not request.event_type:
        raise ValidationError("Missing required fields: listing_id, user_id, event_type")
    validate_event_type(request.event_type)
    if await state.content.get_listing(request.listing_id) is None:
        raise NotFoundError("listing", request.listing_id)
    result = await state.tracker.track(
        request.listing_id, request.user_id, request.event_type, request.metadata
    )
    return TrackResponse(
        admitted=result.admitted,
        event=result.event,
        message="Activity tracked" if result.admitted else "Activity already recorded recently",
    )


@router.post("/track-bulk", response_model=BulkTrackResponse)
async def track_bulk(request: BulkTrackRequest, state: AppState = Depends(get_state)):
    """Track many events; each item succeeds, is suppressed, or is reported in errors."""
    result = await state.tracker.track_bulk(request.activities)
    return BulkTrackResponse(**result.model_dump())


@router.get("/listing/{listing_id}", response_model=ListingRelevanceResponse)
async def listing_relevance(listing_id: str, state: AppState = Depends(get_state)):
    if await state.content.get_listing(listing_id) is None:
        raise NotFoundError("listing", listing_id)
    return await state.tracker.listing_relevance(listing_id)


@router.get("/user/{user_id}", response_model=UserHistoryResponse)
async def user_history(
    user_id: str,
    page: int = 1,
    limit: int = 50,
    event_type: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    return await state.tracker.user_history(user_id, event_type, page=page, limit=limit)


@router.get("/stats", response_model=ActivityStatsResponse)
async def activity_stats(timeframe: str = "7d", state: AppState = Depends(get_state)):
    return await state.tracker.stats(timeframe)
