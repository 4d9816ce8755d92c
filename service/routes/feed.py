"""Personalized feed endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends

from ..models import FeedResponse
from ..state import AppState, get_state

router = APIRouter()


@router.get("/{user_id}", response_model=FeedResponse)
async def recommend_feed(
    user_id: str,
    strategy: str = "feed_ranking",
    limit: Optional[int] = None,
    state: AppState = Depends(get_state),
):
    """Rank posts for user_id with the feed_ranking or dedicated strategy."""
    return await state.recommender.recommend_feed(user_id, strategy, limit)
