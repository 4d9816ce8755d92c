"""Marketplace listing ranking endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from ranking.models import RankedListing

from ..state import AppState, get_state

router = APIRouter()


@router.get("", response_model=List[RankedListing])
async def rank_listings(
    sort_by: str = "relevance",
    page: int = 1,
    page_size: Optional[int] = None,
    category: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """Active listings ordered by relevance, most-viewed, or a field sort; optionally paginated."""
    return await state.listing_ranker.rank(
        sort_by=sort_by, page=page, page_size=page_size, category=category
    )


@router.get("/recommendations", response_model=List[RankedListing])
async def recommended_listings(limit: int = 10, state: AppState = Depends(get_state)):
    return await state.listing_ranker.recommendations(limit)
