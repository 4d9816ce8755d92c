"""Post interaction ingestion and tag vector inspection."""

from typing import List

from fastapi import APIRouter, Depends

from ranking.models import SimilarityEdge
from ranking.utils import extract_tags

from ..models import (
    ExtractTagsRequest,
    ExtractTagsResponse,
    InteractionRequest,
    InteractionResponse,
    VectorResponse,
)
from ..state import AppState, get_state

router = APIRouter()
posts_router = APIRouter()


@router.post("", response_model=InteractionResponse)
async def record_interaction(request: InteractionRequest, state: AppState = Depends(get_state)):
    """Apply like/unlike/comment/view on a post to the user's tag vector."""
    return await state.recommender.record_interaction(
        request.user_id, request.post_id, request.action
    )


@router.get("/similarities", response_model=List[SimilarityEdge])
async def similarities(state: AppState = Depends(get_state)):
    """Every user pair with similarity > 0, with vector snapshots."""
    return await state.recommender.similarity_edges()


@router.get("/{user_id}", response_model=VectorResponse)
async def get_vector(user_id: str, state: AppState = Depends(get_state)):
    record = await state.interactions.get_record(user_id)
    return VectorResponse(
        user_id=user_id,
        vector=record.vector() if record else {},
        last_updated=record.last_updated if record else None,
    )


@posts_router.post("/tags", response_model=ExtractTagsResponse)
def tags_from_text(request: ExtractTagsRequest):
    return ExtractTagsResponse(tags=extract_tags(request.text))
