"""Stats endpoint."""

from fastapi import APIRouter, Depends

from ..state import AppState, get_state

router = APIRouter()


@router.get("/stats")
async def get_stats(state: AppState = Depends(get_state)):
    """Backends in use and how many users currently have a tag vector."""
    vectors = await state.interactions.all_vectors(state.ranking_config.max_similarity_users)
    return {
        **state.describe(),
        "users_with_vectors": len(vectors),
        "dedup_window_seconds": state.ranking_config.dedup_window_seconds,
    }
