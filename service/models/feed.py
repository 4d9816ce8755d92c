"""Feed recommendation response models."""

from typing import List, Optional

from pydantic import BaseModel

from ranking.models import Post, ScoredPost


class FeedResponse(BaseModel):
    user_id: str
    strategy: str
    cold_start: bool = False
    fallback: bool = False
    posts: List[Post]
    # Only the dedicated strategy exposes its score breakdown.
    scores: Optional[List[ScoredPost]] = None
