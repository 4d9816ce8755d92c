"""
Scoring models — derived, never persisted.

Contains:
- SimilarityEdge: one user pair with cosine similarity and vector snapshots
- Neighbor: a similar user as seen from one viewer
- ScoredPost: a post with its DedicatedRecommender score breakdown
- RankedListing: a listing with the activity data it was sorted by
"""

from typing import List, Optional

from pydantic import BaseModel

from .activity import ActivityCounts
from .content import Listing, Post
from .tag_vector import TagVector


class SimilarityEdge(BaseModel):
    user_a: str
    user_b: str
    similarity: float
    vector_a: TagVector
    vector_b: TagVector

    def other(self, user_id: str) -> Optional[str]:
        if self.user_a == user_id:
            return self.user_b
        if self.user_b == user_id:
            return self.user_a
        return None


class Neighbor(BaseModel):
    user_id: str
    similarity: float


class ScoredPost(BaseModel):
    """A post with all its scoring components."""

    post: Post
    tags: List[str]
    content_score: float
    collab_score: float
    final_score: float


class RankedListing(BaseModel):
    """A listing plus the counts and score used to order it (relevance / most-viewed only)."""

    listing: Listing
    activity_counts: Optional[ActivityCounts] = None
    relevance_score: Optional[float] = None
    view_count: Optional[int] = None
