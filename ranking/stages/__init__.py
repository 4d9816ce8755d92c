"""Ranking stages: similarity, feed strategies, listing relevance and ordering."""

from .feed import FeedStrategy, rank_feed, recommend_posts
from .listings import rank_listings
from .relevance import relevance_score
from .similarity import all_pair_similarities, neighbors_from_edges, top_neighbors

__all__ = [
    "FeedStrategy",
    "all_pair_similarities",
    "neighbors_from_edges",
    "rank_feed",
    "rank_listings",
    "recommend_posts",
    "relevance_score",
    "top_neighbors",
]
