"""Backing logic: stores, providers, tracker, recommenders."""

from .activity_store import ActivityStore, InMemoryActivityStore
from .content_provider import ContentProvider, FirestoreContentProvider, JsonContentProvider
from .firestore_activity_store import FirestoreActivityStore
from .firestore_interaction_store import FirestoreInteractionStore
from .interaction_store import InMemoryInteractionStore, InteractionStore
from .marketplace import ListingRanker
from .recommender import PostRecommender, parse_strategy
from .tracker import ActivityTracker

__all__ = [
    "ActivityStore",
    "ActivityTracker",
    "ContentProvider",
    "FirestoreActivityStore",
    "FirestoreContentProvider",
    "FirestoreInteractionStore",
    "InMemoryActivityStore",
    "InMemoryInteractionStore",
    "InteractionStore",
    "JsonContentProvider",
    "ListingRanker",
    "PostRecommender",
    "parse_strategy",
]
