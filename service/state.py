"""Application state: content provider, stores, and the engine services built on them."""

import logging
from typing import Any, Dict, Optional

from ranking.models import RankingConfig, resolve_config

from .config import ServerConfig, get_config
from .services import (
    ActivityStore,
    ActivityTracker,
    ContentProvider,
    FirestoreActivityStore,
    FirestoreContentProvider,
    FirestoreInteractionStore,
    InMemoryActivityStore,
    InMemoryInteractionStore,
    InteractionStore,
    JsonContentProvider,
    ListingRanker,
    PostRecommender,
)

logger = logging.getLogger(__name__)


class AppState:
    """Global application state."""

    def __init__(
        self,
        content: ContentProvider,
        interactions: InteractionStore,
        activities: ActivityStore,
        ranking_config: Optional[RankingConfig] = None,
        config: Optional[ServerConfig] = None,
    ):
        self.config = config
        self.ranking_config = resolve_config(ranking_config)
        self.content = content
        self.interactions = interactions
        self.activities = activities
        self.tracker = ActivityTracker(activities, self.ranking_config)
        self.recommender = PostRecommender(content, interactions, self.ranking_config)
        self.listing_ranker = ListingRanker(content, self.tracker, self.ranking_config)

    @classmethod
    def in_memory(
        cls,
        content: Optional[Dict[str, Any]] = None,
        ranking_config: Optional[RankingConfig] = None,
    ) -> "AppState":
        """State with in-memory stores; content from a dict (tests, local runs)."""
        ranking_config = resolve_config(ranking_config)
        return cls(
            content=JsonContentProvider.from_dict(content or {}),
            interactions=InMemoryInteractionStore(ranking_config.action_weights),
            activities=InMemoryActivityStore(),
            ranking_config=ranking_config,
        )

    @classmethod
    def from_config(cls, config: ServerConfig) -> "AppState":
        """Pick backends from DATA_SOURCE: firebase, json, or in-memory."""
        ranking_config = config.load_ranking_config()
        if config.data_source == "firebase":
            kwargs = {
                "project_id": config.firebase_project_id,
                "credentials_path": config.firebase_credentials_path,
            }
            logger.info("[startup] Backends: Firestore (project=%s)", config.firebase_project_id)
            return cls(
                content=FirestoreContentProvider(**kwargs),
                interactions=FirestoreInteractionStore(
                    action_weights=ranking_config.action_weights, **kwargs
                ),
                activities=FirestoreActivityStore(**kwargs),
                ranking_config=ranking_config,
                config=config,
            )
        if config.data_source == "json":
            content: ContentProvider = JsonContentProvider(config.content_json_path)
            logger.info("[startup] Content provider: JSON (%s)", config.content_json_path)
        else:
            content = JsonContentProvider()
            logger.info("[startup] Content provider: in-memory (empty)")
        return cls(
            content=content,
            interactions=InMemoryInteractionStore(ranking_config.action_weights),
            activities=InMemoryActivityStore(),
            ranking_config=ranking_config,
            config=config,
        )

    def describe(self) -> Dict[str, Any]:
        return {
            "content": self.content.describe(),
            "interaction_store": type(self.interactions).__name__,
            "activity_store": type(self.activities).__name__,
        }


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        config = get_config()
        _, errors = config.validate()
        for err in errors:
            logger.warning("[startup] %s", err)
        _state = AppState.from_config(config)
    return _state
