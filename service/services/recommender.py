"""
Post recommender: gathers vectors, candidate posts and neighbor comments,
then runs one of the two feed strategies.

Reads are awaited one after another; nothing is cached between requests.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from ranking.errors import EngineFailure, NotFoundError, RankingError, ValidationError
from ranking.models import Post, RankingConfig, ScoredPost, SimilarityEdge, resolve_config
from ranking.stages import FeedStrategy, all_pair_similarities, rank_feed, recommend_posts
from ranking.stages.feed import FeedRankingResult, build_base_vector
from ranking.stages.similarity import top_neighbors
from ranking.utils import tags_for_post

from .content_provider import ContentProvider
from .interaction_store import InteractionStore

logger = logging.getLogger(__name__)


def parse_strategy(strategy: Union[str, FeedStrategy, None]) -> FeedStrategy:
    if strategy is None:
        return FeedStrategy.FEED_RANKING
    try:
        return FeedStrategy(strategy)
    except ValueError:
        raise ValidationError(
            f"Unknown strategy {strategy!r}. Must be one of: "
            + ", ".join(s.value for s in FeedStrategy)
        )


class PostRecommender:
    def __init__(
        self,
        content: ContentProvider,
        interactions: InteractionStore,
        config: Optional[RankingConfig] = None,
    ):
        self._content = content
        self._interactions = interactions
        self._config = resolve_config(config)

    async def feed_ranking(self, user_id: str) -> FeedRankingResult:
        """FeedRanking strategy for user_id. NotFoundError when the user does not exist."""
        try:
            user = await self._content.get_user(user_id)
            if user is None:
                raise NotFoundError("user", user_id)
            vectors = await self._interactions.all_vectors(self._config.max_similarity_users)
            stored = vectors.get(user_id)
            if stored is None:
                stored = await self._interactions.get(user_id)
            posts = await self._content.get_posts(
                exclude_user_id=user_id, limit=self._config.max_candidate_posts
            )
            base_vector = build_base_vector(stored, user.interests, self._config.feed_interest_boost)
            neighbors = top_neighbors(user_id, base_vector, vectors, self._config.feed_top_neighbors)
            neighbor_ids = [n.user_id for n in neighbors]
            comments = await self._content.get_comments_by_users(neighbor_ids) if neighbor_ids else []
        except RankingError:
            raise
        except Exception as exc:
            logger.exception("[feed] STORAGE_FAILURE user_id=%s", user_id)
            raise EngineFailure(f"feed ranking failed for user {user_id}") from exc
        return rank_feed(
            user_id, stored, user.interests, vectors, posts, comments, self._config, neighbors
        )

    async def dedicated(self, user_id: str, limit: Optional[int] = None) -> List[ScoredPost]:
        """DedicatedRecommender strategy for user_id; [] when the user has no vector."""
        try:
            vectors = await self._interactions.all_vectors(self._config.max_similarity_users)
            if user_id not in vectors:
                record = await self._interactions.get_record(user_id)
                if record is None:
                    logger.info("[dedicated] NO_RECORD user_id=%s", user_id)
                    return []
                vectors[user_id] = record.vector()
            posts = await self._content.get_posts(
                exclude_user_id=user_id, limit=self._config.max_candidate_posts
            )
        except RankingError:
            raise
        except Exception as exc:
            logger.exception("[dedicated] STORAGE_FAILURE user_id=%s", user_id)
            raise EngineFailure(f"recommendation failed for user {user_id}") from exc
        return recommend_posts(user_id, vectors, posts, self._config, limit)

    async def recommend_feed(
        self,
        user_id: str,
        strategy: Union[str, FeedStrategy, None] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Dispatch to a strategy and return a uniform payload for the HTTP layer."""
        chosen = parse_strategy(strategy)
        if limit is not None and limit < 1:
            raise ValidationError(f"limit must be >= 1, got {limit}")
        if chosen is FeedStrategy.FEED_RANKING:
            result = await self.feed_ranking(user_id)
            posts = result.posts if limit is None else result.posts[:limit]
            return {
                "user_id": user_id,
                "strategy": chosen.value,
                "cold_start": result.cold_start,
                "fallback": result.fallback,
                "posts": posts,
            }
        scored = await self.dedicated(user_id, limit)
        return {
            "user_id": user_id,
            "strategy": chosen.value,
            "cold_start": False,
            "fallback": False,
            "posts": [s.post for s in scored],
            "scores": scored,
        }

    async def similarity_edges(self) -> List[SimilarityEdge]:
        vectors = await self._interactions.all_vectors(self._config.max_similarity_users)
        return all_pair_similarities(vectors, self._config.score_precision)

    async def record_interaction(self, user_id: str, post_id: str, action: str) -> Dict[str, Any]:
        """Apply a post interaction to the user's vector using the post's tags."""
        if not user_id or not post_id:
            raise ValidationError("Missing required fields: user_id, post_id")
        post: Optional[Post] = await self._content.get_post(post_id)
        if post is None:
            raise NotFoundError("post", post_id)
        tags = tags_for_post(post)
        record = await self._interactions.apply_action(user_id, tags, action)
        return {
            "user_id": user_id,
            "post_id": post_id,
            "action": action,
            "tags": tags,
            "updated": record is not None,
            "vector": record.vector() if record else await self._interactions.get(user_id),
        }
