"""
Ranking configuration — action weights, relevance weights, and both feed strategies.

RankingConfig defaults are defined here. The server may pass a dict
(e.g. from a ranking config JSON file); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class RelevanceWeights(BaseModel):
    """Per-event-type weights for the listing relevance score."""

    view: float = 0.1
    click: float = 0.3
    offer: float = 0.6


class RankingConfig(BaseModel):
    """Configuration for feed and marketplace ranking."""

    # -------------------------------------------------------------------------
    # Interaction vector: delta applied to each tag of a post per action
    # -------------------------------------------------------------------------

    action_weight_like: float = 1.0
    action_weight_comment: float = 2.0
    action_weight_view: float = 0.5
    action_weight_unlike: float = -1.0

    # -------------------------------------------------------------------------
    # FeedRanking (general personalized feed)
    # final = feed_weight_content * content + feed_weight_collab * collab
    # collab = sum(sim of liking neighbors) + feed_comment_multiplier * sum(sim per neighbor comment)
    # -------------------------------------------------------------------------

    feed_weight_content: float = 0.6
    feed_weight_collab: float = 0.4
    feed_comment_multiplier: float = 1.2
    # Added to the base vector once per declared interest.
    feed_interest_boost: float = 1.0
    # Number of most similar users kept as neighbors.
    feed_top_neighbors: int = 20
    # Number of posts returned, also the size of the recency fallback.
    feed_result_limit: int = 20

    # -------------------------------------------------------------------------
    # DedicatedRecommender (standalone recommendation function)
    # final = dedicated_weight_content * cosine + dedicated_weight_collab * collab
    # collab = sum(sim of liking neighbors) + dedicated_author_multiplier * sum(sim of authoring neighbor)
    # -------------------------------------------------------------------------

    dedicated_weight_content: float = 0.7
    dedicated_weight_collab: float = 0.3
    dedicated_author_multiplier: float = 0.5
    # Neighbors at or below this similarity are ignored.
    dedicated_similarity_threshold: float = 0.1
    dedicated_default_limit: int = 10

    # Decimal places kept on similarity edges and dedicated score breakdowns.
    score_precision: int = 4

    # -------------------------------------------------------------------------
    # Marketplace activity
    # -------------------------------------------------------------------------

    relevance_weights: RelevanceWeights = RelevanceWeights()
    # Identical (listing, user, type) events inside this window are suppressed.
    dedup_window_seconds: int = 300

    # -------------------------------------------------------------------------
    # Scan bounds. all_pair_similarities is O(U^2 * T); these cap each request.
    # -------------------------------------------------------------------------

    max_similarity_users: int = 5000
    max_bulk_ids: int = 2000
    max_candidate_posts: int = 5000

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        for name, total in (
            ("feed_ranking", self.feed_weight_content + self.feed_weight_collab),
            ("dedicated", self.dedicated_weight_content + self.dedicated_weight_collab),
        ):
            if abs(total - 1.0) > 0.01:
                raise ValueError(f"{name} blend weights must sum to 1.0, got {total}")
        return self

    @property
    def action_weights(self) -> Dict[str, float]:
        return {
            "like": self.action_weight_like,
            "comment": self.action_weight_comment,
            "view": self.action_weight_view,
            "unlike": self.action_weight_unlike,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RankingConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        if "action_weights" in config_dict:
            for action, weight in config_dict["action_weights"].items():
                flat[f"action_weight_{action}"] = weight
        if "feed_ranking" in config_dict:
            fr = config_dict["feed_ranking"]
            for key in ("weight_content", "weight_collab", "comment_multiplier",
                        "interest_boost", "top_neighbors", "result_limit"):
                if key in fr:
                    flat[f"feed_{key}"] = fr[key]
        if "dedicated" in config_dict:
            dd = config_dict["dedicated"]
            for key in ("weight_content", "weight_collab", "author_multiplier",
                        "similarity_threshold", "default_limit"):
                if key in dd:
                    flat[f"dedicated_{key}"] = dd[key]
        if "relevance_weights" in config_dict:
            flat["relevance_weights"] = RelevanceWeights.model_validate(
                config_dict["relevance_weights"]
            )
        if "activity" in config_dict:
            act = config_dict["activity"]
            if "dedup_window_seconds" in act:
                flat["dedup_window_seconds"] = act["dedup_window_seconds"]
        if "limits" in config_dict:
            flat.update(config_dict["limits"])
        if "score_precision" in config_dict:
            flat["score_precision"] = config_dict["score_precision"]
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RankingConfig()


def resolve_config(config: Optional["RankingConfig"]) -> "RankingConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
