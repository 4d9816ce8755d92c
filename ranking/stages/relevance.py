"""
Listing relevance: weighted sum of activity counts.
"""

from typing import Dict, Optional, Union

from ..models.activity import ActivityCounts
from ..models.config import RelevanceWeights

CountsLike = Union[ActivityCounts, Dict[str, int]]
WeightsLike = Union[RelevanceWeights, Dict[str, float]]


def _as_counts(counts: CountsLike) -> ActivityCounts:
    return counts if isinstance(counts, ActivityCounts) else ActivityCounts.model_validate(counts)


def _as_weights(weights: Optional[WeightsLike]) -> RelevanceWeights:
    if weights is None:
        return RelevanceWeights()
    return weights if isinstance(weights, RelevanceWeights) else RelevanceWeights.model_validate(weights)


def relevance_score(counts: CountsLike, weights: Optional[WeightsLike] = None) -> float:
    """
    view_w * views + click_w * clicks + offer_w * offers.

    Default weights favor conversion (0.1 / 0.3 / 0.6); pass another table to
    rank by a different philosophy, e.g. view-weighted.
    """
    c = _as_counts(counts)
    w = _as_weights(weights)
    return w.view * c.view + w.click * c.click + w.offer * c.offer
