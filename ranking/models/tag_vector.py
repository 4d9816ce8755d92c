"""
Tag vector model — a user's sparse hashtag → interaction weight mapping.

TagVector is the only in-memory shape used by the ranking code. Storage layers
hand back whatever they persisted (dicts, lists of pairs, Firestore maps);
normalize_tag_vector() turns any of those into a TagVector.
"""

from datetime import datetime, timezone
from numbers import Real
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from pydantic import BaseModel, Field

TagVector = Dict[str, float]


def normalize_tag_vector(
    raw: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None],
) -> TagVector:
    """
    Canonical normalization: lowercase keys, drop empty keys and
    non-numeric or non-positive weights.
    """
    out: TagVector = {}
    if not raw:
        return out
    entries = raw.items() if isinstance(raw, Mapping) else raw
    for tag, weight in entries:
        if tag is None:
            continue
        key = str(tag).strip().lower()
        if not key:
            continue
        if isinstance(weight, bool) or not isinstance(weight, (Real, str)):
            continue
        try:
            value = float(weight)
        except ValueError:
            continue
        if value > 0:
            out[key] = value
    return out


def binary_tag_vector(tags: Iterable[str]) -> TagVector:
    """Tag-presence vector: 1.0 for every distinct tag."""
    return {str(t).lower(): 1.0 for t in tags if t}


class TagVectorRecord(BaseModel):
    """Persisted tag vector for one user."""

    user_id: str
    tag_interactions: Dict[str, float] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def vector(self) -> TagVector:
        return normalize_tag_vector(self.tag_interactions)
