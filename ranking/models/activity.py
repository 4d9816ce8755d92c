"""
Activity model — marketplace engagement events (view, click, offer) and their counts.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    VIEW = "view"
    CLICK = "click"
    OFFER = "offer"


EVENT_TYPES = tuple(e.value for e in EventType)


class ActivityEvent(BaseModel):
    """One user's interaction with one listing. Immutable once admitted."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    listing_id: str
    user_id: str
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def dedup_key(self) -> tuple:
        return (self.listing_id, self.user_id, self.event_type.value)


class ActivityCounts(BaseModel):
    """Aggregate event counts for one listing; absent types are 0."""

    view: int = 0
    click: int = 0
    offer: int = 0

    @property
    def total(self) -> int:
        return self.view + self.click + self.offer


class TrackResult(BaseModel):
    """
    Outcome of a track call. admitted=False with event=None means the event
    duplicated one inside the dedup window and was suppressed (not an error).
    """

    admitted: bool
    event: Optional[ActivityEvent] = None

    @classmethod
    def suppressed(cls) -> "TrackResult":
        return cls(admitted=False, event=None)

    @property
    def is_suppressed(self) -> bool:
        return not self.admitted


class BulkTrackError(BaseModel):
    index: int
    item: Dict[str, Any]
    error: str


class BulkTrackResult(BaseModel):
    tracked: int = 0
    suppressed: int = 0
    errors: List[BulkTrackError] = Field(default_factory=list)
