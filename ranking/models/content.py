"""
Content models — posts, comments, user profiles, and marketplace listings.

Supplied by the persistence layer. Built from API/JSON/Firestore dicts via
Model.model_validate(d) or the ensure_* helpers.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class Post(BaseModel):
    """
    A social-feed post.

    tags: lowercase tags extracted from desc when the post was written or edited;
    may contain duplicates. likes: ids of users who liked the post.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    desc: str = ""
    tags: List[str] = Field(default_factory=list)
    likes: List[str] = Field(default_factory=list)
    img: Optional[str] = None
    created_at: datetime = _EPOCH

    @field_validator("likes", mode="before")
    @classmethod
    def _likes_as_strings(cls, v):
        return [str(x) for x in v] if v else []

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class Comment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    post_id: str
    user_id: str
    text: str = ""
    created_at: datetime = _EPOCH


class UserProfile(BaseModel):
    """A platform user with declared interests and follow graph."""

    model_config = ConfigDict(extra="allow")

    id: str
    username: str = ""
    interests: List[str] = Field(default_factory=list)
    followings: List[str] = Field(default_factory=list)
    followers: List[str] = Field(default_factory=list)


class Listing(BaseModel):
    """A marketplace listing."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str = ""
    name: str = ""
    category: str = ""
    price: float = 0.0
    status: str = "Active"
    created_at: datetime = _EPOCH

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


def ensure_posts(items: List[Union[Dict, Post]]) -> List[Post]:
    """Convert list of dicts or Posts to list of Post models."""
    return [Post.model_validate(p) if isinstance(p, dict) else p for p in items]


def ensure_comments(items: List[Union[Dict, Comment]]) -> List[Comment]:
    return [Comment.model_validate(c) if isinstance(c, dict) else c for c in items]


def ensure_listings(items: List[Union[Dict, Listing]]) -> List[Listing]:
    return [Listing.model_validate(x) if isinstance(x, dict) else x for x in items]
