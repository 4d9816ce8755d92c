"""
Content provider abstraction.

Supplies users, posts, comments and listings to the ranking engine. The engine
only reads content; authoring and moderation live elsewhere.
Implementations: JSON file / dict (local, tests) and Firestore (cloud).
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from ranking.models import Comment, Listing, Post, UserProfile

from .firestore_client import create_async_client

logger = logging.getLogger(__name__)

# Firestore caps "in" filters at 30 values.
IN_QUERY_CHUNK = 30


class ContentProvider(Protocol):
    """Protocol for content access. Implement for JSON (file) or Firestore."""

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        ...

    async def get_post(self, post_id: str) -> Optional[Post]:
        ...

    async def get_posts(
        self,
        exclude_user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Post]:
        """Posts newest first, optionally excluding one author's. limit keeps the newest N."""
        ...

    async def get_comments_by_users(self, user_ids: Iterable[str]) -> List[Comment]:
        ...

    async def get_listing(self, listing_id: str) -> Optional[Listing]:
        ...

    async def get_listings(
        self,
        status: Optional[str] = "Active",
        category: Optional[str] = None,
    ) -> List[Listing]:
        ...

    def describe(self) -> Dict:
        """Backend name and, where cheap, entity counts (for /api/stats)."""
        ...


class JsonContentProvider:
    """
    Content provider backed by a JSON document:
    { "users": [...], "posts": [...], "comments": [...], "listings": [...] }.
    Also used in-memory via from_dict() for tests and local runs.
    """

    def __init__(self, path: Optional[Union[Path, str]] = None):
        self._path = Path(path) if path else None
        self._users: Dict[str, UserProfile] = {}
        self._posts: Dict[str, Post] = {}
        self._comments: List[Comment] = []
        self._listings: Dict[str, Listing] = {}
        if self._path is not None:
            self._load()

    @classmethod
    def from_dict(cls, data: Dict) -> "JsonContentProvider":
        provider = cls()
        provider._ingest(data)
        return provider

    def _load(self) -> None:
        if not self._path.exists():
            logger.warning("[content] JSON file not found: %s", self._path)
            return
        with open(self._path) as f:
            self._ingest(json.load(f))
        logger.info(
            "[content] Loaded %d users, %d posts, %d comments, %d listings from %s",
            len(self._users), len(self._posts), len(self._comments), len(self._listings), self._path,
        )

    def _ingest(self, data: Dict) -> None:
        for u in data.get("users", []):
            user = UserProfile.model_validate(u)
            self._users[user.id] = user
        for p in data.get("posts", []):
            post = Post.model_validate(p)
            self._posts[post.id] = post
        self._comments.extend(Comment.model_validate(c) for c in data.get("comments", []))
        for x in data.get("listings", []):
            listing = Listing.model_validate(x)
            self._listings[listing.id] = listing

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    async def get_post(self, post_id: str) -> Optional[Post]:
        return self._posts.get(post_id)

    async def get_posts(
        self,
        exclude_user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Post]:
        posts = [p for p in self._posts.values() if p.user_id != exclude_user_id]
        posts.sort(key=lambda p: p.created_at, reverse=True)
        if limit is not None:
            posts = posts[:limit]
        return posts

    async def get_comments_by_users(self, user_ids: Iterable[str]) -> List[Comment]:
        ids = set(user_ids)
        if not ids:
            return []
        return [c for c in self._comments if c.user_id in ids]

    async def get_listing(self, listing_id: str) -> Optional[Listing]:
        return self._listings.get(listing_id)

    async def get_listings(
        self,
        status: Optional[str] = "Active",
        category: Optional[str] = None,
    ) -> List[Listing]:
        return [
            x for x in self._listings.values()
            if (status is None or x.status == status)
            and (category is None or x.category == category)
        ]

    def describe(self) -> Dict:
        return {
            "backend": "json",
            "users": len(self._users),
            "posts": len(self._posts),
            "comments": len(self._comments),
            "listings": len(self._listings),
        }


class FirestoreContentProvider:
    """Content provider backed by Firestore collections users, posts, comments, listings."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        client=None,
    ):
        self._db = client or create_async_client(project_id, credentials_path)

    @staticmethod
    def _with_id(doc) -> Dict:
        d = doc.to_dict() or {}
        d.setdefault("id", doc.id)
        return d

    async def _get_doc(self, collection: str, doc_id: str) -> Optional[Dict]:
        if not doc_id:
            return None
        doc = await self._db.collection(collection).document(doc_id).get()
        return self._with_id(doc) if doc.exists else None

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        d = await self._get_doc("users", user_id)
        return UserProfile.model_validate(d) if d else None

    async def get_post(self, post_id: str) -> Optional[Post]:
        d = await self._get_doc("posts", post_id)
        return Post.model_validate(d) if d else None

    async def get_posts(
        self,
        exclude_user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Post]:
        from google.cloud.firestore_v1.query import Query as FirestoreQuery

        # Newest first. The viewer is filtered here: a "!=" filter would force
        # ordering on user_id before created_at.
        query = self._db.collection("posts").order_by(
            "created_at", direction=FirestoreQuery.DESCENDING
        )
        posts: List[Post] = []
        async for doc in query.stream():
            post = Post.model_validate(self._with_id(doc))
            if exclude_user_id and post.user_id == exclude_user_id:
                continue
            posts.append(post)
            if limit is not None and len(posts) >= limit:
                break
        return posts

    async def get_comments_by_users(self, user_ids: Iterable[str]) -> List[Comment]:
        from google.cloud.firestore_v1.base_query import FieldFilter

        ids = list(dict.fromkeys(user_ids))
        out: List[Comment] = []
        for start in range(0, len(ids), IN_QUERY_CHUNK):
            chunk = ids[start:start + IN_QUERY_CHUNK]
            query = self._db.collection("comments").where(filter=FieldFilter("user_id", "in", chunk))
            out.extend([Comment.model_validate(self._with_id(doc)) async for doc in query.stream()])
        return out

    async def get_listing(self, listing_id: str) -> Optional[Listing]:
        d = await self._get_doc("listings", listing_id)
        return Listing.model_validate(d) if d else None

    async def get_listings(
        self,
        status: Optional[str] = "Active",
        category: Optional[str] = None,
    ) -> List[Listing]:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = self._db.collection("listings")
        if status is not None:
            query = query.where(filter=FieldFilter("status", "==", status))
        if category is not None:
            query = query.where(filter=FieldFilter("category", "==", category))
        return [Listing.model_validate(self._with_id(doc)) async for doc in query.stream()]

    def describe(self) -> Dict:
        return {"backend": "firestore"}
