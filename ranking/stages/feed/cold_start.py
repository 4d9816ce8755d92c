"""
Cold-start fallback for the personalized feed: newest posts by other users.
"""

from typing import List

from ...models.content import Post


def recency_fallback(user_id: str, posts: List[Post], limit: int = 20) -> List[Post]:
    """Most recent posts not authored by user_id, newest first."""
    others = [p for p in posts if p.user_id != user_id]
    others.sort(key=lambda p: p.created_at, reverse=True)
    return others[:limit]
