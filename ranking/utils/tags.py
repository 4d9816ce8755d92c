"""
Tag extraction — hashtags from free post text.
"""

import re
from typing import List

from ..models.content import Post

_HASHTAG = re.compile(r"#(\w+)")


def extract_tags(text) -> List[str]:
    """Lowercased '#word' matches in order of appearance. Duplicates are kept."""
    if not isinstance(text, str):
        return []
    return [m.lower() for m in _HASHTAG.findall(text)]


def tags_for_post(post: Post) -> List[str]:
    """Stored tags when present, else tags re-extracted from the post text."""
    if post.tags:
        return [str(t).lower() for t in post.tags]
    return extract_tags(post.desc or getattr(post, "description", "") or "")
