"""Shared utilities for tag extraction and vector similarity."""

from .similarity import cosine_similarity
from .tags import extract_tags, tags_for_post

__all__ = [
    "cosine_similarity",
    "extract_tags",
    "tags_for_post",
]
