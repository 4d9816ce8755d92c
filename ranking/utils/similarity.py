"""
Similarity utilities — cosine similarity between sparse tag vectors.
"""

import numpy as np

from ..models.tag_vector import TagVector


def cosine_similarity(v1: TagVector, v2: TagVector) -> float:
    """Cosine over the union of tags; 0.0 when either vector has zero norm."""
    if not v1 or not v2:
        return 0.0
    keys = sorted(set(v1) | set(v2))
    a = np.array([v1.get(k, 0.0) for k in keys], dtype=float)
    b = np.array([v2.get(k, 0.0) for k in keys], dtype=float)
    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0:
        return 0.0
    return float(min(1.0, max(0.0, np.dot(a, b) / norm_product)))
