"""
User-to-user similarity over tag vectors.

all_pair_similarities compares every unordered pair of users, so a request
costs O(U^2 * T) for U users with an average of T tags. This is the scaling
ceiling of the feed; callers bound U through RankingConfig.max_similarity_users.
"""

import logging
from typing import Dict, List

from ..models.scoring import Neighbor, SimilarityEdge
from ..models.tag_vector import TagVector, normalize_tag_vector
from ..utils.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def all_pair_similarities(
    vectors: Dict[str, TagVector],
    precision: int = 4,
) -> List[SimilarityEdge]:
    """
    Cosine similarity for every unordered user pair with similarity > 0.

    Each edge carries copies of both vectors as they were at computation time.
    """
    normalized = {uid: normalize_tag_vector(vec) for uid, vec in vectors.items()}
    user_ids = list(normalized)
    edges: List[SimilarityEdge] = []
    for i, user_a in enumerate(user_ids):
        vec_a = normalized[user_a]
        if not vec_a:
            continue
        for user_b in user_ids[i + 1:]:
            vec_b = normalized[user_b]
            sim = cosine_similarity(vec_a, vec_b)
            if sim > 0:
                edges.append(
                    SimilarityEdge(
                        user_a=user_a,
                        user_b=user_b,
                        similarity=round(sim, precision),
                        vector_a=dict(vec_a),
                        vector_b=dict(vec_b),
                    )
                )
    logger.debug("[similarity] users=%d edges=%d", len(user_ids), len(edges))
    return edges


def neighbors_from_edges(
    user_id: str,
    edges: List[SimilarityEdge],
    threshold: float = 0.0,
) -> List[Neighbor]:
    """Edges touching user_id with similarity > threshold, most similar first."""
    neighbors = []
    for edge in edges:
        other = edge.other(user_id)
        if other is None or edge.similarity <= threshold:
            continue
        neighbors.append(Neighbor(user_id=other, similarity=edge.similarity))
    neighbors.sort(key=lambda n: n.similarity, reverse=True)
    return neighbors


def top_neighbors(
    user_id: str,
    base_vector: TagVector,
    vectors: Dict[str, TagVector],
    limit: int = 20,
) -> List[Neighbor]:
    """
    Most similar other users to base_vector (similarity > 0), capped at limit.

    base_vector may differ from the user's stored vector (e.g. interest-boosted),
    so similarity is computed directly rather than from all_pair_similarities.
    """
    scored = []
    for other_id, raw in vectors.items():
        if other_id == user_id:
            continue
        other_vec = normalize_tag_vector(raw)
        if not other_vec:
            continue
        sim = cosine_similarity(base_vector, other_vec)
        if sim > 0:
            scored.append(Neighbor(user_id=other_id, similarity=sim))
    scored.sort(key=lambda n: n.similarity, reverse=True)
    return scored[:limit]
