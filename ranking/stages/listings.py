"""
Marketplace listing ranking: activity-based or simple field sorts, then pagination.
"""

from typing import Dict, List, Optional

from ..errors import ValidationError
from ..models.activity import ActivityCounts
from ..models.config import RelevanceWeights
from ..models.content import Listing
from ..models.scoring import RankedListing
from .relevance import relevance_score

RELEVANCE = "relevance"
MOST_VIEWED = "most-viewed"
ACTIVITY_SORTS = (RELEVANCE, MOST_VIEWED)

# (key, reverse) for sorts that need no activity data.
FIELD_SORTS = {
    "newest": (lambda x: x.created_at, True),
    "oldest": (lambda x: x.created_at, False),
    "name": (lambda x: x.name, False),
    "price-low": (lambda x: x.price, False),
    "price-high": (lambda x: x.price, True),
}
DEFAULT_FIELD_SORT = "newest"


def needs_activity(sort_by: str) -> bool:
    return sort_by in ACTIVITY_SORTS


def paginate(items: List, page: int = 1, page_size: Optional[int] = None) -> List:
    """1-based page; page_size=None returns everything."""
    if page < 1:
        raise ValidationError(f"page must be >= 1, got {page}")
    if page_size is None:
        return list(items)
    if page_size < 1:
        raise ValidationError(f"page_size must be >= 1, got {page_size}")
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def _sort_by_value_then_newest(ranked: List[RankedListing], value) -> List[RankedListing]:
    # Two stable passes: newest first, then value descending keeps that order on ties.
    ranked.sort(key=lambda r: r.listing.created_at, reverse=True)
    ranked.sort(key=value, reverse=True)
    return ranked


def rank_listings(
    listings: List[Listing],
    counts_by_id: Optional[Dict[str, ActivityCounts]] = None,
    sort_by: str = RELEVANCE,
    page: int = 1,
    page_size: Optional[int] = None,
    weights: Optional[RelevanceWeights] = None,
) -> List[RankedListing]:
    """
    Order listings and return one page.

    relevance: relevance_score desc; most-viewed: view count desc. Both break
    ties by created_at desc and attach counts. Any other sort_by is a field
    sort (unknown values fall back to newest) with no activity data attached.
    """
    counts_by_id = counts_by_id or {}
    if sort_by == RELEVANCE:
        ranked = []
        for listing in listings:
            counts = counts_by_id.get(listing.id) or ActivityCounts()
            ranked.append(
                RankedListing(
                    listing=listing,
                    activity_counts=counts,
                    relevance_score=relevance_score(counts, weights),
                )
            )
        ranked = _sort_by_value_then_newest(ranked, lambda r: r.relevance_score)
    elif sort_by == MOST_VIEWED:
        ranked = []
        for listing in listings:
            counts = counts_by_id.get(listing.id) or ActivityCounts()
            ranked.append(
                RankedListing(listing=listing, activity_counts=counts, view_count=counts.view)
            )
        ranked = _sort_by_value_then_newest(ranked, lambda r: r.view_count)
    else:
        key, reverse = FIELD_SORTS.get(sort_by, FIELD_SORTS[DEFAULT_FIELD_SORT])
        ordered = sorted(listings, key=key, reverse=reverse)
        ranked = [RankedListing(listing=listing) for listing in ordered]
    return paginate(ranked, page, page_size)
