"""Similarity scoring for the "you might also like" feed.

score = 3 same category + 3 same designer + 2 same style + 1 same period
      + 1 same country + 2 per shared tag + 2 per shared color

A foreign key only matches when both sides are set and equal; two products
without a designer do not share one.
"""

from collections.abc import Iterable
from operator import attrgetter
from typing import Any

from storefront.schemas.catalog import LISTABLE_STATUSES, ProductView, ScoredProduct
from storefront.store.base import ProductQuery

FOREIGN_KEY_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("category_id", 3),
    ("designer_id", 3),
    ("style_id", 2),
    ("period_id", 1),
    ("country_id", 1),
)
TAG_WEIGHT = 2
COLOR_WEIGHT = 2

# Columns a candidate must share with the reference (any one of them) to be fetched
CANDIDATE_COLUMNS: tuple[str, ...] = ("category_id", "designer_id", "style_id")

DEFAULT_LIMIT = 10


def _same(a: Any, b: Any) -> bool:
    return a is not None and b is not None and a == b


def score_candidate(reference: ProductView, candidate: ProductView) -> int:
    """Weighted relevance of ``candidate`` to ``reference``."""
    score = sum(
        weight
        for column, weight in FOREIGN_KEY_WEIGHTS
        if _same(getattr(reference, column), getattr(candidate, column))
    )
    score += TAG_WEIGHT * len(set(reference.tags) & set(candidate.tags))
    score += COLOR_WEIGHT * len(reference.color_ids & candidate.color_ids)
    return score


def rank_similar(
    reference: ProductView | None,
    candidates: Iterable[ProductView],
    limit: int = DEFAULT_LIMIT,
) -> list[ScoredProduct]:
    """Score every candidate and return the top ``limit``, best first.

    The sort is stable, so equal scores keep the pool's order (newest first
    as fetched). Candidates scoring 0 are kept; the feed only shrinks when
    the pool does.

    Args:
        reference: Product being viewed. None means not loaded yet.
        candidates: Pool already excluding the reference
        limit: Maximum results

    Returns:
        Scored candidates, or an empty list when there is no reference
    """
    if reference is None or limit <= 0:
        return []

    scored = [
        ScoredProduct(**{**dict(candidate), "score": score_candidate(reference, candidate)})
        for candidate in candidates
    ]
    scored.sort(key=attrgetter("score"), reverse=True)
    return scored[:limit]


def candidate_pool_query(reference: ProductView, limit: int) -> ProductQuery:
    """Store query for the similarity candidate pool of ``reference``.

    Listable products other than the reference that share its category,
    designer or style. With none of those set, any listable product qualifies.
    """
    any_of = {
        column: value
        for column in CANDIDATE_COLUMNS
        if (value := getattr(reference, column)) is not None
    }
    return ProductQuery(
        any_of=any_of,
        statuses=LISTABLE_STATUSES,
        exclude_id=reference.id,
        limit=limit,
    )
