"""
Review Query Engine
===================

Filter / sort / paginate pipeline and aggregate statistics over an
in-memory ReviewCollection. Every operation is a pure read of the
snapshot; malformed numeric parameters degrade silently instead of
raising (rating -> matches nothing, page/limit -> defaults).

Usage:
    engine = QueryEngine(collection)
    page = engine.list_reviews({"rating": "5", "sort": "date", "order": "desc"})
    review = engine.get_by_id("42")
    stats = engine.stats()
    products = engine.distinct_products()
"""

import logging
import math
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from functools import cmp_to_key
from typing import Any, Callable, List

from .review_models import (
    Pagination,
    QueryParams,
    Review,
    ReviewCollection,
    ReviewNotFound,
    ReviewPage,
    ReviewStats,
    SortOrder,
    parse_int,
)

logger = logging.getLogger(__name__)

RECOGNIZED_PARAMS = (
    "rating", "product", "name", "dateFrom", "dateTo",
    "sort", "order", "page", "limit",
)


def _contains_ci(field_name: str, needle: str) -> Callable[[Review], bool]:
    needle = needle.lower()

    def predicate(review: Review) -> bool:
        value = review.get(field_name)
        return isinstance(value, str) and needle in value.lower()

    return predicate


def _date_bound(bound: str, upper: bool) -> Callable[[Review], bool]:
    def predicate(review: Review) -> bool:
        value = review.get("date")
        if not isinstance(value, str):
            return False
        return value <= bound if upper else value >= bound

    return predicate


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way compare with native ordering.

    Missing (None) or mutually incomparable values compare equal, so they
    never move relative to their neighbours.
    """
    if a is None or b is None:
        return 0
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        return 0
    return 0


def round_half_up(value: float, places: int = 2) -> float:
    """Round like JavaScript's toFixed: exact binary value, ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


class QueryEngine:
    """
    Read-only query operations over a loaded ReviewCollection.

    The collection is injected at construction and never mutated, so one
    engine can serve concurrent requests without coordination.
    """

    def __init__(self, collection: ReviewCollection):
        self.collection = collection

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------

    def filter_reviews(self, params: QueryParams) -> List[Review]:
        """Apply rating, product, name, dateFrom, dateTo filters in that order."""
        reviews = list(self.collection)

        if params.get("rating"):
            rating = parse_int(params["rating"])
            if rating is None:
                return []
            reviews = [r for r in reviews if r.get("rating") == rating]

        if params.get("product"):
            reviews = list(filter(_contains_ci("product", params["product"]), reviews))

        if params.get("name"):
            reviews = list(filter(_contains_ci("name", params["name"]), reviews))

        if params.get("dateFrom"):
            reviews = list(filter(_date_bound(params["dateFrom"], upper=False), reviews))

        if params.get("dateTo"):
            reviews = list(filter(_date_bound(params["dateTo"], upper=True), reviews))

        return reviews

    def sort_reviews(self, reviews: List[Review], params: QueryParams) -> List[Review]:
        sort_field = params.get("sort")
        if not sort_field:
            return reviews

        direction = -1 if SortOrder.from_param(params.get("order")) is SortOrder.DESC else 1

        def compare(a: Review, b: Review) -> int:
            return compare_values(a.get(sort_field), b.get(sort_field)) * direction

        return sorted(reviews, key=cmp_to_key(compare))

    def list_reviews(self, params: QueryParams) -> ReviewPage:
        """
        Filter, sort and paginate the collection.

        Args:
            params: Raw string parameters (unrecognized keys are ignored
                but echoed back in ``filters``)

        Returns:
            ReviewPage with the page slice, pagination metadata and filters
        """
        reviews = self.sort_reviews(self.filter_reviews(params), params)
        total = len(reviews)

        page = parse_int(params.get("page"))
        if page is None or page < 1:
            page = 1

        limit = parse_int(params.get("limit"))
        if not limit or limit < 0:
            limit = total

        start = (page - 1) * limit
        data = [dict(r) for r in reviews[start:start + limit]]
        total_pages = math.ceil(total / limit) if limit else 0

        ignored = sorted(k for k in params if k not in RECOGNIZED_PARAMS)
        if ignored:
            logger.debug("list_reviews ignoring unknown params: %s", ", ".join(ignored))

        logger.debug(
            "list_reviews matched %d of %d reviews (page=%d limit=%d)",
            total, len(self.collection), page, limit,
        )

        return ReviewPage(
            data=data,
            pagination=Pagination(page=page, limit=limit, total=total, total_pages=total_pages),
            filters=dict(params),
        )

    # ------------------------------------------------------------------
    # lookups & aggregates
    # ------------------------------------------------------------------

    def get_by_id(self, review_id: Any) -> Review:
        """
        Return the first review whose ``id`` equals the parsed value.

        Raises:
            ReviewNotFound: No match, including ids that do not parse
        """
        parsed = parse_int(review_id)
        if parsed is None:
            raise ReviewNotFound(review_id)

        for review in self.collection:
            if review.get("id") == parsed:
                return dict(review)

        raise ReviewNotFound(parsed)

    def stats(self) -> ReviewStats:
        """
        Compute totals, average rating and per-rating / per-product counts.

        An empty collection reports an average of 0.
        """
        total = len(self.collection)
        ratings = [r["rating"] for r in self.collection]
        average = round_half_up(sum(ratings) / total) if total else 0.0

        return ReviewStats(
            total_reviews=total,
            average_rating=average,
            rating_distribution=dict(Counter(ratings)),
            product_count=dict(Counter(r["product"] for r in self.collection)),
        )

    def distinct_products(self) -> List[str]:
        """Unique product names, ascending."""
        return sorted({r["product"] for r in self.collection})
