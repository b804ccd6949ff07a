"""
Review Data Models
==================

Records, collection and error types shared by the query engine and the
API shells. Reviews stay plain mappings so any extra fields in the source
document pass through untouched.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple
from enum import Enum


Review = Dict[str, Any]
QueryParams = Mapping[str, Any]

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def parse_int(value: Any) -> Optional[int]:
    """
    Parse a query-string value into an integer, never raising.

    Leading whitespace and sign are accepted, trailing garbage after the
    digits is ignored ("5abc" -> 5, "4.9" -> 4). Returns None when no
    digits lead the value.

    Only base 10 is read: a hex prefix stops at the "x", so "0x10" -> 0
    (JavaScript's parseInt would give 16).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _INT_PREFIX.match(value)
    if match is None:
        return None
    return int(match.group(1))


class SortOrder(str, Enum):
    """Sort direction for the list operation."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_param(cls, value: Any) -> "SortOrder":
        """Only an exact "desc" reverses; everything else sorts ascending."""
        return cls.DESC if value == cls.DESC.value else cls.ASC


@dataclass(frozen=True)
class ReviewCollection:
    """Ordered, immutable snapshot of reviews in load order."""
    reviews: Tuple[Review, ...] = ()
    source: Optional[str] = None

    @classmethod
    def from_records(cls, records: Iterable[Review], source: Optional[str] = None) -> "ReviewCollection":
        return cls(reviews=tuple(dict(r) for r in records), source=source)

    def __len__(self) -> int:
        return len(self.reviews)

    def __iter__(self) -> Iterator[Review]:
        return iter(self.reviews)

    @property
    def is_empty(self) -> bool:
        return not self.reviews


@dataclass
class Pagination:
    """Paging metadata for a list result."""
    page: int
    limit: int
    total: int           # filtered count, before paging
    total_pages: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass
class ReviewPage:
    """Result of a list query."""
    data: list
    pagination: Pagination
    filters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "pagination": self.pagination.to_dict(),
            "filters": self.filters,
        }


@dataclass
class ReviewStats:
    """Aggregate statistics over the whole collection."""
    total_reviews: int
    average_rating: float
    rating_distribution: Dict[Any, int]
    product_count: Dict[str, int]

    @property
    def five_star_reviews(self) -> int:
        return self.rating_distribution.get(5, 0)

    @property
    def one_star_reviews(self) -> int:
        return self.rating_distribution.get(1, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalReviews": self.total_reviews,
            "averageRating": self.average_rating,
            "ratingDistribution": dict(self.rating_distribution),
            "productCount": dict(self.product_count),
            "fiveStarReviews": self.five_star_reviews,
            "oneStarReviews": self.one_star_reviews,
        }


# ============================================================================
# ERRORS
# ============================================================================

class ReviewAPIError(Exception):
    """Base error carrying the HTTP-style status reported in envelopes."""
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReviewNotFound(ReviewAPIError):
    """No review has the requested id."""
    status = 404

    def __init__(self, review_id: Any):
        super().__init__(f"Review with ID {review_id} not found")
        self.review_id = review_id


class EndpointNotFound(ReviewAPIError):
    """No route matches the requested path."""
    status = 404

    def __init__(self, path: str):
        super().__init__("Endpoint not found")
        self.path = path
