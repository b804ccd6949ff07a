"""
Review Query Module
===================

In-memory review collection and the deterministic query engine that
serves the API: filtering, sorting, pagination and aggregate stats.

Modules:
    review_models — Review collection, result types, errors, parse_int
    query_engine  — QueryEngine (list / get_by_id / stats / distinct_products)
"""

from .review_models import (
    Review,
    ReviewCollection,
    ReviewPage,
    Pagination,
    ReviewStats,
    SortOrder,
    ReviewAPIError,
    ReviewNotFound,
    EndpointNotFound,
    parse_int,
)
from .query_engine import QueryEngine, RECOGNIZED_PARAMS
