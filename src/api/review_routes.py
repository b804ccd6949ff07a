"""
Review API Routes
=================

GET /api/reviews       — list reviews (rating, product, name, dateFrom, dateTo,
                         sort, order, page, limit)
GET /api/reviews/{id}  — single review by id
GET /api/stats         — aggregate statistics
GET /api/products      — distinct product names
GET /api/health        — review store status

Each route also answers with a trailing ".html" (/api/stats.html); the
single-review route gets this for free since its id segment is a string.

Every handler delegates to ReviewAPI so HTTP responses carry exactly the
envelopes the in-process router produces.
"""

import logging
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .models import (
    ErrorResponse,
    HealthResponse,
    ProductsResponse,
    ReviewListResponse,
    ReviewResponse,
    StatsResponse,
)
from .router import ReviewAPI, get_api

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reviews"])

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_review_api() -> ReviewAPI:
    """FastAPI dependency returning the process-wide ReviewAPI."""
    return get_api()


def respond(envelope: Dict[str, Any]) -> Union[Dict[str, Any], JSONResponse]:
    """Pass 200 envelopes through response_model; send errors with their status."""
    if envelope["status"] != 200:
        return JSONResponse(status_code=envelope["status"], content=envelope)
    return envelope


@router.get("/reviews.html", response_model=ReviewListResponse, response_model_exclude_unset=True, include_in_schema=False)
@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def list_reviews(request: Request, api: ReviewAPI = Depends(get_review_api)):
    """
    List reviews.

    All query parameters arrive as strings and are echoed back in
    ``filters``. Malformed numbers never fail the request: a bad rating
    matches nothing and a bad page/limit falls back to its default.
    """
    return respond(api.route(request.url.path, dict(request.query_params)))


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def get_review(review_id: str, request: Request, api: ReviewAPI = Depends(get_review_api)):
    """Returns one review, or a 404 envelope when no review has that id."""
    return respond(api.route(request.url.path))


@router.get("/stats.html", response_model=StatsResponse, include_in_schema=False)
@router.get("/stats", response_model=StatsResponse, responses=ERROR_RESPONSES)
async def get_stats(request: Request, api: ReviewAPI = Depends(get_review_api)):
    """Totals, average rating, rating distribution and per-product counts."""
    return respond(api.route(request.url.path))


@router.get("/products.html", response_model=ProductsResponse, include_in_schema=False)
@router.get("/products", response_model=ProductsResponse, responses=ERROR_RESPONSES)
async def get_products(request: Request, api: ReviewAPI = Depends(get_review_api)):
    """Unique product names, sorted ascending."""
    return respond(api.route(request.url.path))


@router.get("/health.html", response_model=HealthResponse, include_in_schema=False)
@router.get("/health", response_model=HealthResponse, responses=ERROR_RESPONSES)
async def health_check(request: Request, api: ReviewAPI = Depends(get_review_api)):
    return respond(api.route(request.url.path))
