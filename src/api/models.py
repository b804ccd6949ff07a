"""
Review Data API Models
======================

Pydantic models for API response serialization.
Field names are camelCase to match the JSON envelopes consumers expect.
"""

from pydantic import BaseModel
from typing import List, Dict, Optional, Any, Union


class ReviewModel(BaseModel):
    """
    One review record. Only ``id`` is guaranteed; any other field in the
    source document is passed through as-is.
    """
    id: Any = None
    rating: Optional[Any] = None
    product: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None

    class Config:
        extra = "allow"


class PaginationModel(BaseModel):
    """Paging metadata for the list endpoint."""
    page: int
    limit: int
    total: int
    totalPages: int


class StatsModel(BaseModel):
    """Aggregate statistics."""
    totalReviews: int
    averageRating: float
    ratingDistribution: Dict[Union[int, float, str], int]
    productCount: Dict[str, int]
    fiveStarReviews: int
    oneStarReviews: int


class HealthModel(BaseModel):
    """Store health."""
    status: str
    reviewsLoaded: int
    source: str
    loadError: Optional[str] = None


class Envelope(BaseModel):
    """Fields shared by every successful response."""
    success: bool = True
    status: int = 200


class ReviewListResponse(Envelope):
    data: List[ReviewModel]
    pagination: PaginationModel
    filters: Dict[str, str]


class ReviewResponse(Envelope):
    data: ReviewModel


class StatsResponse(Envelope):
    data: StatsModel


class ProductsResponse(Envelope):
    data: List[str]


class HealthResponse(Envelope):
    data: HealthModel


class IndexResponse(Envelope):
    message: str
    version: str
    endpoints: Dict[str, str]


class ErrorResponse(BaseModel):
    """Error envelope (404 / 500)."""
    success: bool = False
    status: int
    error: bool = True
    message: str
    path: Optional[str] = None
