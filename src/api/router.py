"""
Review API Router
=================

Transport-independent dispatcher: takes a path plus flat string params,
runs the matching QueryEngine operation and returns a JSON-ready envelope.
The HTTP app and the CLI are thin adapters over this class; in-process
callers can use it directly.

Routes:
    GET /                  - API index
    GET /api/health        - Store status
    GET /api/reviews       - List reviews (filters, sort, pagination)
    GET /api/reviews/{id}  - Single review
    GET /api/stats         - Aggregate statistics
    GET /api/products      - Distinct product names

Usage:
    api = ReviewAPI()
    api.route("/api/reviews", {"rating": "5"})
    api.call("api/reviews?product=phone&sort=date&order=desc")
    api.get_review_by_id(3)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode

from ..data.config import get_settings
from ..data.review_loader import ReviewStore, get_store
from ..reviews.query_engine import QueryEngine
from ..reviews.review_models import EndpointNotFound, ReviewAPIError, ReviewNotFound

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "GET /api/reviews": "Get all reviews with optional filters",
    "GET /api/reviews/:id": "Get review by ID",
    "GET /api/stats": "Get statistics about reviews",
    "GET /api/products": "Get all unique products",
}

# Global router instance (singleton)
_api_instance: Optional["ReviewAPI"] = None


def success_envelope(data: Any, **extra: Any) -> Dict[str, Any]:
    envelope = {"success": True, "status": 200, "data": data}
    envelope.update(extra)
    return envelope


def error_envelope(status: int, message: str, **extra: Any) -> Dict[str, Any]:
    envelope = {"success": False, "status": status, "error": True, "message": message}
    envelope.update(extra)
    return envelope


def split_path(path: str) -> List[str]:
    """Split a request path into segments, tolerating a trailing .html."""
    parts = [p for p in path.split("/") if p]
    if parts and parts[-1].endswith(".html"):
        parts[-1] = parts[-1][: -len(".html")]
    return parts


def parse_query_string(query_string: str) -> Dict[str, str]:
    """Decode ``a=1&b=2`` into a flat dict; pairs with an empty key or value are dropped."""
    if not query_string:
        return {}
    return {k: v for k, v in parse_qsl(query_string, keep_blank_values=False) if k}


class ReviewAPI:
    """
    Dispatches API paths to the query engine and wraps results in envelopes.

    Errors never escape route(): known failures become 404 envelopes and
    anything unexpected becomes a 500 envelope carrying the message.
    """

    def __init__(self, store: Optional[ReviewStore] = None):
        self.store = store if store is not None else get_store()

    @property
    def engine(self) -> QueryEngine:
        return QueryEngine(self.store.get())

    def route(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Handle one request.

        Args:
            path: Request path, e.g. "/api/reviews/3" (leading slash optional)
            params: Flat string parameters (query string already decoded)

        Returns:
            Success or error envelope; ``status`` mirrors the HTTP status
        """
        params = dict(params or {})
        try:
            return self._dispatch(path, split_path(path), params)
        except EndpointNotFound as e:
            return error_envelope(e.status, e.message, path=e.path)
        except ReviewNotFound as e:
            logger.info(e.message, extra={"path": path, "status": e.status, "review_id": e.review_id})
            return error_envelope(e.status, e.message)
        except ReviewAPIError as e:
            return error_envelope(e.status, e.message)
        except Exception as e:
            logger.error(f"Unexpected failure handling {path}: {e}", exc_info=True, extra={"path": path, "status": 500})
            return error_envelope(500, str(e))

    def _dispatch(self, path: str, parts: List[str], params: Dict[str, Any]) -> Dict[str, Any]:
        if not parts:
            return self.index()

        if parts[0] == "api" and len(parts) == 2:
            if parts[1] == "reviews":
                page = self.engine.list_reviews(params)
                return success_envelope(
                    page.data,
                    pagination=page.pagination.to_dict(),
                    filters=page.filters,
                )
            if parts[1] == "stats":
                return success_envelope(self.engine.stats().to_dict())
            if parts[1] == "products":
                return success_envelope(self.engine.distinct_products())
            if parts[1] == "health":
                return self.health()

        if parts[0] == "api" and len(parts) == 3 and parts[1] == "reviews":
            return success_envelope(self.engine.get_by_id(parts[2]))

        raise EndpointNotFound(path)

    def index(self) -> Dict[str, Any]:
        config = get_settings()
        return {
            "success": True,
            "status": 200,
            "message": config.app_name,
            "version": config.app_version,
            "endpoints": dict(ENDPOINTS),
        }

    def health(self) -> Dict[str, Any]:
        collection = self.store.get()
        return {
            "success": True,
            "status": 200,
            "data": {
                "status": "degraded" if self.store.load_error else "ok",
                "reviewsLoaded": len(collection),
                "source": self.store.path,
                "loadError": self.store.load_error,
            },
        }

    # ------------------------------------------------------------------
    # Endpoint-string helpers
    # ------------------------------------------------------------------

    def call(self, endpoint: str) -> Dict[str, Any]:
        """Route an endpoint string such as ``api/reviews?rating=5``."""
        path, _, query_string = endpoint.partition("?")
        return self.route(path, parse_query_string(query_string))

    def get_all_reviews(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        query = urlencode({k: v for k, v in (filters or {}).items() if v not in (None, "")})
        return self.call("api/reviews" + (f"?{query}" if query else ""))

    def get_review_by_id(self, review_id: Any) -> Dict[str, Any]:
        return self.call(f"api/reviews/{review_id}")

    def get_stats(self) -> Dict[str, Any]:
        return self.call("api/stats")

    def get_products(self) -> Dict[str, Any]:
        return self.call("api/products")

    def get_reviews_by_rating(self, rating: Any) -> Dict[str, Any]:
        return self.get_all_reviews({"rating": rating})

    def get_reviews_by_product(self, product: str) -> Dict[str, Any]:
        return self.get_all_reviews({"product": product})


def get_api(force_new: bool = False) -> ReviewAPI:
    """Get singleton ReviewAPI bound to the default store."""
    global _api_instance

    if _api_instance is None or force_new:
        _api_instance = ReviewAPI()

    return _api_instance
