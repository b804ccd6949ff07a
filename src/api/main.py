"""
Review Data API FastAPI Application
===================================

Read-only REST API over the static reviews document.

Endpoints:
    GET  /                    - API index
    GET  /api/health          - Review store status
    GET  /api/reviews         - List reviews with filters, sorting, pagination
    GET  /api/reviews/{id}    - Get review by ID
    GET  /api/stats           - Review statistics
    GET  /api/products        - Unique products

Usage:
    uvicorn src.api.main:app --reload --port 8000

    Or with CLI:
    python -m src.api.main
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import time

from .logging_config import setup_logging_from_settings
from .models import IndexResponse
from .review_routes import router as review_router
from .router import error_envelope, get_api
from ..data.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging_from_settings()
    logger.info("Starting Review Data API...")

    # Load the document up front so the first request doesn't pay for it
    collection = get_api().store.get()
    logger.info(f"Review store ready ({len(collection)} reviews)", extra={"count": len(collection)})

    yield

    logger.info("Shutting down Review Data API...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        description="Read-only API over a static collection of product reviews",
        version=config.app_version,
        lifespan=lifespan,
    )

    origins = config.api.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log one line per request with its status and duration in ms."""
        start = time.perf_counter()
        response = await call_next(request)
        duration = round((time.perf_counter() - start) * 1000, 2)
        path = request.url.path
        logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration}ms)",
            extra={"path": path, "status": response.status_code, "duration": duration},
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Unknown routes and other HTTP errors use the same envelope as the API."""
        if exc.status_code == 404:
            envelope = error_envelope(404, "Endpoint not found", path=request.url.path)
        else:
            envelope = error_envelope(exc.status_code, str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=envelope)

    @app.get("/", response_model=IndexResponse)
    async def index():
        """API index with endpoint descriptions."""
        return get_api().index()

    app.include_router(review_router)

    return app


app = create_app()


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    config = get_settings()

    print("=" * 60)
    print("REVIEW DATA API SERVER")
    print("=" * 60)
    print()
    print(f"Starting server at http://{config.api.host}:{config.api.port}")
    print(f"Reviews document: {config.data.reviews_path}")
    print()
    print("Endpoints:")
    print("  GET  /api/reviews        - List reviews (filters, sort, pagination)")
    print("  GET  /api/reviews/{id}   - Get review by ID")
    print("  GET  /api/stats          - Review statistics")
    print("  GET  /api/products       - Unique products")
    print()
    print("=" * 60)

    uvicorn.run(
        "src.api.main:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.is_development(),
        log_level="info",
    )
