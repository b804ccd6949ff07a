"""
Review Document Loader
======================

Loads the static JSON document ``{"reviews": [...]}`` once per process
and hands out the resulting immutable ReviewCollection.

A missing or malformed document is logged and degrades to an empty
collection: the API stays available and simply answers with no data.

Usage:
    from src.data.review_loader import get_store

    collection = get_store().get()
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, List, Optional, Union

from ..reviews.review_models import ReviewCollection
from .config import get_settings

logger = logging.getLogger(__name__)

# Global store instance (singleton)
_store_instance: Optional["ReviewStore"] = None


class ReviewLoadError(Exception):
    """Source document could not be turned into a review list."""


def read_reviews_document(path: Union[str, Path]) -> List[dict]:
    """
    Read and validate the reviews document.

    Raises:
        ReviewLoadError: File missing/unreadable, invalid JSON, or no
            ``reviews`` list at the top level
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document: Any = json.load(f)
    except OSError as e:
        raise ReviewLoadError(f"Cannot read {path}: {e}") from e
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise ReviewLoadError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(document, dict) or "reviews" not in document:
        raise ReviewLoadError(f"{path} has no top-level 'reviews' key")

    reviews = document["reviews"]
    if not isinstance(reviews, list):
        raise ReviewLoadError(f"'reviews' in {path} must be a list, got {type(reviews).__name__}")

    return [r for r in reviews if isinstance(r, dict)]


class ReviewStore:
    """
    Lazily loaded, load-once handle over the reviews document.

    The first call to get() reads the file; every later call returns the
    same collection. The load is guarded so concurrent first requests
    read the document only once.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Args:
            path: Document path. If None, reads REVIEWS_PATH from settings.
        """
        self.path = str(path) if path is not None else get_settings().data.reviews_path
        self._collection: Optional[ReviewCollection] = None
        self._lock = threading.Lock()
        self.load_error: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self._collection is not None

    def get(self) -> ReviewCollection:
        """Return the collection, loading it on first use."""
        if self._collection is not None:
            return self._collection

        with self._lock:
            if self._collection is None:
                self._collection = self._load()
        return self._collection

    def _load(self) -> ReviewCollection:
        try:
            records = read_reviews_document(self.path)
        except ReviewLoadError as e:
            self.load_error = str(e)
            logger.error(f"Error loading reviews: {e}")
            return ReviewCollection(source=self.path)

        logger.info(f"Loaded {len(records)} reviews from {self.path}", extra={"count": len(records)})
        return ReviewCollection.from_records(records, source=self.path)


def get_store(path: Optional[Union[str, Path]] = None, force_new: bool = False) -> ReviewStore:
    """
    Get singleton store instance.

    Args:
        path: Optional document path (only used if creating new instance)
        force_new: If True, create new instance even if one exists

    Returns:
        ReviewStore instance
    """
    global _store_instance

    if _store_instance is None or force_new:
        _store_instance = ReviewStore(path=path)

    return _store_instance
