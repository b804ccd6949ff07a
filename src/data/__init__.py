"""
Review Data Module
==================

Configuration and the load-once review store backing the API.

This module provides:
    - Settings: environment-driven configuration (.env supported)
    - ReviewStore: lazy, memoized loader for the reviews JSON document

Quick Start:
    from src.data import get_store

    collection = get_store().get()
    print(f"{len(collection)} reviews loaded")

Configuration:
    Set environment variables or create a .env file.
    REVIEWS_PATH points at the {"reviews": [...]} document.
"""

from .config import get_settings, reset_settings, Settings
from .review_loader import ReviewStore, ReviewLoadError, get_store, read_reviews_document

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_settings",
    "reset_settings",
    "Settings",
    # Loading
    "ReviewStore",
    "ReviewLoadError",
    "get_store",
    "read_reviews_document",
]
