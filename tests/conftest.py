"""Shared fixtures: a small reviews document and API objects bound to it."""

import json

import pytest
from src.api.router import ReviewAPI
from src.data.review_loader import ReviewStore


SAMPLE_REVIEWS = [
    {"id": 1, "rating": 5, "product": "Smartphone X", "name": "Alice Martin", "date": "2024-01-05", "verified": True},
    {"id": 2, "rating": 3, "product": "Wireless Earbuds", "name": "Bruno Silva", "date": "2024-01-12"},
    {"id": 3, "rating": 1, "product": "Smartwatch Pro", "name": "Chloe Dubois", "date": "2024-01-20"},
    {"id": 4, "rating": 4, "product": "Smartphone X", "name": "David Okafor", "date": "2024-02-02"},
    {"id": 5, "rating": 5, "product": "Laptop Air 13", "name": "Emma Rossi", "date": "2024-02-14"},
]


@pytest.fixture
def reviews_path(tmp_path):
    path = tmp_path / "reviews.json"
    path.write_text(json.dumps({"reviews": SAMPLE_REVIEWS}), encoding="utf-8")
    return str(path)


@pytest.fixture
def review_api(reviews_path):
    return ReviewAPI(store=ReviewStore(reviews_path))


@pytest.fixture
def empty_api(tmp_path):
    """API whose document is missing, so the store degrades to empty."""
    return ReviewAPI(store=ReviewStore(str(tmp_path / "missing.json")))
