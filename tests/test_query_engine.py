"""
Tests for the review QueryEngine.

Covers the filter / sort / paginate pipeline and the aggregates:
- Filters: rating (exact), product/name (case-insensitive substring), date range
- Sorting: native ordering, desc, missing fields
- Pagination: defaults, clamping, totalPages
- Lookups: get_by_id, distinct_products
- Stats: distribution, rounding, empty collection

Usage:
    pytest tests/test_query_engine.py -v
"""

import logging
import math

import pytest
from src.reviews.query_engine import QueryEngine, compare_values, round_half_up
from src.reviews.review_models import ReviewCollection, ReviewNotFound, parse_int


# ============================================================================
# TEST DATA
# ============================================================================

def make_review(id, rating, product, name, date, **extra) -> dict:
    """Helper to create a review dict."""
    return {"id": id, "rating": rating, "product": product, "name": name, "date": date, **extra}


TWO_REVIEWS = [
    make_review(1, 5, "A", "x", "2024-01-01"),
    make_review(2, 3, "B", "y", "2024-02-01"),
]

CATALOG = [
    make_review(1, 5, "Smartphone X", "Alice Martin", "2024-01-05", comment="Fast"),
    make_review(2, 3, "Wireless Earbuds", "Bruno Silva", "2024-01-12"),
    make_review(3, 1, "Smartwatch Pro", "Chloe Dubois", "2024-01-20"),
    make_review(4, 4, "Smartphone X", "David Okafor", "2024-02-02"),
    make_review(5, 5, "Laptop Air 13", "Emma Rossi", "2024-02-14"),
    make_review(6, 2, "Wireless Earbuds", "Farid Haddad", "2024-02-21"),
    make_review(7, 4, "Smartwatch Pro", "Grace Lee", "2024-03-03"),
]


def engine_for(records) -> QueryEngine:
    return QueryEngine(ReviewCollection.from_records(records))


# ============================================================================
# PARSING
# ============================================================================

class TestParseInt:
    """parse_int mirrors lenient query-string integer parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("5", 5),
        (" 7", 7),
        ("-3", -3),
        ("5abc", 5),
        ("4.9", 4),
        (12, 12),
        ("0x10", 0),
    ])
    def test_parses_leading_integer(self, raw, expected):
        assert parse_int(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "x5", None, "-", True, 4.5, "٥"])
    def test_invalid_returns_none(self, raw):
        assert parse_int(raw) is None


# ============================================================================
# FILTER TESTS
# ============================================================================

class TestFilters:
    """Tests for QueryEngine.list_reviews() filtering."""

    def setup_method(self):
        self.engine = engine_for(CATALOG)

    def test_rating_exact_match(self):
        """Every returned review has the requested rating."""
        page = self.engine.list_reviews({"rating": "4"})
        assert [r["id"] for r in page.data] == [4, 7]
        assert all(r["rating"] == 4 for r in page.data)

    def test_invalid_rating_matches_nothing(self):
        """An unparseable rating yields an empty result, not an error."""
        page = self.engine.list_reviews({"rating": "five"})
        assert page.data == []
        assert page.pagination.total == 0

    def test_empty_rating_is_ignored(self):
        page = self.engine.list_reviews({"rating": ""})
        assert page.pagination.total == len(CATALOG)

    def test_product_case_insensitive_substring(self):
        """product=PHONE matches 'Smartphone X'."""
        page = self.engine.list_reviews({"product": "PHONE"})
        assert {r["product"] for r in page.data} == {"Smartphone X"}
        assert page.pagination.total == 2

    def test_name_case_insensitive_substring(self):
        page = self.engine.list_reviews({"name": "lee"})
        assert [r["id"] for r in page.data] == [7]

    def test_date_bounds_inclusive(self):
        """Reviews dated exactly on dateFrom / dateTo are included."""
        page = self.engine.list_reviews({"dateFrom": "2024-01-20", "dateTo": "2024-02-14"})
        assert [r["id"] for r in page.data] == [3, 4, 5]

    def test_filters_combine_with_and(self):
        page = self.engine.list_reviews({"product": "smart", "rating": "4"})
        assert [r["id"] for r in page.data] == [4, 7]

    def test_missing_field_does_not_match(self):
        engine = engine_for([{"id": 1, "rating": 5, "date": "2024-01-01"}])
        assert engine.list_reviews({"product": "a"}).data == []
        assert engine.list_reviews({"name": "a"}).data == []

    def test_unrecognized_params_echoed_in_filters(self):
        params = {"rating": "5", "foo": "bar"}
        page = self.engine.list_reviews(params)
        assert page.filters == params

    def test_unrecognized_params_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="src.reviews.query_engine"):
            self.engine.list_reviews({"rating": "5", "foo": "bar", "zip": "1"})
        assert "ignoring unknown params: foo, zip" in caplog.text

    def test_extra_fields_pass_through(self):
        page = self.engine.list_reviews({"rating": "5", "product": "phone"})
        assert page.data[0]["comment"] == "Fast"

    def test_returned_records_are_copies(self):
        """Mutating a result never touches the loaded snapshot."""
        page = self.engine.list_reviews({})
        page.data[0]["rating"] = 0
        assert self.engine.list_reviews({}).data[0]["rating"] == 5


# ============================================================================
# SORT TESTS
# ============================================================================

class TestSorting:
    """Tests for the sort / order parameters."""

    def setup_method(self):
        self.engine = engine_for(CATALOG)

    def test_sort_ascending_by_default(self):
        page = self.engine.list_reviews({"sort": "date", "order": "sideways"})
        dates = [r["date"] for r in page.data]
        assert dates == sorted(dates)

    def test_sort_descending_numeric(self):
        page = self.engine.list_reviews({"sort": "rating", "order": "desc"})
        ratings = [r["rating"] for r in page.data]
        assert ratings == sorted(ratings, reverse=True)

    def test_sort_strings_lexicographic(self):
        page = self.engine.list_reviews({"sort": "name"})
        names = [r["name"] for r in page.data]
        assert names == sorted(names)

    def test_no_sort_keeps_load_order(self):
        page = self.engine.list_reviews({"order": "desc"})
        assert [r["id"] for r in page.data] == [r["id"] for r in CATALOG]

    def test_unknown_sort_field_keeps_order(self):
        """A field no record has compares equal everywhere."""
        page = self.engine.list_reviews({"sort": "nonexistent"})
        assert [r["id"] for r in page.data] == [r["id"] for r in CATALOG]

    def test_compare_values_missing_and_mixed(self):
        assert compare_values(None, 3) == 0
        assert compare_values(3, None) == 0
        assert compare_values("a", 3) == 0
        assert compare_values(1, 2) == -1
        assert compare_values("b", "a") == 1
        assert compare_values(2, 2) == 0


# ============================================================================
# PAGINATION TESTS
# ============================================================================

class TestPagination:
    """Tests for page / limit handling."""

    def setup_method(self):
        self.engine = engine_for(CATALOG)

    def test_defaults_return_everything(self):
        page = self.engine.list_reviews({})
        assert len(page.data) == len(CATALOG)
        assert page.pagination.to_dict() == {
            "page": 1, "limit": len(CATALOG), "total": len(CATALOG), "totalPages": 1,
        }

    @pytest.mark.parametrize("limit", [1, 2, 3, 5, 7, 10])
    def test_page_size_and_total_pages(self, limit):
        page = self.engine.list_reviews({"limit": str(limit)})
        assert len(page.data) <= limit
        assert page.pagination.total_pages == math.ceil(len(CATALOG) / limit)

    def test_second_page(self):
        page = self.engine.list_reviews({"page": "2", "limit": "3"})
        assert [r["id"] for r in page.data] == [4, 5, 6]

    def test_last_partial_page(self):
        page = self.engine.list_reviews({"page": "3", "limit": "3"})
        assert [r["id"] for r in page.data] == [7]

    def test_out_of_range_page_is_empty(self):
        page = self.engine.list_reviews({"page": "10", "limit": "3"})
        assert page.data == []
        assert page.pagination.page == 10
        assert page.pagination.total == len(CATALOG)

    @pytest.mark.parametrize("raw", ["0", "-2", "abc", ""])
    def test_non_positive_or_invalid_page_defaults_to_one(self, raw):
        page = self.engine.list_reviews({"page": raw, "limit": "2"})
        assert page.pagination.page == 1
        assert [r["id"] for r in page.data] == [1, 2]

    @pytest.mark.parametrize("raw", ["0", "abc", "-4"])
    def test_invalid_limit_means_no_pagination(self, raw):
        page = self.engine.list_reviews({"limit": raw})
        assert page.pagination.limit == len(CATALOG)
        assert page.pagination.total_pages == 1

    def test_empty_result_has_zero_pages(self):
        page = self.engine.list_reviews({"rating": "9"})
        assert page.pagination.to_dict() == {"page": 1, "limit": 0, "total": 0, "totalPages": 0}

    def test_scenario_rating_five(self):
        """list({rating: "5"}) on the two-review collection."""
        page = engine_for(TWO_REVIEWS).list_reviews({"rating": "5"})
        assert page.data == [TWO_REVIEWS[0]]
        assert page.pagination.to_dict() == {"page": 1, "limit": 1, "total": 1, "totalPages": 1}


# ============================================================================
# LOOKUP TESTS
# ============================================================================

class TestGetById:
    """Tests for QueryEngine.get_by_id()."""

    def setup_method(self):
        self.engine = engine_for(TWO_REVIEWS)

    def test_found(self):
        assert self.engine.get_by_id("2") == TWO_REVIEWS[1]

    def test_accepts_int(self):
        assert self.engine.get_by_id(1)["product"] == "A"

    def test_idempotent(self):
        assert self.engine.get_by_id("1") == self.engine.get_by_id("1")

    def test_not_found_carries_id(self):
        with pytest.raises(ReviewNotFound) as exc_info:
            self.engine.get_by_id(99)
        assert exc_info.value.review_id == 99
        assert exc_info.value.status == 404
        assert exc_info.value.message == "Review with ID 99 not found"

    def test_unparseable_id_is_not_found(self):
        with pytest.raises(ReviewNotFound):
            self.engine.get_by_id("abc")

    def test_duplicate_ids_first_wins(self):
        engine = engine_for([
            make_review(1, 5, "First", "x", "2024-01-01"),
            make_review(1, 2, "Second", "y", "2024-01-02"),
        ])
        assert engine.get_by_id(1)["product"] == "First"


class TestDistinctProducts:
    """Tests for QueryEngine.distinct_products()."""

    def test_sorted_and_unique(self):
        products = engine_for(CATALOG).distinct_products()
        assert products == sorted(set(products))
        assert products == ["Laptop Air 13", "Smartphone X", "Smartwatch Pro", "Wireless Earbuds"]

    def test_empty_collection(self):
        assert engine_for([]).distinct_products() == []


# ============================================================================
# STATS TESTS
# ============================================================================

class TestStats:
    """Tests for QueryEngine.stats()."""

    def test_scenario_two_reviews(self):
        stats = engine_for(TWO_REVIEWS).stats()
        assert stats.total_reviews == 2
        assert stats.average_rating == 4.0
        assert stats.rating_distribution == {5: 1, 3: 1}
        assert stats.five_star_reviews == 1
        assert stats.one_star_reviews == 0

    def test_distribution_sums_to_total(self):
        stats = engine_for(CATALOG).stats()
        assert sum(stats.rating_distribution.values()) == stats.total_reviews

    def test_product_count(self):
        stats = engine_for(CATALOG).stats()
        assert stats.product_count["Smartphone X"] == 2
        assert stats.product_count["Laptop Air 13"] == 1

    def test_average_rounded_to_two_places(self):
        records = [make_review(i, r, "P", "n", "2024-01-01") for i, r in enumerate([5, 4, 4], 1)]
        assert engine_for(records).stats().average_rating == 4.33

    def test_empty_collection_average_is_zero(self):
        stats = engine_for([]).stats()
        assert stats.total_reviews == 0
        assert stats.average_rating == 0
        assert stats.to_dict()["ratingDistribution"] == {}

    def test_to_dict_keys(self):
        data = engine_for(TWO_REVIEWS).stats().to_dict()
        assert set(data) == {
            "totalReviews", "averageRating", "ratingDistribution",
            "productCount", "fiveStarReviews", "oneStarReviews",
        }

    def test_missing_rating_raises(self):
        """Aggregation over a malformed record fails loudly for the router to report."""
        with pytest.raises(KeyError):
            engine_for([{"id": 1, "product": "A"}]).stats()

    def test_round_half_up(self):
        assert round_half_up(4.125) == 4.13
        assert round_half_up(2.5) == 2.5
        assert round_half_up(3.333333) == 3.33
