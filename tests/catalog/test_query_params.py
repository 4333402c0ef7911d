"""
Unit tests for query parameter parsing.
"""

import pytest

from catalog.errors import ValidationError
from catalog.models import BOOK_SORT_FIELDS, SearchField, SortOrder
from catalog.query_params import (
    parse_book_filters,
    parse_int,
    parse_pagination,
    parse_search,
    parse_sort,
)


class TestParseInt:
    """Test cases for lenient integer parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("12", 12),
        ("12abc", 12),
        (" 7", 7),
        ("-3", -3),
        ("abc", None),
        ("", None),
        (None, None),
    ])
    def test_parse_int(self, raw, expected):
        assert parse_int(raw) == expected


class TestParsePagination:
    """Test cases for page/limit parsing."""

    def test_defaults(self):
        params = parse_pagination({})
        assert params.page == 1
        assert params.limit == 10

    def test_valid_values(self):
        params = parse_pagination({"page": "3", "limit": "25"})
        assert params.page == 3
        assert params.limit == 25

    def test_non_numeric_falls_back_to_defaults(self):
        params = parse_pagination({"page": "abc", "limit": "lots"})
        assert params.page == 1
        assert params.limit == 10

    def test_limit_clamped_to_maximum(self):
        assert parse_pagination({"limit": "500"}).limit == 100

    def test_negative_values_clamped(self):
        params = parse_pagination({"page": "-4", "limit": "-5"})
        assert params.page == 1
        assert params.limit == 1

    def test_zero_treated_as_absent(self):
        params = parse_pagination({"page": "0", "limit": "0"})
        assert params.page == 1
        assert params.limit == 10


class TestParseSort:
    """Test cases for sort parsing against an allow-list."""

    def test_allowed_field(self):
        params = parse_sort({"sortBy": "title", "sortOrder": "desc"}, BOOK_SORT_FIELDS)
        assert params.sort_by == "title"
        assert params.sort_order == SortOrder.DESC

    def test_unknown_field_falls_back_to_first(self):
        params = parse_sort({"sortBy": "password"}, BOOK_SORT_FIELDS)
        assert params.sort_by == "id"

    def test_empty_allow_list_defaults_to_id(self):
        assert parse_sort({"sortBy": "title"}, []).sort_by == "id"

    @pytest.mark.parametrize("order", ["asc", "DESC", "descending", "", "garbage"])
    def test_anything_but_desc_is_asc(self, order):
        params = parse_sort({"sortOrder": order}, BOOK_SORT_FIELDS)
        assert params.sort_order == SortOrder.ASC


class TestParseBookFilters:
    """Test cases for book filter parsing."""

    def test_no_filters(self):
        filters = parse_book_filters({})
        assert filters.model_dump(exclude_none=True) == {}

    def test_all_filters(self):
        filters = parse_book_filters({
            "authorId": "2",
            "publishedYear": "1977",
            "publishedYearFrom": "1900",
            "publishedYearTo": "2000",
            "title": "  Shining ",
            "isbn": " 978-0-385-12167-5 ",
        })
        assert filters.author_id == 2
        assert filters.published_year == 1977
        assert filters.published_year_from == 1900
        assert filters.published_year_to == 2000
        assert filters.title == "Shining"
        assert filters.isbn == "978-0-385-12167-5"

    def test_unparseable_values_dropped(self):
        filters = parse_book_filters({"authorId": "x", "publishedYear": "soon", "title": "   "})
        assert filters.author_id is None
        assert filters.published_year is None
        assert filters.title is None


class TestParseSearch:
    """Test cases for search parsing."""

    def test_default_fields(self):
        params = parse_search({"query": " Potter "})
        assert params.query == "Potter"
        assert params.fields == [SearchField.TITLE, SearchField.ISBN, SearchField.AUTHOR]

    def test_explicit_fields(self):
        params = parse_search({"query": "king", "fields": "author, TITLE"})
        assert params.fields == [SearchField.AUTHOR, SearchField.TITLE]

    def test_unknown_fields_fall_back_to_defaults(self):
        params = parse_search({"query": "king", "fields": "publisher"})
        assert len(params.fields) == 3

    @pytest.mark.parametrize("query", [{}, {"query": ""}, {"query": "   "}])
    def test_missing_query_is_an_error(self, query):
        with pytest.raises(ValidationError) as exc_info:
            parse_search(query)
        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "VALIDATION_ERROR"
