"""
Query parameter parsing.

Turns raw string-keyed query input into typed directives. Malformed
pagination, sort and filter values never raise: they fall back to defaults
or are dropped. The one hard failure is a missing or blank search query.
"""

import re
from typing import List, Mapping, Optional, Sequence

from catalog.errors import ValidationError
from catalog.models import (
    DEFAULT_SEARCH_FIELDS,
    BookFilterParams,
    PaginationParams,
    SearchField,
    SearchParams,
    SortOrder,
    SortParams,
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

QueryInput = Mapping[str, Optional[str]]


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a string.

    ``"12"`` and ``"12abc"`` both give 12; ``"abc"``, ``""`` and ``None``
    give ``None``.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def parse_pagination(query: QueryInput) -> PaginationParams:
    """
    Parse ``page`` and ``limit``.

    Non-numeric and zero values fall back to the defaults; ``page`` is
    clamped to at least 1 and ``limit`` to ``[1, 100]``.
    """
    page = parse_int(query.get("page")) or DEFAULT_PAGE
    limit = parse_int(query.get("limit")) or DEFAULT_LIMIT
    return PaginationParams(
        page=max(1, page),
        limit=min(MAX_LIMIT, max(1, limit)),
    )


def parse_sort(query: QueryInput, allowed_fields: Sequence[str]) -> SortParams:
    """Parse ``sortBy``/``sortOrder`` against an endpoint's allow-list."""
    requested = query.get("sortBy")
    if requested in allowed_fields:
        sort_by = requested
    else:
        sort_by = allowed_fields[0] if allowed_fields else "id"
    sort_order = SortOrder.DESC if query.get("sortOrder") == "desc" else SortOrder.ASC
    return SortParams(sort_by=sort_by, sort_order=sort_order)


def _parse_text(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_book_filters(query: QueryInput) -> BookFilterParams:
    """Collect the book filters that parse cleanly; drop the rest."""
    return BookFilterParams(
        author_id=parse_int(query.get("authorId")),
        published_year=parse_int(query.get("publishedYear")),
        published_year_from=parse_int(query.get("publishedYearFrom")),
        published_year_to=parse_int(query.get("publishedYearTo")),
        title=_parse_text(query.get("title")),
        isbn=_parse_text(query.get("isbn")),
    )


def parse_search_fields(raw: Optional[str]) -> List[SearchField]:
    """Split a comma-separated field list, keeping only known fields."""
    if not raw:
        return list(DEFAULT_SEARCH_FIELDS)
    known = {f.value for f in SearchField}
    fields: List[SearchField] = []
    for part in raw.split(","):
        name = part.strip().lower()
        if name in known and SearchField(name) not in fields:
            fields.append(SearchField(name))
    return fields or list(DEFAULT_SEARCH_FIELDS)


def parse_search(query: QueryInput) -> SearchParams:
    """
    Parse ``query`` and ``fields`` for a free-text search.

    Raises:
        ValidationError: if ``query`` is missing or blank after trimming.
    """
    text = _parse_text(query.get("query"))
    if text is None:
        raise ValidationError("Search query is required", field="query")
    return SearchParams(query=text, fields=parse_search_fields(query.get("fields")))
