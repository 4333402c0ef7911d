"""
Filter, search, sort and pagination over in-memory record lists.

Every function here is pure: inputs are never mutated and relative order is
preserved wherever the operation does not itself reorder. Requests apply
them in a fixed order: filter or search, then sort, then paginate.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from catalog.models import (
    DEFAULT_SEARCH_FIELDS,
    Author,
    Book,
    BookFilterParams,
    Page,
    PaginationMeta,
    PaginationParams,
    SearchField,
    SearchParams,
    SortOrder,
    SortParams,
)

T = TypeVar("T")

# Wire name -> model attribute
SORT_ATTRIBUTES: Dict[str, str] = {
    "id": "id",
    "title": "title",
    "publishedYear": "published_year",
    "isbn": "isbn",
    "name": "name",
    "email": "email",
}


def filter_books(books: Sequence[Book], filters: BookFilterParams) -> List[Book]:
    """Keep the books that satisfy every filter that is set."""
    title = filters.title.lower() if filters.title else None

    def matches(book: Book) -> bool:
        if filters.author_id is not None and book.author_id != filters.author_id:
            return False
        if filters.published_year is not None and book.published_year != filters.published_year:
            return False
        if filters.published_year_from is not None and book.published_year < filters.published_year_from:
            return False
        if filters.published_year_to is not None and book.published_year > filters.published_year_to:
            return False
        if title is not None and title not in book.title.lower():
            return False
        if filters.isbn is not None and book.isbn != filters.isbn:
            return False
        return True

    return [book for book in books if matches(book)]


def search_books(
    books: Sequence[Book],
    authors: Sequence[Author],
    params: SearchParams,
) -> List[Book]:
    """
    Keep the books where any requested field contains the query.

    Matching is case-insensitive substring containment. The ``author`` field
    resolves ``book.author_id`` against ``authors``; a book whose author no
    longer exists simply does not match on that field.
    """
    needle = params.query.strip().lower()
    if not needle:
        return list(books)

    fields = set(params.fields or DEFAULT_SEARCH_FIELDS)
    author_names: Dict[int, str] = {}
    if SearchField.AUTHOR in fields:
        author_names = {a.id: a.name.lower() for a in authors}

    def matches(book: Book) -> bool:
        if SearchField.TITLE in fields and needle in book.title.lower():
            return True
        if SearchField.ISBN in fields and needle in book.isbn.lower():
            return True
        if SearchField.AUTHOR in fields:
            name = author_names.get(book.author_id)
            if name is not None and needle in name:
                return True
        return False

    return [book for book in books if matches(book)]


def sort_key(sort_by: str) -> Callable[[Any], Any]:
    """Key function for one sort field; text compares case-insensitively."""
    attribute = SORT_ATTRIBUTES.get(sort_by, "id")

    def key(record: Any) -> Any:
        value = getattr(record, attribute)
        if isinstance(value, str):
            return value.lower()
        return value

    return key


def sort_records(records: Sequence[T], params: SortParams) -> List[T]:
    """
    Return a new stably sorted list.

    Descending order reverses the comparison rather than the result, so
    records with equal keys keep their original relative order either way.
    """
    return sorted(
        records,
        key=sort_key(params.sort_by),
        reverse=params.sort_order == SortOrder.DESC,
    )


def paginate(records: Sequence[T], params: PaginationParams) -> Page:
    """Slice out one page and describe where it sits in the full list."""
    total = len(records)
    total_pages = math.ceil(total / params.limit)
    start = (params.page - 1) * params.limit
    return Page(
        data=list(records[start:start + params.limit]),
        pagination=PaginationMeta(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_prev=params.page > 1,
        ),
    )


def run_query(
    records: Sequence[T],
    sort: SortParams,
    pagination: PaginationParams,
    select: Optional[Callable[[Sequence[T]], List[T]]] = None,
) -> Page:
    """Apply an optional selection step, then sort, then paginate."""
    selected = select(records) if select is not None else list(records)
    return paginate(sort_records(selected, sort), pagination)
