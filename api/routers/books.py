"""
Book endpoints.

- POST   /books                     : create a book
- GET    /books                     : list books (sort, pagination)
- GET    /books/search              : free-text search (query, fields, pagination)
- GET    /books/filter              : filtered list (filters, sort, pagination)
- GET    /books/stats               : whole-collection statistics
- GET    /books/author/{authorId}   : books by an author (sort, pagination)
- GET    /books/{id}                : one book
- PUT    /books/{id}                : replace a book
- DELETE /books/{id}                : delete a book

The fixed-path routes are declared before ``/{book_id}`` so they are not
captured by it.
"""

from functools import partial
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Request, status

from api.dependencies import get_store
from api.responses import page_response, success_response
from catalog.models import BOOK_SORT_FIELDS
from catalog.query_engine import filter_books, run_query, search_books
from catalog.query_params import parse_book_filters, parse_pagination, parse_search, parse_sort
from catalog.stats import compute_book_stats
from catalog.store import EntityStore
from catalog.validation import parse_positive_id, validate_book_payload

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_book(
    payload: Any = Body(...),
    store: EntityStore = Depends(get_store),
):
    """
    Create a book.

    ``authorId`` must reference an existing author and ``isbn`` must not
    belong to another book.
    """
    with store.lock:
        data = validate_book_payload(store, payload)
        book = store.create_book(data)
    return success_response(
        book,
        message="Book created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
def list_books(request: Request, store: EntityStore = Depends(get_store)):
    """
    List books.

    - **sortBy**: id, title, publishedYear, isbn
    - **sortOrder**: asc, desc
    - **page** / **limit**: pagination (limit 1-100)
    """
    query = request.query_params
    sort = parse_sort(query, BOOK_SORT_FIELDS)
    pagination = parse_pagination(query)
    with store.lock:
        _, books = store.snapshot()
        page = run_query(books, sort, pagination)
    return page_response(page, count=len(page.data), sort=sort)


@router.get("/search")
def search_catalog(request: Request, store: EntityStore = Depends(get_store)):
    """
    Search books by title, ISBN and author name.

    - **query**: required search text
    - **fields**: comma-separated subset of title, isbn, author
    - **page** / **limit**: pagination
    """
    query = request.query_params
    params = parse_search(query)
    sort = parse_sort(query, BOOK_SORT_FIELDS)
    pagination = parse_pagination(query)
    with store.lock:
        authors, books = store.snapshot()
        page = run_query(
            books,
            sort,
            pagination,
            select=lambda records: search_books(records, authors, params),
        )
    logger.debug("Book search", query=params.query, matches=page.pagination.total)
    return page_response(
        page,
        count=len(page.data),
        sort=sort,
        filters=params.model_dump(mode="json"),
    )


@router.get("/filter")
def filter_catalog(request: Request, store: EntityStore = Depends(get_store)):
    """
    Filter books.

    - **authorId**, **publishedYear**: exact match
    - **publishedYearFrom** / **publishedYearTo**: inclusive range
    - **title**: case-insensitive substring
    - **isbn**: exact match
    - plus sort and pagination parameters
    """
    query = request.query_params
    filters = parse_book_filters(query)
    sort = parse_sort(query, BOOK_SORT_FIELDS)
    pagination = parse_pagination(query)
    with store.lock:
        _, books = store.snapshot()
        page = run_query(books, sort, pagination, select=partial(filter_books, filters=filters))
    return page_response(
        page,
        count=len(page.data),
        sort=sort,
        filters=filters.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/stats")
def book_stats(store: EntityStore = Depends(get_store)):
    """Statistics over every book and author."""
    with store.lock:
        authors, books = store.snapshot()
    return success_response(compute_book_stats(books, authors))


@router.get("/author/{author_id}")
def list_books_by_author(
    author_id: str,
    request: Request,
    store: EntityStore = Depends(get_store),
):
    """Books written by one author, sorted and paginated."""
    identifier = parse_positive_id(author_id, "Author")
    query = request.query_params
    sort = parse_sort(query, BOOK_SORT_FIELDS)
    pagination = parse_pagination(query)
    with store.lock:
        author = store.require_author(identifier)
        page = run_query(store.books_by_author(identifier), sort, pagination)
    return page_response(
        page,
        message=f"Books by {author.name}",
        count=len(page.data),
        sort=sort,
        filters={"authorId": identifier},
    )


@router.get("/{book_id}")
def get_book(book_id: str, store: EntityStore = Depends(get_store)):
    """Get a single book by ID."""
    book = store.require_book(parse_positive_id(book_id, "Book"))
    return success_response(book)


@router.put("/{book_id}")
def update_book(
    book_id: str,
    payload: Any = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Replace a book's fields; the ID is unchanged."""
    identifier = parse_positive_id(book_id, "Book")
    with store.lock:
        store.require_book(identifier)
        data = validate_book_payload(store, payload, book_id=identifier)
        book = store.update_book(identifier, data)
    return success_response(book, message="Book updated successfully")


@router.delete("/{book_id}")
def delete_book(book_id: str, store: EntityStore = Depends(get_store)):
    """Delete a book."""
    book = store.delete_book(parse_positive_id(book_id, "Book"))
    return success_response(book, message="Book deleted successfully")
