"""
Author endpoints.

- POST   /authors             : create an author
- GET    /authors             : list authors (sort, pagination)
- GET    /authors/{id}        : one author
- PUT    /authors/{id}        : replace an author
- DELETE /authors/{id}        : delete an author (books are not cascaded)
- GET    /authors/{id}/books  : books by an author (sort, pagination)
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request, status

from api.dependencies import get_store
from api.responses import page_response, success_response
from catalog.models import AUTHOR_SORT_FIELDS, BOOK_SORT_FIELDS
from catalog.query_engine import run_query
from catalog.query_params import parse_pagination, parse_sort
from catalog.store import EntityStore
from catalog.validation import parse_positive_id, validate_author_payload


router = APIRouter(prefix="/authors", tags=["Authors"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_author(
    payload: Any = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Create an author. Email must not belong to another author."""
    with store.lock:
        data = validate_author_payload(store, payload)
        author = store.create_author(data)
    return success_response(
        author,
        message="Author created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
def list_authors(request: Request, store: EntityStore = Depends(get_store)):
    """
    List authors.

    - **sortBy**: id, name, email
    - **sortOrder**: asc, desc
    - **page** / **limit**: pagination (limit 1-100)
    """
    query = request.query_params
    sort = parse_sort(query, AUTHOR_SORT_FIELDS)
    pagination = parse_pagination(query)
    with store.lock:
        authors, _ = store.snapshot()
        page = run_query(authors, sort, pagination)
    return page_response(page, count=len(page.data), sort=sort)


@router.get("/{author_id}")
def get_author(author_id: str, store: EntityStore = Depends(get_store)):
    """Get a single author by ID."""
    author = store.require_author(parse_positive_id(author_id, "Author"))
    return success_response(author)


@router.put("/{author_id}")
def update_author(
    author_id: str,
    payload: Any = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Replace an author's name, email and bio; the ID is unchanged."""
    identifier = parse_positive_id(author_id, "Author")
    with store.lock:
        store.require_author(identifier)
        data = validate_author_payload(store, payload, author_id=identifier)
        author = store.update_author(identifier, data)
    return success_response(author, message="Author updated successfully")


@router.delete("/{author_id}")
def delete_author(author_id: str, store: EntityStore = Depends(get_store)):
    """
    Delete an author.

    Books referencing the author keep their ``authorId``.
    """
    author = store.delete_author(parse_positive_id(author_id, "Author"))
    return success_response(author, message="Author deleted successfully")


@router.get("/{author_id}/books")
def list_author_books(
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
    filters: Dict[str, Any] = {"authorId": identifier}
    return page_response(
        page,
        message=f"Books by {author.name}",
        count=len(page.data),
        sort=sort,
        filters=filters,
    )
