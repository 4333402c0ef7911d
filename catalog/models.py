"""
Pydantic models for catalog records, write payloads and query directives.

Python attributes are snake_case; every field that is camelCase on the wire
carries an explicit alias, and ``populate_by_name`` lets both spellings in.
Serialise with ``model_dump(by_alias=True)``.
"""

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, StrictStr, field_validator
from pydantic.types import PositiveInt


# 10 or 13 digits, optionally hyphenated, with an X check digit allowed
ISBN_PATTERN = re.compile(
    r"^(?:\d{9}[\dX]|\d{13}|\d{1,5}-\d{1,7}-\d{1,6}-[\dX]|\d{3}-\d{1,5}-\d{1,7}-\d{1,6}-[\dX])$"
)

MIN_PUBLISHED_YEAR = 1000


class CatalogModel(BaseModel):
    """Base model accepting both attribute names and camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Author(CatalogModel):
    """Author record as held by the entity store."""
    id: PositiveInt = Field(..., description="Unique author identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique contact email")
    bio: str = Field(..., description="Short biography")


class Book(CatalogModel):
    """Book record as held by the entity store."""
    id: PositiveInt = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    isbn: str = Field(..., description="ISBN-10 or ISBN-13, hyphens allowed")
    published_year: int = Field(..., alias="publishedYear", description="Year of first publication")
    author_id: PositiveInt = Field(..., alias="authorId", description="Referenced author identifier")


# ---------------------------------------------------------------------------
# Write payloads
# ---------------------------------------------------------------------------

class AuthorInput(CatalogModel):
    """Validated body for creating or replacing an author."""
    name: StrictStr = Field(..., max_length=100)
    email: EmailStr = Field(..., max_length=150)
    bio: StrictStr = Field(..., max_length=500)

    @field_validator("name", "email", "bio", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace before length checks."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name", "bio")
    @classmethod
    def validate_not_blank(cls, v, info):
        if not v:
            raise ValueError(f"{info.field_name.capitalize()} must be a non-empty string")
        return v


class BookInput(CatalogModel):
    """Validated body for creating or replacing a book."""
    title: StrictStr = Field(..., max_length=200)
    isbn: StrictStr = Field(..., max_length=20)
    published_year: StrictInt = Field(..., alias="publishedYear")
    author_id: StrictInt = Field(..., alias="authorId")

    @field_validator("title", "isbn", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v:
            raise ValueError("Title must be a non-empty string")
        return v

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v):
        """Check ISBN-10/13 syntax, ignoring embedded whitespace."""
        if not v:
            raise ValueError("ISBN must be a non-empty string")
        if not ISBN_PATTERN.match(re.sub(r"\s", "", v)):
            raise ValueError("ISBN must be a valid format (10 or 13 digits, optionally with hyphens)")
        return v

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, v):
        current_year = date.today().year
        if v < MIN_PUBLISHED_YEAR or v > current_year:
            raise ValueError(f"Published year must be between {MIN_PUBLISHED_YEAR} and {current_year}")
        return v

    @field_validator("author_id")
    @classmethod
    def validate_author_id(cls, v):
        if v <= 0:
            raise ValueError("Author ID must be a positive integer")
        return v


# ---------------------------------------------------------------------------
# Query directives
# ---------------------------------------------------------------------------

class SortOrder(str, Enum):
    """Sort order options."""
    ASC = "asc"
    DESC = "desc"


class SearchField(str, Enum):
    """Fields a free-text search may look at."""
    TITLE = "title"
    ISBN = "isbn"
    AUTHOR = "author"


BOOK_SORT_FIELDS = ["id", "title", "publishedYear", "isbn"]
AUTHOR_SORT_FIELDS = ["id", "name", "email"]
DEFAULT_SEARCH_FIELDS = [SearchField.TITLE, SearchField.ISBN, SearchField.AUTHOR]


class PaginationParams(CatalogModel):
    """Page selection after parsing."""
    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(10, ge=1, le=100, description="Items per page")


class SortParams(CatalogModel):
    """Sort directive after parsing."""
    sort_by: str = Field("id", alias="sortBy", description="Allow-listed sort field")
    sort_order: SortOrder = Field(SortOrder.ASC, alias="sortOrder", description="Sort order")


class BookFilterParams(CatalogModel):
    """Optional book filters; ``None`` means no constraint."""
    author_id: Optional[int] = Field(None, alias="authorId")
    published_year: Optional[int] = Field(None, alias="publishedYear")
    published_year_from: Optional[int] = Field(None, alias="publishedYearFrom")
    published_year_to: Optional[int] = Field(None, alias="publishedYearTo")
    title: Optional[str] = Field(None, description="Case-insensitive substring")
    isbn: Optional[str] = Field(None, description="Exact match")


class SearchParams(CatalogModel):
    """Free-text search directive."""
    query: str = Field(..., min_length=1)
    fields: List[SearchField] = Field(default_factory=lambda: list(DEFAULT_SEARCH_FIELDS))


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class PaginationMeta(CatalogModel):
    """Pagination metadata returned alongside a page of records."""
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")


class Page(CatalogModel):
    """One page of records."""
    data: List[Any]
    pagination: PaginationMeta


class AuthorBookCount(CatalogModel):
    count: int
    author_name: str = Field(..., alias="authorName")


class YearRange(CatalogModel):
    earliest: int = 0
    latest: int = 0


class BookStats(CatalogModel):
    """Whole-collection aggregates over books."""
    total_books: int = Field(0, alias="totalBooks")
    total_authors: int = Field(0, alias="totalAuthors")
    books_by_year: Dict[int, int] = Field(default_factory=dict, alias="booksByYear")
    books_by_author: Dict[int, AuthorBookCount] = Field(default_factory=dict, alias="booksByAuthor")
    published_year_range: YearRange = Field(default_factory=YearRange, alias="publishedYearRange")
    average_published_year: int = Field(0, alias="averagePublishedYear")
