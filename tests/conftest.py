"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.main import create_app
from catalog.models import Author, Book
from catalog.seed import sample_authors, sample_books
from catalog.store import EntityStore


@pytest.fixture
def authors():
    """The three sample authors."""
    return sample_authors()


@pytest.fixture
def books():
    """The five sample books (years 1997, 1998, 1977, 1986, 1934)."""
    return sample_books()


@pytest.fixture
def store(authors, books):
    """A fresh store holding the sample data."""
    return EntityStore(authors=authors, books=books)


@pytest.fixture
def empty_store():
    """A store with no records."""
    return EntityStore()


@pytest.fixture
def settings():
    """Settings that never read a local .env file."""
    return APIConfig(_env_file=None, seed_sample_data=False, debug=False)


@pytest.fixture
def app(settings, store):
    """Application serving the seeded store."""
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def make_book():
    """Factory for ad-hoc book records."""
    def _make(id, title="Book", isbn=None, published_year=2000, author_id=1):
        return Book(
            id=id,
            title=title,
            isbn=isbn or f"978000000{id:04d}",
            published_year=published_year,
            author_id=author_id,
        )
    return _make


@pytest.fixture
def make_author():
    """Factory for ad-hoc author records."""
    def _make(id, name="Author", email=None, bio="Bio"):
        return Author(id=id, name=name, email=email or f"author{id}@example.com", bio=bio)
    return _make
