"""
Unit tests for the in-memory entity store.
"""

import pytest

from catalog.errors import NotFoundError
from catalog.models import AuthorInput, BookInput
from catalog.store import EntityStore


def author_input(email="new.author@example.com"):
    return AuthorInput(name="New Author", email=email, bio="Writes things")


def book_input(isbn="978-1-4028-9462-6", author_id=1):
    return BookInput(title="New Book", isbn=isbn, published_year=2001, author_id=author_id)


class TestIdAssignment:
    """Test cases for next-id computation."""

    def test_empty_store_starts_at_one(self, empty_store):
        assert empty_store.next_author_id() == 1
        assert empty_store.next_book_id() == 1

    def test_max_plus_one(self, store):
        assert store.next_author_id() == 4
        assert store.next_book_id() == 6

    def test_deleted_max_id_is_reused(self, store):
        created = store.create_author(author_input())
        assert created.id == 4
        store.delete_author(4)
        again = store.create_author(author_input("other@example.com"))
        assert again.id == 4

    def test_gap_below_max_is_not_filled(self, store):
        store.delete_book(2)
        assert store.create_book(book_input()).id == 6


class TestLookup:
    """Test cases for lookups and primitives."""

    def test_find(self, store):
        assert store.find_author(2).name == "Stephen King"
        assert store.find_book(99) is None

    def test_find_index(self, store):
        assert store.find_book_index(3) == 2
        assert store.find_author_index(42) == -1

    def test_require_raises_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.require_book(42)
        assert str(exc_info.value) == "Book with ID 42 not found"

    def test_snapshot_is_a_copy(self, store):
        authors, books = store.snapshot()
        books.clear()
        assert len(store.books) == 5
        assert len(authors) == 3


class TestWritePath:
    """Test cases for create/update/delete."""

    def test_create_appends_in_order(self, store):
        book = store.create_book(book_input())
        assert store.books[-1] == book
        assert book.author_id == 1

    def test_update_keeps_id_and_position(self, store):
        updated = store.update_author(2, author_input("sk@example.com"))
        assert updated.id == 2
        assert store.authors[1].email == "sk@example.com"

    def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            store.update_book(77, book_input())

    def test_delete_author_leaves_books_orphaned(self, store):
        store.delete_author(1)
        assert store.find_author(1) is None
        assert [b.id for b in store.books_by_author(1)] == [1, 2]

    def test_delete_missing(self, store):
        with pytest.raises(NotFoundError):
            store.delete_author(99)

    def test_reset_and_seed(self, store, authors, books):
        store.reset()
        assert store.counts() == {"authors": 0, "books": 0}
        store.seed(authors, books)
        assert store.counts() == {"authors": 3, "books": 5}


def test_constructor_copies_lists(authors):
    store = EntityStore(authors=authors)
    store.authors.pop()
    assert len(authors) == 3
