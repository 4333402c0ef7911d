"""
In-memory entity store for authors and books.

The store is the single source of truth for both collections and keeps them
in insertion order; filter, search and pagination results rely on that
order. It is created explicitly and handed to request handlers rather than
living in a module global.
"""

import threading
from typing import Iterable, List, Optional, Tuple

import structlog

from catalog.errors import NotFoundError
from catalog.models import Author, AuthorInput, Book, BookInput

logger = structlog.get_logger(__name__)


def _next_id(ids: Iterable[int]) -> int:
    # Deleting the current maximum lets its id be handed out again.
    return max(ids, default=0) + 1


class EntityStore:
    """
    Ordered author and book collections with id assignment and lookup.

    ``lock`` is re-entrant; request handlers hold it for the whole of a
    mutation or a filter/sort/paginate read so each request observes a
    stable view. The store methods themselves take it too, so single calls
    are safe without an outer scope.
    """

    def __init__(self, authors: Optional[List[Author]] = None, books: Optional[List[Book]] = None):
        self.authors: List[Author] = list(authors or [])
        self.books: List[Book] = list(books or [])
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def next_author_id(self) -> int:
        with self.lock:
            return _next_id(a.id for a in self.authors)

    def next_book_id(self) -> int:
        with self.lock:
            return _next_id(b.id for b in self.books)

    def find_author(self, author_id: int) -> Optional[Author]:
        with self.lock:
            return next((a for a in self.authors if a.id == author_id), None)

    def find_book(self, book_id: int) -> Optional[Book]:
        with self.lock:
            return next((b for b in self.books if b.id == book_id), None)

    def find_author_index(self, author_id: int) -> int:
        """Return the list position of an author, or -1."""
        with self.lock:
            for index, author in enumerate(self.authors):
                if author.id == author_id:
                    return index
            return -1

    def find_book_index(self, book_id: int) -> int:
        """Return the list position of a book, or -1."""
        with self.lock:
            for index, book in enumerate(self.books):
                if book.id == book_id:
                    return index
            return -1

    def append_author(self, author: Author) -> Author:
        with self.lock:
            self.authors.append(author)
            return author

    def append_book(self, book: Book) -> Book:
        with self.lock:
            self.books.append(book)
            return book

    def remove_author_at(self, index: int) -> Author:
        with self.lock:
            return self.authors.pop(index)

    def remove_book_at(self, index: int) -> Book:
        with self.lock:
            return self.books.pop(index)

    def snapshot(self) -> Tuple[List[Author], List[Book]]:
        """Shallow copies of both collections for a read pipeline."""
        with self.lock:
            return list(self.authors), list(self.books)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def require_author(self, author_id: int) -> Author:
        author = self.find_author(author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        return author

    def require_book(self, book_id: int) -> Book:
        book = self.find_book(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        return book

    def create_author(self, data: AuthorInput) -> Author:
        with self.lock:
            author = Author(id=self.next_author_id(), **data.model_dump())
            self.append_author(author)
        logger.info("Author created", author_id=author.id)
        return author

    def update_author(self, author_id: int, data: AuthorInput) -> Author:
        """Replace name, email and bio; the id never changes."""
        with self.lock:
            index = self.find_author_index(author_id)
            if index == -1:
                raise NotFoundError("Author", author_id)
            author = Author(id=author_id, **data.model_dump())
            self.authors[index] = author
        logger.info("Author updated", author_id=author_id)
        return author

    def delete_author(self, author_id: int) -> Author:
        """
        Remove an author.

        Books that reference the author are left in place with a dangling
        ``author_id``; there is no cascade.
        """
        with self.lock:
            index = self.find_author_index(author_id)
            if index == -1:
                raise NotFoundError("Author", author_id)
            author = self.remove_author_at(index)
            orphaned = sum(1 for b in self.books if b.author_id == author_id)
        logger.info("Author deleted", author_id=author_id, orphaned_books=orphaned)
        return author

    def create_book(self, data: BookInput) -> Book:
        with self.lock:
            book = Book(id=self.next_book_id(), **data.model_dump())
            self.append_book(book)
        logger.info("Book created", book_id=book.id, author_id=book.author_id)
        return book

    def update_book(self, book_id: int, data: BookInput) -> Book:
        with self.lock:
            index = self.find_book_index(book_id)
            if index == -1:
                raise NotFoundError("Book", book_id)
            book = Book(id=book_id, **data.model_dump())
            self.books[index] = book
        logger.info("Book updated", book_id=book_id)
        return book

    def delete_book(self, book_id: int) -> Book:
        with self.lock:
            index = self.find_book_index(book_id)
            if index == -1:
                raise NotFoundError("Book", book_id)
            book = self.remove_book_at(index)
        logger.info("Book deleted", book_id=book_id)
        return book

    def books_by_author(self, author_id: int) -> List[Book]:
        with self.lock:
            return [b for b in self.books if b.author_id == author_id]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        with self.lock:
            self.authors.clear()
            self.books.clear()

    def seed(self, authors: Iterable[Author], books: Iterable[Book]) -> None:
        """Replace both collections with the given records."""
        with self.lock:
            self.authors = list(authors)
            self.books = list(books)
        logger.info("Store seeded", authors=len(self.authors), books=len(self.books))

    def counts(self) -> dict:
        with self.lock:
            return {"authors": len(self.authors), "books": len(self.books)}
