"""
Sample data loaded into a fresh store when ``seed_sample_data`` is enabled.
"""

from typing import List

from catalog.models import Author, Book


def sample_authors() -> List[Author]:
    return [
        Author(
            id=1,
            name="J.K. Rowling",
            email="jk.rowling@example.com",
            bio="British author, best known for the Harry Potter series",
        ),
        Author(
            id=2,
            name="Stephen King",
            email="stephen.king@example.com",
            bio="American author of horror, supernatural fiction, suspense, and fantasy novels",
        ),
        Author(
            id=3,
            name="Agatha Christie",
            email="agatha.christie@example.com",
            bio="English writer known for her detective novels, especially those featuring Hercule Poirot",
        ),
    ]


def sample_books() -> List[Book]:
    return [
        Book(id=1, title="Harry Potter and the Philosopher's Stone", isbn="978-0-7475-3269-9",
             published_year=1997, author_id=1),
        Book(id=2, title="Harry Potter and the Chamber of Secrets", isbn="978-0-7475-3849-3",
             published_year=1998, author_id=1),
        Book(id=3, title="The Shining", isbn="978-0-385-12167-5",
             published_year=1977, author_id=2),
        Book(id=4, title="It", isbn="978-0-670-81302-4",
             published_year=1986, author_id=2),
        Book(id=5, title="Murder on the Orient Express", isbn="978-0-00-711926-2",
             published_year=1934, author_id=3),
    ]
