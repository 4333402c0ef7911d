"""
Descriptive statistics over the whole book collection.
"""

import math
from collections import Counter
from typing import Dict, Sequence

from catalog.models import Author, AuthorBookCount, Book, BookStats, YearRange


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, not to even."""
    return int(math.floor(value + 0.5))


def compute_book_stats(books: Sequence[Book], authors: Sequence[Author]) -> BookStats:
    """
    Aggregate counts, per-year and per-author histograms and the year range.

    Always computed over the full collections. Books whose author no longer
    exists are left out of ``books_by_author`` but still count everywhere
    else. An empty book list yields zeroed aggregates.
    """
    stats = BookStats(total_books=len(books), total_authors=len(authors))
    if not books:
        return stats

    stats.books_by_year = dict(Counter(book.published_year for book in books))

    names = {author.id: author.name for author in authors}
    by_author: Dict[int, AuthorBookCount] = {}
    for book in books:
        name = names.get(book.author_id)
        if name is None:
            continue
        entry = by_author.setdefault(book.author_id, AuthorBookCount(count=0, author_name=name))
        entry.count += 1
    stats.books_by_author = by_author

    years = [book.published_year for book in books]
    stats.published_year_range = YearRange(earliest=min(years), latest=max(years))
    stats.average_published_year = round_half_up(sum(years) / len(years))
    return stats
