from contextlib import contextmanager
from datetime import datetime, timedelta

from book_service.errors import ConflictError, NotFoundError
from book_service.models import Book
from book_service.repository import BookStore, check_range


class TickingClock:
    """Returns a strictly later time on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def copy_book(book: Book) -> Book:
    return Book(
        id=book.id,
        version=book.version,
        title=book.title,
        author=book.author,
        price=book.price,
        isbn=book.isbn,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )


class InMemoryBookStore(BookStore):
    """BookStore keeping detached copies in a dict, with snapshot rollback."""

    def __init__(self, clock=None):
        self.rows: dict[int, Book] = {}
        self.writes = 0
        self._next_id = 1
        self._clock = clock or TickingClock()

    def add(self, **fields) -> Book:
        """Seed a stored record directly, bypassing the write counter."""
        book = Book(**fields)
        book.id = self._next_id
        book.version = 1
        book.created_at = book.updated_at = self._clock()
        self._next_id += 1
        self.rows[book.id] = copy_book(book)
        return book

    def find_all(self):
        return [copy_book(self.rows[key]) for key in sorted(self.rows)]

    def find_range(self, offset, limit):
        check_range(offset, limit)
        return self.find_all()[offset:offset + limit]

    def count(self):
        return len(self.rows)

    def find_by_id(self, book_id):
        stored = self.rows.get(book_id)
        return copy_book(stored) if stored is not None else None

    def save(self, book, expected_version=None):
        now = self._clock()
        if book.id is None:
            book.id = self._next_id
            self._next_id += 1
            book.version = 1
            book.created_at = now
        else:
            stored = self.rows.get(book.id)
            if stored is None:
                raise ConflictError(book.id)
            if expected_version is not None and stored.version != expected_version:
                raise ConflictError(book.id, expected_version, stored.version)
            if book.version != stored.version:
                raise ConflictError(book.id, book.version, stored.version)
            book.version = stored.version + 1
        book.updated_at = now
        self.rows[book.id] = copy_book(book)
        self.writes += 1
        return book

    def delete(self, book_id):
        if book_id not in self.rows:
            raise NotFoundError(book_id)
        del self.rows[book_id]
        self.writes += 1

    @contextmanager
    def transaction(self):
        snapshot = {key: copy_book(book) for key, book in self.rows.items()}
        next_id, writes = self._next_id, self.writes
        try:
            yield self
        except Exception:
            self.rows, self._next_id, self.writes = snapshot, next_id, writes
            raise
