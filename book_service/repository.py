"""
Persistence of Book records.

BookService depends only on the BookStore interface so tests can
substitute an in-memory store; SqlAlchemyBookStore is the implementation
used by the application.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from book_service.errors import ConflictError, NotFoundError
from book_service.models import Book

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    # naive UTC, the way SQLite hands DateTime columns back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def check_range(offset: int, limit: int) -> None:
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")


class BookStore(ABC):
    """
    Interface for Book storage.

    Implementations must:
    - assign id, version and timestamps on insert
    - bump version and updated_at on every update
    - refuse writes made against a stale version
    """

    @abstractmethod
    def find_all(self) -> List[Book]:
        """Return every book. Ordering is not part of the contract."""

    @abstractmethod
    def find_range(self, offset: int, limit: int) -> List[Book]:
        """
        Return at most ``limit`` books starting at ``offset``.

        Raises:
            ValueError: If offset is negative or limit is not positive
        """

    @abstractmethod
    def count(self) -> int:
        """Total number of books, over the same read as find_range."""

    @abstractmethod
    def find_by_id(self, book_id: int) -> Optional[Book]:
        """Return the book or None if no such record exists."""

    @abstractmethod
    def save(self, book: Book, expected_version: Optional[int] = None) -> Book:
        """
        Insert a new book (id unset) or update an existing one.

        Args:
            book: Entity to persist
            expected_version: Version the caller last read, checked on update

        Returns:
            The persisted entity with id and version assigned

        Raises:
            ConflictError: If the stored version differs from the expected one
        """

    @abstractmethod
    def delete(self, book_id: int) -> None:
        """
        Remove a book.

        Raises:
            NotFoundError: If no record with this id exists
            ConflictError: If the record changed since it was read
        """

    @abstractmethod
    def transaction(self):
        """Context manager: commit on normal exit, roll back and re-raise on error."""


class SqlAlchemyBookStore(BookStore):
    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self._clock = clock

    def find_all(self) -> List[Book]:
        logger.debug("Querying all books from database")
        return list(self.session.scalars(select(Book).order_by(Book.id)))

    def find_range(self, offset: int, limit: int) -> List[Book]:
        check_range(offset, limit)
        logger.debug(f"Querying books range: offset={offset}, limit={limit}")
        query = select(Book).order_by(Book.id).offset(offset).limit(limit)
        return list(self.session.scalars(query))

    def count(self) -> int:
        logger.debug("Counting all books")
        return self.session.scalar(select(func.count()).select_from(Book)) or 0

    def find_by_id(self, book_id: int) -> Optional[Book]:
        logger.debug(f"Finding book by ID: {book_id}")
        return self.session.get(Book, book_id)

    def save(self, book: Book, expected_version: Optional[int] = None) -> Book:
        now = self._clock()
        if book.id is None:
            logger.debug(f"Persisting new book: {book.title}")
            book.created_at = now
            book.updated_at = now
            self.session.add(book)
        else:
            logger.debug(f"Merging existing book {book.id}: {book.title}")
            if expected_version is not None and book.version != expected_version:
                raise ConflictError(book.id, expected_version, book.version)
            book.updated_at = now
            # always emit an UPDATE so the version is bumped
            flag_modified(book, "updated_at")
        self._flush(book.id)
        return book

    def delete(self, book_id: int) -> None:
        book = self.session.get(Book, book_id)
        if book is None:
            raise NotFoundError(book_id)
        logger.debug(f"Removing book with ID: {book_id}")
        self.session.delete(book)
        self._flush(book_id)

    def _flush(self, book_id: Optional[int]) -> None:
        try:
            self.session.flush()
        except StaleDataError as exc:
            raise ConflictError(book_id) from exc

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        try:
            yield self.session
        except Exception:
            self.session.rollback()
            logger.debug("Transaction rolled back")
            raise
        else:
            try:
                self.session.commit()
            except StaleDataError as exc:
                self.session.rollback()
                raise ConflictError(None) from exc
