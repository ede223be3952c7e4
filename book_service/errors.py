"""Typed failures raised by the book store and the results returned by the service."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


class BookServiceError(Exception):
    """Base class for failures the outward-facing layer classifies."""


class NotFoundError(BookServiceError):
    def __init__(self, book_id: int):
        self.book_id = book_id
        super().__init__(f"Book not found with ID: {book_id}")


class ConflictError(BookServiceError):
    """The stored version no longer matches the version the caller read."""

    def __init__(
        self,
        book_id: int | None,
        expected_version: int | None = None,
        actual_version: int | None = None,
    ):
        self.book_id = book_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        detail = f"Book with ID {book_id} was modified concurrently"
        if expected_version is not None:
            detail += f" (expected version {expected_version}, found {actual_version})"
        super().__init__(detail)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result = Union[Ok[T], Err[E]]
