"""Adapter between a lazily paging data grid and BookService."""

import logging
from typing import Any, List, Mapping, Optional

from book_service.schemas import BookDTO
from book_service.services import BookService

logger = logging.getLogger(__name__)


class BookLazyDataModel:
    """
    Serves a data grid that asks for the row count and for one page at a time.

    Sorting and filtering are accepted but not applied yet: rows always come
    back in store order and the count covers the whole table.

    Row selection is resolved against the page loaded last, so a key that is
    not on the current page resolves to None even if the book exists.
    """

    def __init__(self, service: BookService):
        self.service = service
        self.wrapped_data: Optional[List[BookDTO]] = None

    def row_count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        if filters:
            logger.debug(f"Filters are not supported yet, ignoring: {sorted(filters)}")
        return self.service.count_books()

    def load_page(
        self,
        offset: int,
        limit: int,
        sort: Optional[Mapping[str, Any]] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[BookDTO]:
        if sort:
            logger.debug(f"Sorting is not supported yet, ignoring: {sorted(sort)}")
        if filters:
            logger.debug(f"Filters are not supported yet, ignoring: {sorted(filters)}")
        self.wrapped_data = self.service.get_books(offset, limit)
        return self.wrapped_data

    def row_key(self, book: BookDTO) -> str:
        return str(book.id)

    def resolve_row(self, key: str) -> Optional[BookDTO]:
        for book in self.wrapped_data or []:
            if self.row_key(book) == key:
                return book
        return None
