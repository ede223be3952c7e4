import logging
from typing import List

from book_service import mapper, schemas
from book_service.errors import ConflictError, Err, NotFoundError, Ok, Result
from book_service.repository import BookStore

logger = logging.getLogger(__name__)


class BookService:
    """
    Book use cases on top of a BookStore.

    Reads are plain pass-throughs mapped to DTOs. Writes run their lookup and
    mutation inside one store transaction and report not-found and conflict
    outcomes as Err results instead of raising; any other failure propagates
    after the transaction has been rolled back.
    """

    def __init__(self, store: BookStore):
        self._store = store

    def get_all_books(self) -> List[schemas.BookDTO]:
        logger.debug("Fetching all books")
        return [mapper.to_dto(book) for book in self._store.find_all()]

    def get_books(self, offset: int, limit: int) -> List[schemas.BookDTO]:
        logger.debug(f"Fetching books page: offset={offset}, limit={limit}")
        return [mapper.to_dto(book) for book in self._store.find_range(offset, limit)]

    def count_books(self) -> int:
        return self._store.count()

    def save_book(
        self, dto: schemas.BookDTO
    ) -> Result[schemas.BookDTO, NotFoundError | ConflictError]:
        logger.info(f"Saving book: {dto.title}")
        try:
            with self._store.transaction():
                if dto.id is not None:
                    logger.debug(f"Updating existing book with ID: {dto.id}")
                    book = self._store.find_by_id(dto.id)
                    if book is None:
                        raise NotFoundError(dto.id)
                    mapper.update_entity_from_dto(dto, book)
                    self._store.save(book, expected_version=dto.version)
                else:
                    logger.debug("Creating new book")
                    book = self._store.save(mapper.to_entity(dto))
                saved = mapper.to_dto(book)
        except (NotFoundError, ConflictError) as exc:
            logger.error(f"Saving book failed: {exc}")
            return Err(exc)

        logger.info(f"Book saved successfully with ID: {saved.id}")
        return Ok(saved)

    def delete_book(self, book_id: int) -> Result[None, NotFoundError | ConflictError]:
        logger.info(f"Deleting book with ID: {book_id}")
        try:
            with self._store.transaction():
                if self._store.find_by_id(book_id) is None:
                    raise NotFoundError(book_id)
                self._store.delete(book_id)
        except (NotFoundError, ConflictError) as exc:
            logger.error(f"Deleting book failed: {exc}")
            return Err(exc)

        logger.info("Book deleted successfully")
        return Ok(None)
