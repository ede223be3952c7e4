"""Conversions between the persisted Book entity and BookDTO."""

from book_service import models, schemas


def to_dto(book: models.Book) -> schemas.BookDTO:
    return schemas.BookDTO.model_construct(
        id=book.id,
        version=book.version,
        title=book.title,
        author=book.author,
        price=book.price,
        isbn=book.isbn,
    )


def to_entity(dto: schemas.BookDTO) -> models.Book:
    # id, version and timestamps are assigned by the store on insert
    return models.Book(
        title=dto.title,
        author=dto.author,
        price=dto.price,
        isbn=dto.isbn,
    )


def update_entity_from_dto(dto: schemas.BookDTO, entity: models.Book) -> None:
    entity.title = dto.title
    entity.author = dto.author
    entity.price = dto.price
    entity.isbn = dto.isbn
