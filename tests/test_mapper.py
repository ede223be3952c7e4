from datetime import datetime

from book_service import mapper
from book_service.models import Book
from book_service.schemas import BookDTO


def make_book() -> Book:
    return Book(
        id=1,
        version=3,
        title="Test Title",
        author="Test Author",
        price=19.99,
        isbn="1234567890123",
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 2),
    )


def test_to_dto_maps_all_fields():
    book = make_book()

    dto = mapper.to_dto(book)

    assert dto.id == 1
    assert dto.version == 3
    assert dto.title == "Test Title"
    assert dto.author == "Test Author"
    assert dto.price == 19.99
    assert dto.isbn == "1234567890123"
    assert "created_at" not in dto.model_dump()


def test_to_entity_leaves_identity_unset():
    dto = BookDTO(id=7, version=4, title="Test Title", author="Test Author", price=19.99, isbn="1234567890123")

    book = mapper.to_entity(dto)

    assert book.id is None
    assert book.version is None
    assert book.created_at is None
    assert book.updated_at is None
    assert (book.title, book.author, book.price, book.isbn) == (
        "Test Title",
        "Test Author",
        19.99,
        "1234567890123",
    )


def test_update_entity_from_dto_copies_only_mutable_fields():
    book = make_book()
    dto = BookDTO(id=99, version=42, title="Updated", author="Someone Else", price=5.0, isbn=None)

    mapper.update_entity_from_dto(dto, book)

    assert book.title == "Updated"
    assert book.author == "Someone Else"
    assert book.price == 5.0
    assert book.isbn is None
    assert book.id == 1
    assert book.version == 3
    assert book.created_at == datetime(2024, 1, 1)
    assert book.updated_at == datetime(2024, 1, 2)


def test_round_trip_keeps_content_and_resets_identity():
    dto = BookDTO(id=5, version=2, title="Dune", author="Frank Herbert", price=9.5, isbn="9780441172719")

    result = mapper.to_dto(mapper.to_entity(dto))

    assert (result.title, result.author, result.price, result.isbn) == (
        dto.title,
        dto.author,
        dto.price,
        dto.isbn,
    )
    assert result.id is None
    assert result.version is None
