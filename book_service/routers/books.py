import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from book_service import schemas
from book_service.config import settings
from book_service.database import get_db
from book_service.errors import Err, NotFoundError, Ok
from book_service.messages import info_message, message_for_error, warn_message
from book_service.pagination import BookLazyDataModel
from book_service.repository import SqlAlchemyBookStore
from book_service.services import BookService

router = APIRouter(prefix="/books", tags=["Books"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": schemas.ErrorResponse},
}


def get_book_service(db: Session = Depends(get_db)) -> BookService:
    return BookService(SqlAlchemyBookStore(db))


def _parse_pairs(values: list[str] | None) -> dict[str, str]:
    # "title:asc" / "author:Tolkien" -> {"title": "asc"} / {"author": "Tolkien"}
    pairs = {}
    for value in values or []:
        field, _, arg = value.partition(":")
        if field:
            pairs[field] = arg
    return pairs


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    body = schemas.ErrorResponse(messages=[message_for_error(exc)])
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _failure(exc: Exception) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        return _error_response(status.HTTP_404_NOT_FOUND, exc)
    return _error_response(status.HTTP_409_CONFLICT, exc)


# List Books (one grid page)
@router.get("/", response_model=schemas.BookPage)
def get_books(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: list[str] | None = Query(default=None),
    filter_by: list[str] | None = Query(default=None, alias="filter"),
    selected: str | None = Query(default=None),
    service: BookService = Depends(get_book_service),
):
    lazy_model = BookLazyDataModel(service)
    filters = _parse_pairs(filter_by)

    total = lazy_model.row_count(filters)
    items = lazy_model.load_page(offset, limit, _parse_pairs(sort), filters)
    total_pages = max(1, (total + limit - 1) // limit)

    return {
        "items": items,
        "selected": lazy_model.resolve_row(selected) if selected else None,
        "meta": {
            "offset": offset,
            "limit": limit,
            "total": total,
            "page": offset // limit + 1,
            "total_pages": total_pages,
        },
    }


@router.get("/all", response_model=list[schemas.BookDTO])
def get_all_books(service: BookService = Depends(get_book_service)):
    return service.get_all_books()


# Add Book
@router.post(
    "/",
    response_model=schemas.SaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def add_book(book: schemas.BookDTO, service: BookService = Depends(get_book_service)):
    logger.info(f"Attempting to create book: {book.title}")
    new_book = book.model_copy(update={"id": None, "version": None})

    match service.save_book(new_book):
        case Ok(value=saved):
            return {"book": saved, "messages": [info_message("Success", "Book Saved")]}
        case Err(error=exc):
            return _failure(exc)


@router.put("/{book_id}", response_model=schemas.SaveResponse, responses=ERROR_RESPONSES)
def update_book(
    book_id: int,
    book: schemas.BookDTO,
    service: BookService = Depends(get_book_service),
):
    logger.info(f"Attempting to update book {book_id}: {book.title}")

    match service.save_book(book.model_copy(update={"id": book_id})):
        case Ok(value=saved):
            return {"book": saved, "messages": [info_message("Success", "Book Saved")]}
        case Err(error=exc):
            return _failure(exc)


@router.delete("/{book_id}", response_model=schemas.DeleteResponse, responses=ERROR_RESPONSES)
def delete_book(book_id: int, service: BookService = Depends(get_book_service)):
    logger.info(f"Attempting to delete book with ID: {book_id}")

    match service.delete_book(book_id):
        case Ok():
            return {"messages": [warn_message("Deleted", "Book Removed")]}
        case Err(error=exc):
            return _failure(exc)
