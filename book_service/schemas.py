from pydantic import BaseModel, ConfigDict, Field, field_validator

from book_service.messages import UserMessage


class BookDTO(BaseModel):
    id: int | None = None
    version: int | None = None
    title: str = Field(min_length=2, max_length=100)
    author: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    isbn: str | None = Field(default=None, pattern=r"^[0-9]{13}$")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("title", "author", mode="before")
    @classmethod
    def _not_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be blank")
        return value


# Messages shown for constraint violations, keyed by (field, pydantic error type)
VALIDATION_MESSAGES = {
    ("title", "missing"): "Title is required",
    ("title", "value_error"): "Title is required",
    ("title", "string_too_short"): "Title must be between 2 and 100 characters",
    ("title", "string_too_long"): "Title must be between 2 and 100 characters",
    ("author", "missing"): "Author is required",
    ("author", "value_error"): "Author is required",
    ("author", "string_too_short"): "Author is required",
    ("price", "missing"): "Price is required",
    ("price", "greater_than_equal"): "Price cannot be negative",
    ("price", "finite_number"): "Price must be a finite number",
    ("isbn", "string_pattern_mismatch"): "ISBN must be exactly 13 digits",
}


class PaginationMeta(BaseModel):
    offset: int
    limit: int
    total: int
    page: int
    total_pages: int


class BookPage(BaseModel):
    items: list[BookDTO]
    selected: BookDTO | None = None
    meta: PaginationMeta


class SaveResponse(BaseModel):
    book: BookDTO
    messages: list[UserMessage]


class DeleteResponse(BaseModel):
    messages: list[UserMessage]


class ErrorResponse(BaseModel):
    messages: list[UserMessage]
