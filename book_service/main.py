import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from book_service import schemas
from book_service.config import settings
from book_service.database import get_db, init_db
from book_service.logging_config import setup_logging
from book_service.messages import GENERIC_DETAIL, error_message
from book_service.routers import books

SERVICE_NAME = "book-service"

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{SERVICE_NAME} ready, serving {app.title} {app.version}")
    yield
    logger.info(f"{SERVICE_NAME} stopped")


app = FastAPI(
    title="Book Catalog Service",
    description="Paginated book catalog with optimistic-concurrency aware editing",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(books.router)


def _field_name(loc) -> str:
    names = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(names) or "request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        detail = schemas.VALIDATION_MESSAGES.get((field, error.get("type")), error.get("msg"))
        messages.append(error_message(field, detail))
    logger.info(f"Rejected {request.method} {request.url.path}: {len(messages)} invalid field(s)")
    body = schemas.ErrorResponse(messages=messages)
    return JSONResponse(
        status_code=422,
        content=body.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.method} {request.url.path}", exc_info=exc)
    body = schemas.ErrorResponse(messages=[error_message("Error", GENERIC_DETAIL)])
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json"),
    )


@app.get("/health", tags=["System"])
def health_check(db: Session = Depends(get_db)):
    """Report whether the catalog database answers; 503 when it does not."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(f"Database unreachable during health check: {exc}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "degraded", "service": SERVICE_NAME, "database": "unhealthy"},
        ) from exc
    return {"status": "healthy", "service": SERVICE_NAME, "database": "connected"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8002)
