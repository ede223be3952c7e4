"""User-facing messages emitted by the books controller."""

import logging
from enum import Enum

from pydantic import BaseModel

from book_service.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

CONFLICT_SUMMARY = "Conflict"
CONFLICT_DETAIL = "The record was modified by another user. Please reload and try again."
GENERIC_DETAIL = "An unexpected error occurred."


class Severity(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class UserMessage(BaseModel):
    severity: Severity
    summary: str
    detail: str


def info_message(summary: str, detail: str) -> UserMessage:
    return UserMessage(severity=Severity.INFO, summary=summary, detail=detail)


def warn_message(summary: str, detail: str) -> UserMessage:
    return UserMessage(severity=Severity.WARN, summary=summary, detail=detail)


def error_message(summary: str, detail: str) -> UserMessage:
    return UserMessage(severity=Severity.ERROR, summary=summary, detail=detail)


def _find_conflict(exc: BaseException) -> ConflictError | None:
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ConflictError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def message_for_error(exc: BaseException) -> UserMessage:
    """Classify a failure into the message shown to the user.

    A ConflictError anywhere in the cause chain is reported as a conflict
    asking the user to reload; a NotFoundError is reported with its own
    text. Unclassified failures get a generic text so internals never reach
    the user. The failure is always logged with its traceback.
    """
    if _find_conflict(exc) is not None:
        logger.error("Optimistic lock conflict detected", exc_info=exc)
        return error_message(CONFLICT_SUMMARY, CONFLICT_DETAIL)

    if isinstance(exc, NotFoundError):
        logger.error(f"Book lookup failed: {exc}")
        return error_message("Error", str(exc))

    logger.error("Unexpected error", exc_info=exc)
    return error_message("Error", GENERIC_DETAIL)
