"""
Error taxonomy for the campus directory.

Every error carries a human-readable message, a machine-readable reason and
the HTTP status the API layer answers with. None of them are retried here.
"""

from enum import Enum
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorReason(str, Enum):
    MISSING_NAME = "missing_name"
    INVALID_TYPE = "invalid_type"
    CAMPUS_WITH_PARENT = "campus_with_parent"
    SECTION_WITHOUT_PARENT = "section_without_parent"
    GENERAL_WITH_PARENT = "general_with_parent"
    PARENT_NOT_FOUND = "parent_not_found"
    PARENT_NOT_CAMPUS = "parent_not_campus"
    SELF_PARENT = "self_parent"
    DUPLICATE_NAME = "duplicate_name"
    HAS_SERVICES = "has_services"
    HAS_CHILDREN = "has_children"
    NOT_FOUND = "not_found"
    MISSING_TITLE = "missing_title"
    CATEGORY_NOT_FOUND = "category_not_found"
    INVALID_URL = "invalid_url"
    INVALID_STATUS = "invalid_status"
    INVALID_FACET = "invalid_facet"
    INVALID_REORDER = "invalid_reorder"
    STORE_FAILURE = "store_failure"
    PATH_TOO_DEEP = "path_too_deep"
    MISSING_FIELDS = "missing_fields"
    FIELD_TOO_LONG = "field_too_long"
    FIELD_TOO_SHORT = "field_too_short"
    BLOCKED_CONTENT = "blocked_content"
    DUPLICATE_SUBMISSION = "duplicate_submission"
    INVALID_FEEDBACK_TYPE = "invalid_feedback_type"
    INVALID_PRIORITY = "invalid_priority"
    EMPTY_UPDATE = "empty_update"


class DirectoryError(Exception):
    """Base class for all directory errors."""

    status_code = 500
    default_reason = ErrorReason.STORE_FAILURE

    def __init__(self, message: str, reason: Optional[ErrorReason] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason

    def to_dict(self) -> dict:
        return {"error": self.message, "reason": self.reason.value}


class ValidationError(DirectoryError):
    """The caller supplied a write or submission that breaks the directory rules."""

    status_code = 400
    default_reason = ErrorReason.MISSING_NAME


class ConflictError(DirectoryError):
    """Duplicate name or submission, or a delete blocked by dependents."""

    status_code = 409
    default_reason = ErrorReason.DUPLICATE_NAME


class NotFoundError(DirectoryError):
    status_code = 404
    default_reason = ErrorReason.NOT_FOUND


class StoreError(DirectoryError):
    """The persistence layer failed. Callers may retry at their discretion."""

    status_code = 500
    default_reason = ErrorReason.STORE_FAILURE


class InconsistencyError(DirectoryError):
    """Stored data violates the two-level hierarchy."""

    status_code = 500
    default_reason = ErrorReason.PATH_TOO_DEEP


async def directory_error_handler(request: Request, exc: DirectoryError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
