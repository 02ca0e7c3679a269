"""
Structured exceptions and error responses for Tasksheet.

Every error leaving the API has the same body:
    {"error": <code>, "message": <human readable>, "details": [...] | null}
"""

from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tasksheet.logging_config import get_logger

logger = get_logger("errors")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # e.g. ["body", "progress"]
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "forbidden")
    message: str
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class TasksheetException(Exception):
    """Base exception for all Tasksheet errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class UnauthenticatedError(TasksheetException):
    """No session, or the session (or external token) is missing/invalid."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            error_code="unauthenticated",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ForbiddenError(TasksheetException):
    """Authenticated, but not allowed to perform the action."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            error_code="forbidden",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class NotFoundError(TasksheetException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidInputError(TasksheetException):
    """Missing or malformed request input."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        if details is None and field is not None:
            details = [{"loc": ["body", field], "msg": message, "type": "value_error"}]
        super().__init__(
            message=message,
            error_code="invalid_input",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )
        self.field = field


class ConflictError(TasksheetException):
    """The row changed since the client last read it."""

    def __init__(self, task_id: str, expected_version: str, actual_version: str):
        super().__init__(
            message=f"Task {task_id} was modified by someone else; reload and try again",
            error_code="conflict",
            status_code=status.HTTP_409_CONFLICT,
            details=[{
                "loc": ["body", "expectedVersion"],
                "msg": f"expected version {expected_version}, current version is {actual_version}",
                "type": "stale_version",
            }],
        )
        self.task_id = task_id


class UpstreamError(TasksheetException):
    """A call to Google Sheets/Drive/OAuth failed.

    ``message`` is safe to show to clients; ``cause`` is only ever logged.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=message,
            error_code="upstream_error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        self.cause = cause


# =============================================================================
# Exception Handlers
# =============================================================================

async def tasksheet_exception_handler(request: Request, exc: TasksheetException) -> JSONResponse:
    """Handle TasksheetException and return structured response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} (cause: {getattr(exc, 'cause', None)!r})")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body/query validation failures as 400 invalid_input."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    first = details[0]["msg"] if details else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_input",
            "message": first,
            "details": details,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": None,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(TasksheetException, tasksheet_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
