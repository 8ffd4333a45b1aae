"""Custom exception classes and global exception handlers.

This module defines the exception hierarchy raised by services and
dependencies, and the FastAPI handlers that turn them into consistent error
responses with proper HTTP status codes.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIException(Exception):
    """Base exception class for API errors.

    This is the base class for all custom API exceptions, providing
    consistent error structure and HTTP status code handling.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for the error
            error_code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.lower().replace(
            "exception", "_error"
        )
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(APIException):
    """Exception for input validation errors.

    ``errors`` carries one ``{"field", "message", "type"}`` entry per failing
    field.
    """

    def __init__(
        self, message: str, errors: list[dict[str, Any]] | None = None
    ) -> None:
        details = {}
        if errors:
            details["validation_errors"] = errors

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            details=details,
        )


class AuthenticationException(APIException):
    """Exception for authentication errors."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="authentication_error",
        )


class AuthorizationException(APIException):
    """Exception for authorization/permission errors."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="authorization_error",
        )


class NotFoundException(APIException):
    """Exception for resource not found errors."""

    def __init__(
        self, resource: str, identifier: str | int, message: str | None = None
    ) -> None:
        if not message:
            message = f"{resource} with identifier '{identifier}' not found"

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found_error",
            details={"resource": resource, "identifier": str(identifier)},
        )


class ConflictException(APIException):
    """Exception for resource conflict errors."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        identifier: str | int | None = None,
    ) -> None:
        details = {}
        if resource:
            details["resource"] = resource
        if identifier is not None:
            details["identifier"] = str(identifier)

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="conflict_error",
            details=details,
        )


class BusinessLogicException(APIException):
    """Exception for business logic violations."""

    def __init__(self, message: str, rule: str | None = None) -> None:
        details = {}
        if rule:
            details["rule"] = rule

        super().__init__(
            message=message,
            status_code=422,
            error_code="business_logic_error",
            details=details,
        )


class DatabaseException(APIException):
    """Exception for database operation errors."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: str | None = None,
    ) -> None:
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="database_error",
            details=details,
        )


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create standardized error response.

    Args:
        status_code: HTTP status code
        message: Error message
        error_code: Machine-readable error code
        details: Additional error details
        request_id: Request ID for tracking
        headers: Extra response headers

    Returns:
        JSONResponse: Standardized error response
    """
    error_data = {
        "error": {"code": error_code, "message": message, "status_code": status_code}
    }

    if details:
        error_data["error"]["details"] = details

    if request_id:
        error_data["error"]["request_id"] = request_id

    return JSONResponse(status_code=status_code, content=error_data, headers=headers)


# Global Exception Handlers


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle custom API exceptions.

    Server-side failures are logged as errors, client mistakes as warnings.
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"API Exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "details": exc.details,
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    headers = None
    if isinstance(exc, AuthenticationException):
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        request_id=getattr(request.state, "request_id", None),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(
        f"HTTP Exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code="http_error",
        request_id=getattr(request.state, "request_id", None),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors.

    Malformed bodies, path and query parameters are reported as 400 with
    one entry per failing field.
    """
    validation_errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        validation_errors.append(
            {
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(
        f"Validation Error: {len(validation_errors)} field(s) failed validation",
        extra={
            "validation_errors": validation_errors,
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    error = ValidationException("Validation failed", errors=validation_errors)
    return create_error_response(
        status_code=error.status_code,
        message=error.message,
        error_code=error.error_code,
        details=error.details,
        request_id=getattr(request.state, "request_id", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals."""
    logger.error(
        f"Unexpected Exception: {type(exc).__name__} - {str(exc)}",
        exc_info=True,
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        },
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        error_code="internal_error",
        request_id=getattr(request.state, "request_id", None),
    )
