"""Global exception handlers."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.utils.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BaseAPIException,
    ConflictError,
    NotFoundError,
    PolicyRejectedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Map exception families to HTTP status codes, most specific class wins
STATUS_MAPPING: dict[type[BaseAPIException], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PolicyRejectedError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
}


def status_for_exception(exc: BaseAPIException) -> int:
    """Find the status code of the closest mapped base class."""
    for klass in type(exc).__mro__:
        if klass in STATUS_MAPPING:
            return STATUS_MAPPING[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str, error_code: str, details: dict | None = None) -> dict:
    """Error envelope shared by every handler."""
    return {
        "success": False,
        "error": message,
        "error_code": error_code,
        "details": details or {},
    }


class ExceptionHandlers:
    """Centralized exception handlers for the application."""

    @staticmethod
    async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
        """Handle all custom API exceptions."""
        status_code = status_for_exception(exc)

        logger.warning(
            f"API exception in {request.method} {request.url.path}: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "status_code": status_code,
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content=error_body(exc.message, exc.error_code, exc.details),
            headers=headers,
        )

    @staticmethod
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors from pydantic."""
        errors = exc.errors()

        logger.warning(
            f"Validation error in {request.method} {request.url.path}",
            extra={"path": str(request.url.path), "method": request.method},
        )

        # Surface the first message, the full list goes into details
        first = errors[0] if errors else {}
        message = str(first.get("msg", "Validation failed")).removeprefix("Value error, ")

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body(
                message,
                "VALIDATION_ERROR",
                {
                    "validation_errors": [
                        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                        for e in errors
                    ]
                },
            ),
        )

    @staticmethod
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Handle database integrity errors."""
        logger.error(
            f"Database integrity error in {request.method} {request.url.path}: {exc.orig}",
            extra={"path": str(request.url.path), "method": request.method},
        )

        # Parse common integrity violations
        error_message = "Database constraint violation"
        error_code = "INTEGRITY_ERROR"
        text = str(exc.orig).lower()

        if "unique" in text or "duplicate key" in text:
            error_message = "Resource already exists"
            error_code = "DUPLICATE_RESOURCE"
        elif "foreign key" in text:
            error_message = "Referenced resource not found"
            error_code = "FOREIGN_KEY_VIOLATION"

        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body(error_message, error_code),
        )

    @staticmethod
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions with consistent format."""
        logger.warning(
            f"HTTP exception in {request.method} {request.url.path}: {exc.detail}",
            extra={"status_code": exc.status_code, "path": str(request.url.path)},
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                str(exc.detail), HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
            ),
            headers=getattr(exc, "headers", None),
        )

    @staticmethod
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            f"Unexpected error in {request.method} {request.url.path}: {exc}",
            extra={
                "path": str(request.url.path),
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", "INTERNAL_ERROR"),
        )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with the FastAPI app."""
    handlers = ExceptionHandlers()

    app.add_exception_handler(BaseAPIException, handlers.api_exception_handler)
    app.add_exception_handler(RequestValidationError, handlers.validation_exception_handler)
    app.add_exception_handler(IntegrityError, handlers.integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, handlers.http_exception_handler)

    # Catch-all for unexpected errors
    app.add_exception_handler(Exception, handlers.general_exception_handler)
