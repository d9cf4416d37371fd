"""
Error handling utilities for hits-search.

This module provides exception classes and handlers for consistent error responses.
"""

from enum import Enum
from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hits_search.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Enumeration of error codes for consistent error responses."""

    # Server errors (1xxx)
    SERVER_ERROR = "1000"
    PRECONDITION_VIOLATION = "1001"

    # Request errors (3xxx)
    VALIDATION_ERROR = "3001"
    NOT_FOUND = "3002"

    # Search backend errors (4xxx)
    SEARCH_BACKEND_ERROR = "4000"
    SEARCH_TRANSPORT_ERROR = "4001"


class ErrorDetail(BaseModel):
    """Model representing detailed error information."""

    location: Optional[str] = None
    param: Optional[str] = None
    value: Optional[Any] = None
    message: str


class ErrorResponse(BaseModel):
    """Model representing a standardized error response."""

    code: str
    message: str
    details: Optional[List[ErrorDetail]] = None
    request_id: Optional[str] = None


class HitsSearchError(Exception):
    """Base exception class for hits-search errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[ErrorDetail]] = None,
    ):
        """
        Initialize a new error.

        Args:
            code: Error code
            message: Error message
            status_code: HTTP status code to return
            details: Optional list of error details
        """
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or []
        super().__init__(self.message)


class SearchError(HitsSearchError):
    """
    Failure reported by the search backend.

    Carries the backend's own message and status code. Only ever created by
    laundering a structured backend error; it is never retried.
    """

    def __init__(
        self,
        message: str = "Search backend error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        details: Optional[List[ErrorDetail]] = None,
    ):
        """Initialize a new search error."""
        super().__init__(
            code=ErrorCode.SEARCH_BACKEND_ERROR,
            message=message,
            status_code=status_code,
            details=details,
        )

    def __repr__(self) -> str:
        return f"SearchError(message={self.message!r}, status_code={self.status_code})"


class TransportError(HitsSearchError):
    """Exception for failures reaching the search backend (timeouts, connectivity)."""

    def __init__(
        self,
        message: str = "Search backend unreachable",
        details: Optional[List[ErrorDetail]] = None,
    ):
        """Initialize a new transport error."""
        super().__init__(
            code=ErrorCode.SEARCH_TRANSPORT_ERROR,
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


class PreconditionViolation(HitsSearchError):
    """Exception raised when responses do not line up with the query batch."""

    def __init__(
        self,
        message: str = "Precondition violated",
        details: Optional[List[ErrorDetail]] = None,
    ):
        """Initialize a new precondition violation."""
        super().__init__(
            code=ErrorCode.PRECONDITION_VIOLATION,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class NotFoundError(HitsSearchError):
    """Exception for resource not found errors."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[List[ErrorDetail]] = None,
    ):
        """Initialize a new not found error."""
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


def setup_error_handlers(app: FastAPI) -> None:
    """
    Configure error handlers for FastAPI application.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(HitsSearchError)
    async def hits_search_error_handler(request: Request, exc: HitsSearchError) -> JSONResponse:
        """Handle hits-search errors and return standardized error responses."""
        logger.error(
            f"Search error: {exc.code.value} - {exc.message}",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "status_code": exc.status_code,
                "error_code": exc.code,
                "error_details": [detail.model_dump() for detail in exc.details],
            },
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                code=exc.code.value,
                message=exc.message,
                details=exc.details or None,
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        details = []
        for error in exc.errors():
            location = ".".join(str(loc) for loc in error.get("loc", []))
            details.append(
                ErrorDetail(
                    location=location,
                    message=error.get("msg", "Validation error"),
                    param=str(error["loc"][-1]) if error.get("loc") else None,
                )
            )

        logger.error(
            "Request validation error",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "validation_errors": exc.errors(),
            },
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                code=ErrorCode.VALIDATION_ERROR.value,
                message="Request validation error",
                details=details,
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions and return standardized error responses."""
        logger.exception(
            f"Unhandled exception: {str(exc)}",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "exception_type": type(exc).__name__,
            },
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                code=ErrorCode.SERVER_ERROR.value,
                message="An unexpected error occurred",
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
        )
