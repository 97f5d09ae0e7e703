"""
Error Handling for the Bookstore API

Centralized error handling:
- Envelope-shaped error responses
- Logging of errors
- Exception translation
"""

import traceback
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.exceptions import BookstoreException
from bookstore.utils import translate_validation_errors


def create_error_response(
    message: str,
    status_code: int,
    errors: Optional[dict[str, str]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Create an error envelope; `data` and paging fields are left out."""
    content = {"message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BookstoreException)
    async def bookstore_exception_handler(request: Request, exc: BookstoreException):
        if exc.status_code >= 500:
            logger.error(f"Bookstore error on {request.url.path}: {exc.code} - {exc.message}")
        else:
            logger.warning(f"Bookstore error: {exc.code} - {exc.message}")

        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}

        return create_error_response(
            message=exc.message,
            status_code=exc.status_code,
            errors=exc.errors,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = translate_validation_errors(exc.errors())
        logger.warning(f"Validation error on {request.url.path}: {errors}")
        return create_error_response(
            message="validation failed",
            status_code=status.HTTP_400_BAD_REQUEST,
            errors=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return create_error_response(
            message=str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
        )
        # Internal details stay in the log
        return create_error_response(
            message="internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
