"""
Exception taxonomy for the bookstore.

Services raise these; the HTTP layer maps each one to a status code and a
response envelope without interpreting it further.
"""

from typing import Optional


class BookstoreException(Exception):
    """Base exception for bookstore errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        errors: Optional[dict[str, str]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.errors = errors
        super().__init__(message)


class ValidationError(BookstoreException):
    """Input or business-rule validation failed."""

    def __init__(
        self,
        message: str = "validation failed",
        errors: Optional[dict[str, str]] = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            errors=errors,
        )


class OrderStatusError(ValidationError):
    """Order is not in a state that allows the requested transition."""

    def __init__(self, message: str, code: str, detail: str):
        super().__init__(
            message=message,
            errors={"status": detail},
            code=code,
        )


class UnauthorizedError(BookstoreException):
    """Missing, malformed or expired credentials."""

    def __init__(self, message: str = "invalid or expired token"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )


class ForbiddenError(BookstoreException):
    """Authenticated user may not act on the resource."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


class NotFoundError(BookstoreException):
    """Resource not found."""

    def __init__(self, resource: str, identifier=None, message: Optional[str] = None):
        if message is None:
            message = f"{resource} not found"
            if identifier is not None:
                message = f"{message}: {identifier}"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
        )
        self.resource = resource
        self.identifier = identifier


class ConflictError(BookstoreException):
    """Write would duplicate or orphan existing data."""

    def __init__(self, field: str, detail: str):
        super().__init__(
            message="validation failed",
            code="CONFLICT",
            status_code=409,
            errors={field: detail},
        )


class InfrastructureError(BookstoreException):
    """Store unreachable, commit failure and similar server-side faults."""

    def __init__(self, message: str = "internal server error"):
        super().__init__(
            message=message,
            code="INTERNAL_ERROR",
            status_code=500,
        )
