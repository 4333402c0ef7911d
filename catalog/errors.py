"""
Typed error taxonomy for the catalog.

Only the parameter-parsing, body-validation and entity-lookup stages raise
these; the query engines and the statistics aggregator never do. The HTTP
layer translates every ``AppError`` into the error envelope.
"""

from typing import Optional, Union


class AppError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "APP_ERROR",
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


class ValidationError(AppError):
    """Malformed or missing required field."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, 400, "VALIDATION_ERROR")
        self.field = field


class BadRequestError(AppError):
    """Malformed path parameter."""

    def __init__(self, message: str):
        super().__init__(message, 400, "BAD_REQUEST")


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    def __init__(self, resource: str, identifier: Optional[Union[int, str]] = None):
        if identifier is not None:
            message = f"{resource} with ID {identifier} not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, 404, "NOT_FOUND")
        self.resource = resource
        self.identifier = identifier


class ConflictError(AppError):
    """Uniqueness violation (author email, book ISBN)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, 409, "CONFLICT_ERROR")
        self.field = field


class InternalServerError(AppError):
    """Unexpected failure."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, 500, "INTERNAL_SERVER_ERROR")
