"""
Unit tests for the error taxonomy.
"""

import pytest

from catalog.errors import (
    AppError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    ValidationError,
)


@pytest.mark.parametrize("error,status_code,error_code", [
    (ValidationError("bad"), 400, "VALIDATION_ERROR"),
    (BadRequestError("bad"), 400, "BAD_REQUEST"),
    (NotFoundError("Book", 1), 404, "NOT_FOUND"),
    (ConflictError("dup"), 409, "CONFLICT_ERROR"),
    (InternalServerError(), 500, "INTERNAL_SERVER_ERROR"),
])
def test_status_and_codes(error, status_code, error_code):
    assert isinstance(error, AppError)
    assert error.status_code == status_code
    assert error.error_code == error_code


def test_not_found_message_with_identifier():
    assert NotFoundError("Author", 12).message == "Author with ID 12 not found"


def test_not_found_message_without_identifier():
    assert NotFoundError("Author").message == "Author not found"


def test_internal_error_default_message():
    assert str(InternalServerError()) == "Internal server error"
