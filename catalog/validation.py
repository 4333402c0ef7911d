"""
Decode-and-validate steps for request bodies and path identifiers.

Each step takes already-checked input, either returns the next value or
raises a typed ``AppError``, and is composed explicitly by
``validate_author_payload`` / ``validate_book_payload``:

    decode object -> required fields -> model validation -> references -> uniqueness

Nothing past these functions sees an unvalidated payload.
"""

from typing import Any, Dict, Optional, Sequence, Type, TypeVar

import pydantic

from catalog.errors import BadRequestError, ConflictError, ValidationError
from catalog.models import AuthorInput, BookInput
from catalog.query_params import parse_int
from catalog.store import EntityStore

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

BOOK_FIELDS = ("title", "isbn", "publishedYear", "authorId")
AUTHOR_FIELDS = ("name", "email", "bio")

# Messages for library-raised value errors, which carry no field-specific text
INVALID_VALUE_MESSAGES = {
    "email": "Email must be a valid email address",
}


def parse_positive_id(raw: Any, resource: str) -> int:
    """Parse a path identifier; anything but a positive integer is a bad request."""
    value = parse_int(raw)
    if value is None or value <= 0:
        raise BadRequestError(f"Invalid {resource.lower()} ID. ID must be a positive integer")
    return value


def decode_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_fields(payload: Dict[str, Any], fields: Sequence[str], message: str) -> Dict[str, Any]:
    """Reject payloads where any required field is absent, null or blank."""
    for name in fields:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message, field=name)
    return payload


def _error_message(error: Dict[str, Any]) -> str:
    message = error.get("msg", "Invalid value")
    loc = tuple(error.get("loc", ()))
    if error.get("type") == "value_error":
        if message.startswith("Value error, "):
            return message[len("Value error, "):]
        if loc and loc[0] in INVALID_VALUE_MESSAGES:
            return INVALID_VALUE_MESSAGES[loc[0]]
        return message
    location = ".".join(str(part) for part in loc)
    return f"{location}: {message}" if location else message


def validate_model(model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    """Run pydantic validation, surfacing the first failure as a ``ValidationError``."""
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = first.get("loc", ())
        raise ValidationError(
            _error_message(first),
            field=str(location[0]) if location else None,
        ) from exc


def ensure_author_exists(store: EntityStore, author_id: int) -> None:
    store.require_author(author_id)


def ensure_isbn_unique(store: EntityStore, isbn: str, exclude_id: Optional[int] = None) -> None:
    for book in store.books:
        if book.isbn == isbn and book.id != exclude_id:
            raise ConflictError("Book with this ISBN already exists", field="isbn")


def ensure_email_unique(store: EntityStore, email: str, exclude_id: Optional[int] = None) -> None:
    for author in store.authors:
        if author.email == email and author.id != exclude_id:
            if exclude_id is None:
                raise ConflictError("Author with this email already exists", field="email")
            raise ConflictError("Another author with this email already exists", field="email")


def validate_author_payload(
    store: EntityStore,
    payload: Any,
    author_id: Optional[int] = None,
) -> AuthorInput:
    """
    Validate an author body for create (``author_id`` is None) or replace.

    Raises:
        ValidationError: body is not an object, a field is missing or malformed.
        ConflictError: the email belongs to another author.
    """
    body = decode_object(payload)
    require_fields(body, AUTHOR_FIELDS, "Name, email, and bio are required")
    data = validate_model(AuthorInput, body)
    ensure_email_unique(store, data.email, exclude_id=author_id)
    return data


def validate_book_payload(
    store: EntityStore,
    payload: Any,
    book_id: Optional[int] = None,
) -> BookInput:
    """
    Validate a book body for create (``book_id`` is None) or replace.

    Raises:
        ValidationError: body is not an object, a field is missing or malformed.
        NotFoundError: ``authorId`` does not reference an existing author.
        ConflictError: the ISBN belongs to another book.
    """
    body = decode_object(payload)
    require_fields(
        body,
        BOOK_FIELDS,
        "All fields (title, isbn, publishedYear, authorId) are required",
    )
    data = validate_model(BookInput, body)
    ensure_author_exists(store, data.author_id)
    ensure_isbn_unique(store, data.isbn, exclude_id=book_id)
    return data
