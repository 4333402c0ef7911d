"""
Response envelope models and builders.

Every success body is ``{"success": true, "data": ..., ...}`` and every
error body is ``{"success": false, "error": {...}}``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from catalog.models import Page


class ErrorDetail(BaseModel):
    """Error payload inside the error envelope."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Error message")
    status_code: int = Field(..., alias="statusCode", description="HTTP status code")
    error_code: str = Field(..., alias="errorCode", description="Machine-readable error code")
    timestamp: str = Field(..., description="ISO-8601 time the error was produced")
    path: str = Field(..., description="Request path")
    method: str = Field(..., description="Request method")
    stack: Optional[str] = Field(None, description="Traceback, only in debug mode")


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    authors: int = Field(..., description="Authors currently held")
    books: int = Field(..., description="Books currently held")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return jsonable_encoder(value)


def success_response(
    data: Any,
    message: Optional[str] = None,
    status_code: int = 200,
    **extra: Any,
) -> JSONResponse:
    """
    Build a success envelope.

    ``extra`` keys (``pagination``, ``sort``, ``filters``, ``count``) are
    included only when not None.
    """
    content: Dict[str, Any] = {"success": True}
    if message:
        content["message"] = message
    content["data"] = _dump(data)
    for key, value in extra.items():
        if value is not None:
            content[key] = _dump(value)
    return JSONResponse(status_code=status_code, content=content)


def page_response(
    page: Page,
    message: Optional[str] = None,
    **extra: Any,
) -> JSONResponse:
    """Success envelope for one page of results."""
    return success_response(
        page.data,
        message=message,
        pagination=page.pagination,
        **extra,
    )


def error_response(
    message: str,
    status_code: int,
    error_code: str,
    path: str,
    method: str,
    stack: Optional[str] = None,
) -> JSONResponse:
    """Build an error envelope."""
    body = ErrorResponse(
        error=ErrorDetail(
            message=message,
            status_code=status_code,
            error_code=error_code,
            timestamp=utc_timestamp(),
            path=path,
            method=method,
            stack=stack,
        )
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )
