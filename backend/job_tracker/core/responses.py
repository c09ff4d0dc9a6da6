"""Pydantic models for the JSON envelopes.

Every endpoint answers with one of these shapes:

- ``{"data": ...}`` for single resources and short collections
- ``{"data": [...], "count", "page", "limit", "total_pages"}`` for paginated lists
- ``{"message": ...}`` (optionally with ``data``) for deletes and bulk updates
- ``{"error": {"code", "message", "details"}}`` for every failure
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """``{"data": ...}``: one resource, or a short unpaginated list."""

    data: T


class MessageResponse(BaseModel):
    """Confirmation envelope for deletes."""

    message: str


class DataMessageResponse(BaseModel, Generic[T]):
    """Envelope carrying both the affected rows and a confirmation message."""

    data: T
    message: str


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for paginated collections.

    Attributes:
        data: Rows of the requested page.
        count: Number of rows matching the filters across all pages.
        page: 1-based page number echoed back.
        limit: Page size used for the query.
    """

    data: list[T]
    count: int
    page: int
    limit: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """ceil(count / limit); zero when nothing matched."""
        if self.count == 0:
            return 0
        return (self.count + self.limit - 1) // self.limit


class ErrorDetail(BaseModel):
    """Body of the ``error`` key.

    ``details`` is only set for validation failures: one entry per
    rejected field or parameter.
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """``{"error": {...}}``"""

    error: ErrorDetail
