"""Pagination utilities.

page (default 1) and limit (default PAGINATION_DEFAULT_LIMIT, clamped to
PAGINATION_MAX_LIMIT). Unparseable or non-positive values fall back to
the defaults instead of failing the request.
"""

from dataclasses import dataclass

from fastapi import Query

from job_tracker.core.config import settings

DEFAULT_PAGE = 1

# OFFSET and LIMIT are bound as PostgreSQL bigint.
MAX_ROW_INDEX = 2**63 - 1


def parse_positive_int(value: str | None, default: int) -> int:
    """Parse a query value as a positive integer.

    Args:
        value: Raw query string value (may be None).
        default: Value returned when parsing fails or the result is < 1.

    Returns:
        Parsed integer, or ``default``.

    Examples:
        >>> parse_positive_int("3", 1)
        3
        >>> parse_positive_int("abc", 10)
        10
        >>> parse_positive_int("0", 10)
        10
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


@dataclass
class PaginationParams:
    """Pagination query parameters.

    Attributes:
        page: Current page number (1-indexed).
        limit: Number of items per page.
    """

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """First row index of the page window (0 for page 1)."""
        return (self.page - 1) * self.limit

    @property
    def range_end(self) -> int:
        """Last row index of the page window, inclusive."""
        return self.page * self.limit - 1

    @classmethod
    def from_query(cls, page: str | None, limit: str | None) -> "PaginationParams":
        """Build pagination from raw query values with lenient fallback.

        A page whose window would end past ``MAX_ROW_INDEX`` is treated
        like any other unusable page value and falls back to page 1.

        Args:
            page: Raw ``page`` query value.
            limit: Raw ``limit`` query value.

        Returns:
            PaginationParams with defaults applied and limit clamped.
        """
        parsed_limit = parse_positive_int(limit, settings.pagination_default_limit)
        params = cls(
            page=parse_positive_int(page, DEFAULT_PAGE),
            limit=min(parsed_limit, settings.pagination_max_limit),
        )
        if params.range_end > MAX_ROW_INDEX:
            params.page = DEFAULT_PAGE
        return params


def pagination_params(
    page: str | None = Query(default=None, description="Page number (1-indexed)"),
    limit: str | None = Query(default=None, description="Items per page"),
) -> PaginationParams:
    """FastAPI dependency for pagination query parameters.

    Usage:
        @router.get("")
        async def list_items(
            pagination: PaginationParams = Depends(pagination_params)
        ):
            ...

    Args:
        page: Raw page query value.
        limit: Raw limit query value.

    Returns:
        PaginationParams with lenient parsing applied.
    """
    return PaginationParams.from_query(page, limit)
