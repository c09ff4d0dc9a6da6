"""Filter codec and sort parameters for collection endpoints.

The same codec is used by the API (decoding request query strings) and by
the client (encoding filter state into request URLs), so both sides agree
on the wire format:

Filtering:
    - `?status=Applied` - Exact match
    - `?status=Applied,Interview` - Match any (OR)
    - `?company_name=acme` - Case-insensitive substring
    - `?search=python` - Substring across several text columns
    - `?date_from=2024-01-01&date_to=2024-01-31` - Inclusive date window

Sorting:
    - `?sort_field=application_date&sort_direction=asc`
    - Defaults to `created_at` descending

Example:
    GET /api/v1/applications?status=Applied,Interview&sort_field=company_name
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from job_tracker.core.errors import ValidationError
from job_tracker.core.text import DbText

# Multi-valued keys, serialized as comma-joined lists.
LIST_FILTER_KEYS: tuple[str, ...] = ("status", "priority", "employment_type")

# Scalar keys, serialized as-is when truthy.
SCALAR_FILTER_KEYS: tuple[str, ...] = ("company_name", "search", "date_from", "date_to")

# Every query key owned by the codec. Other keys pass through encode untouched.
FILTER_PARAM_KEYS: tuple[str, ...] = LIST_FILTER_KEYS + SCALAR_FILTER_KEYS

DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIRECTION = "desc"

QueryParamsInput = httpx.QueryParams | Mapping[str, str] | str | None


def parse_filter_value(value: str | None) -> list[str]:
    """Parse a comma-joined filter value into its tokens.

    Empty tokens are dropped; tokens are otherwise kept verbatim so that
    decoding is the exact inverse of encoding.

    Args:
        value: Raw filter value (e.g., "Applied,Interview").

    Returns:
        List of individual values.

    Examples:
        >>> parse_filter_value("Applied,Interview")
        ["Applied", "Interview"]

        >>> parse_filter_value("Applied,,")
        ["Applied"]
    """
    if not value:
        return []

    return [v for v in value.split(",") if v]


class ApplicationFilters(BaseModel):
    """Filter set for job applications.

    List fields hold the allowed values in selection order; ``None`` means
    "no constraint". Values are kept as plain strings: an unknown status
    simply matches no rows. Text containing NUL is rejected.
    """

    model_config = ConfigDict(extra="ignore")

    status: list[DbText] | None = None
    priority: list[DbText] | None = None
    employment_type: list[DbText] | None = None
    company_name: DbText | None = None
    search: DbText | None = None
    date_from: date | None = None
    date_to: date | None = None


def _to_query_params(params: QueryParamsInput) -> httpx.QueryParams:
    if params is None:
        return httpx.QueryParams()
    if isinstance(params, httpx.QueryParams | str):
        return httpx.QueryParams(params)
    return httpx.QueryParams(list(params.items()))


def encode_filters(
    base_params: QueryParamsInput, filters: ApplicationFilters
) -> httpx.QueryParams:
    """Write a filter set into a copy of ``base_params``.

    All codec-owned keys are removed from the base first, then re-added
    only for non-empty fields. Empty lists are omitted entirely, never
    written as an empty string. Keys the codec doesn't own are preserved.

    Args:
        base_params: Existing query parameters (page, limit, sort, ...).
        filters: The filter set to serialize.

    Returns:
        New QueryParams with the filter keys replaced.

    Example:
        >>> encode_filters("page=2", ApplicationFilters(status=["Applied", "Offer"]))
        QueryParams('page=2&status=Applied%2COffer')
    """
    params = _to_query_params(base_params)
    for key in FILTER_PARAM_KEYS:
        params = params.remove(key)

    for key in LIST_FILTER_KEYS:
        values = getattr(filters, key)
        if values:
            params = params.set(key, ",".join(values))

    for key in SCALAR_FILTER_KEYS:
        value = getattr(filters, key)
        if value:
            params = params.set(
                key, value.isoformat() if isinstance(value, date) else value
            )

    return params


def decode_filters(params: QueryParamsInput) -> ApplicationFilters:
    """Read a filter set out of query parameters.

    Absent or empty parameters decode to ``None`` (never ``[]`` or ``""``),
    mirroring how ``encode_filters`` drops empty fields.

    Args:
        params: Query parameters (httpx/starlette QueryParams, mapping or raw string).

    Returns:
        The decoded ApplicationFilters.

    Raises:
        ValidationError: If a date parameter is not a valid ISO date.
    """
    query = _to_query_params(params)
    values: dict[str, Any] = {}

    for key in LIST_FILTER_KEYS:
        tokens = parse_filter_value(query.get(key))
        values[key] = tokens or None

    for key in SCALAR_FILTER_KEYS:
        values[key] = query.get(key) or None

    try:
        return ApplicationFilters(**values)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid filter parameters",
            details=[
                {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
                for e in exc.errors()
            ],
        ) from exc


def count_filters(filters: ApplicationFilters, *, include_search: bool = False) -> int:
    """Count active filters for badge display.

    Every selected list value counts on its own; company_name, date_from
    and date_to count once each; search counts only when requested.

    Args:
        filters: The filter set.
        include_search: Whether a search term counts as a filter.

    Returns:
        Number of active filters.

    Example:
        >>> count_filters(ApplicationFilters(status=["Applied", "Interview"], company_name="Acme"))
        3
    """
    total = 0
    for key in LIST_FILTER_KEYS:
        total += len(getattr(filters, key) or [])
    if filters.company_name:
        total += 1
    if filters.date_from:
        total += 1
    if filters.date_to:
        total += 1
    if include_search and filters.search:
        total += 1
    return total


@dataclass
class SortParams:
    """Validated ORDER BY choice.

    Attributes:
        field: Column name to order by.
        direction: "asc" or "desc".
    """

    field: str = DEFAULT_SORT_FIELD
    direction: str = DEFAULT_SORT_DIRECTION

    @classmethod
    def from_query(
        cls, sort_field: str | None, sort_direction: str | None
    ) -> "SortParams":
        """Create SortParams from raw query values.

        Only the exact value "asc" sorts ascending; anything else
        (including a missing value) sorts descending.

        Args:
            sort_field: Raw sort_field value.
            sort_direction: Raw sort_direction value.

        Returns:
            The sort to apply (defaults filled in).
        """
        return cls(
            field=sort_field or DEFAULT_SORT_FIELD,
            direction="asc" if sort_direction == "asc" else "desc",
        )

    @property
    def ascending(self) -> bool:
        """True when sorting ascending."""
        return self.direction == "asc"

    def to_query(self) -> dict[str, str]:
        """Serialize to query parameters."""
        return {"sort_field": self.field, "sort_direction": self.direction}
