"""Client data hooks for the job tracker API.

``JobTrackerClient`` wraps an ``httpx.AsyncClient``. Reads are cached by
their full URL (built with the same filter codec the server decodes
with) and served from cache until a mutation invalidates them or the
caller asks to revalidate. Each mutation drops every cached read under
the resource paths it can affect.

Example:
    async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
        client = JobTrackerClient(http)
        page = await client.applications(
            filters=ApplicationFilters(status=["Applied", "Interview"]),
            page=2,
        )
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import httpx

from job_tracker.client.cache import ResponseCache
from job_tracker.client.fetcher import api_fetch
from job_tracker.core.filtering import ApplicationFilters, SortParams, encode_filters
from job_tracker.schemas.dashboard import DashboardStats

API_PREFIX = "/api/v1"
APPLICATIONS_PATH = f"{API_PREFIX}/applications"
INTERVIEWS_PATH = f"{API_PREFIX}/interviews"
DASHBOARD_STATS_PATH = f"{API_PREFIX}/dashboard/stats"
ACTIVITY_LOG_PATH = f"{API_PREFIX}/activity-log"

# Paths whose cached reads can change when applications change.
_APPLICATION_DEPENDENTS = (
    APPLICATIONS_PATH,
    INTERVIEWS_PATH,
    f"{API_PREFIX}/dashboard",
    ACTIVITY_LOG_PATH,
)


@dataclass
class ApplicationsPage:
    """One page of the application list.

    Defaults mirror an empty first page.
    """

    applications: list[dict[str, Any]] = field(default_factory=list)
    count: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "ApplicationsPage":
        """Build from a paginated response body."""
        return cls(
            applications=body.get("data") or [],
            count=body.get("count") or 0,
            page=body.get("page") or 1,
            limit=body.get("limit") or 10,
            total_pages=body.get("total_pages") or 0,
        )


def build_url(path: str, params: httpx.QueryParams) -> str:
    """Join a path and query string into a cache key / request URL."""
    query = str(params)
    return f"{path}?{query}" if query else path


class JobTrackerClient:
    """Cached reads and invalidating mutations over the HTTP API.

    Args:
        http: Configured async client (base URL, session cookie).
        cache: Shared cache; a fresh one is created when omitted.
    """

    def __init__(
        self, http: httpx.AsyncClient, cache: ResponseCache | None = None
    ) -> None:
        self.http = http
        self.cache = cache if cache is not None else ResponseCache()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _read(self, url: str, *, revalidate: bool = False) -> Any:
        if not revalidate and url in self.cache:
            return self.cache.get(url)
        body = await api_fetch(self.http, "GET", url)
        self.cache.set(url, body)
        return body

    async def _write(self, method: str, url: str, **kwargs: Any) -> Any:
        body = await api_fetch(self.http, method, url, **kwargs)
        self.invalidate(*_APPLICATION_DEPENDENTS)
        return body

    def invalidate(self, *prefixes: str) -> int:
        """Drop cached reads under the given path prefixes.

        Returns:
            Number of cache entries dropped.
        """
        return sum(self.cache.invalidate_prefix(prefix) for prefix in prefixes)

    # =========================================================================
    # Reads
    # =========================================================================

    def applications_url(
        self,
        *,
        filters: ApplicationFilters | None = None,
        sort: SortParams | None = None,
        page: int | None = None,
        limit: int | None = None,
        include_interviews: bool = False,
        include_activity: bool = False,
    ) -> str:
        """URL of an application list read; also its cache key."""
        base: dict[str, str] = {}
        if page:
            base["page"] = str(page)
        if limit:
            base["limit"] = str(limit)
        if include_interviews:
            base["include_interviews"] = "true"
        if include_activity:
            base["include_activity"] = "true"
        if sort is not None:
            base.update(sort.to_query())

        params = encode_filters(base, filters or ApplicationFilters())
        return build_url(APPLICATIONS_PATH, params)

    async def applications(
        self,
        *,
        filters: ApplicationFilters | None = None,
        sort: SortParams | None = None,
        page: int | None = None,
        limit: int | None = None,
        include_interviews: bool = False,
        include_activity: bool = False,
        revalidate: bool = False,
    ) -> ApplicationsPage:
        """Fetch one page of the caller's applications.

        Raises:
            ApiRequestError: If the server rejects the request.
        """
        url = self.applications_url(
            filters=filters,
            sort=sort,
            page=page,
            limit=limit,
            include_interviews=include_interviews,
            include_activity=include_activity,
        )
        return ApplicationsPage.from_body(await self._read(url, revalidate=revalidate))

    async def application(
        self, application_id: uuid.UUID | str, *, revalidate: bool = False
    ) -> dict[str, Any]:
        """Fetch one application with its interviews and activity."""
        body = await self._read(
            f"{APPLICATIONS_PATH}/{application_id}", revalidate=revalidate
        )
        return body["data"]

    async def interviews(
        self,
        *,
        job_application_id: uuid.UUID | str | None = None,
        upcoming_only: bool = False,
        revalidate: bool = False,
    ) -> list[dict[str, Any]]:
        """Fetch the caller's interviews, soonest first."""
        params = httpx.QueryParams()
        if job_application_id:
            params = params.set("job_application_id", str(job_application_id))
        if upcoming_only:
            params = params.set("upcoming_only", "true")
        body = await self._read(
            build_url(INTERVIEWS_PATH, params), revalidate=revalidate
        )
        return body.get("data") or []

    async def dashboard_stats(
        self,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
        revalidate: bool = False,
    ) -> DashboardStats:
        """Fetch aggregate statistics."""
        params = httpx.QueryParams()
        if date_from:
            params = params.set("date_from", date_from.isoformat())
        if date_to:
            params = params.set("date_to", date_to.isoformat())
        body = await self._read(
            build_url(DASHBOARD_STATS_PATH, params), revalidate=revalidate
        )
        return DashboardStats.model_validate(body["data"])

    async def activity_log(
        self, *, limit: int | None = None, revalidate: bool = False
    ) -> list[dict[str, Any]]:
        """Fetch the caller's recent activity, newest first."""
        params = httpx.QueryParams()
        if limit:
            params = params.set("limit", str(limit))
        body = await self._read(
            build_url(ACTIVITY_LOG_PATH, params), revalidate=revalidate
        )
        return body.get("data") or []

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_application(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create an application; returns the created row."""
        body = await self._write("POST", APPLICATIONS_PATH, json=payload)
        return body["data"]

    async def update_application(
        self, application_id: uuid.UUID | str, updates: dict[str, Any]
    ) -> dict[str, Any]:
        """Update an application; returns the updated row."""
        body = await self._write(
            "PUT", f"{APPLICATIONS_PATH}/{application_id}", json=updates
        )
        return body["data"]

    async def delete_application(self, application_id: uuid.UUID | str) -> str:
        """Delete an application; returns the server's message."""
        body = await self._write("DELETE", f"{APPLICATIONS_PATH}/{application_id}")
        return body["message"]

    async def bulk_update_applications(
        self, ids: list[uuid.UUID | str], updates: dict[str, Any]
    ) -> tuple[list[dict[str, Any]], str]:
        """Apply the same updates to several applications.

        Returns:
            Tuple of (updated rows, server message).
        """
        body = await self._write(
            "PUT",
            f"{APPLICATIONS_PATH}/bulk",
            json={"ids": [str(i) for i in ids], "updates": updates},
        )
        return body["data"], body["message"]

    async def bulk_delete_applications(self, ids: list[uuid.UUID | str]) -> str:
        """Delete several applications; returns the server's message."""
        body = await self._write(
            "DELETE",
            f"{APPLICATIONS_PATH}/bulk",
            json={"ids": [str(i) for i in ids]},
        )
        return body["message"]

    async def create_interview(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create an interview; returns the created row."""
        body = await self._write("POST", INTERVIEWS_PATH, json=payload)
        return body["data"]
