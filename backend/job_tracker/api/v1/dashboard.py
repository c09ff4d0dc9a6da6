"""Dashboard API router."""

from datetime import UTC, date, datetime

from fastapi import APIRouter, Query

from job_tracker.api.deps import CurrentUserId, DbSession
from job_tracker.core.responses import DataResponse
from job_tracker.schemas.dashboard import DashboardStats
from job_tracker.services.dashboard_stats import get_dashboard_stats

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(
    user_id: CurrentUserId,
    db: DbSession,
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
) -> DataResponse[DashboardStats]:
    """Aggregate counts and response rate for the caller.

    Application counts honour the optional application_date window;
    upcoming interviews are never windowed.
    """
    stats = await get_dashboard_stats(
        db,
        user_id=user_id,
        now=datetime.now(UTC),
        date_from=date_from,
        date_to=date_to,
    )
    return DataResponse(data=stats)
