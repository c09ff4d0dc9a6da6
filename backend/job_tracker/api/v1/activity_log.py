"""Activity log API router.

Read-only: entries are written as side effects of mutations elsewhere.
"""

from fastapi import APIRouter, Query

from job_tracker.api.deps import CurrentUserId, DbSession
from job_tracker.core.config import settings
from job_tracker.core.pagination import parse_positive_int
from job_tracker.core.responses import DataResponse
from job_tracker.repositories.activity_log_repository import ActivityLogRepository
from job_tracker.schemas.job_application import activity_to_dict

router = APIRouter()


@router.get("")
async def list_activity(
    user_id: CurrentUserId,
    db: DbSession,
    limit: str | None = Query(default=None, description="Maximum entries"),
) -> DataResponse[list[dict]]:
    """List the caller's most recent activity, newest first.

    A missing or unparseable limit falls back to ACTIVITY_LOG_DEFAULT_LIMIT;
    larger values are clamped to PAGINATION_MAX_LIMIT.

    Args:
        user_id: Current authenticated user (injected).
        db: Database session (injected).
        limit: Raw limit query value.

    Returns:
        DataResponse with entries; ``job_application`` is None for entries
        whose application was deleted (the snapshot fields remain).
    """
    parsed = parse_positive_int(limit, settings.activity_log_default_limit)
    entries = await ActivityLogRepository.list_recent(
        db,
        user_id=user_id,
        limit=min(parsed, settings.pagination_max_limit),
    )
    return DataResponse(
        data=[activity_to_dict(e, with_application=True) for e in entries]
    )
