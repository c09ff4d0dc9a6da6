"""Dashboard statistics aggregation.

Counts the caller's applications per status inside an optional
application_date window, counts upcoming interviews (never windowed),
and derives the response rate:

    response_rate = (Interview + Offer + Rejected) / total * 100

rounded half up to 2 decimals, and 0 when there are no applications.
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from job_tracker.models import JobApplication
from job_tracker.repositories.interview_repository import InterviewRepository
from job_tracker.schemas.dashboard import DashboardStats
from job_tracker.schemas.enums import RESPONSE_STATUSES, ApplicationStatus

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


def compute_response_rate(status_counts: Mapping[str, int], total: int) -> float:
    """Percentage of applications that got a response.

    Args:
        status_counts: Applications per status; missing statuses count as 0.
        total: Total applications in the same window.

    Returns:
        Percentage rounded half up to 2 decimals; 0.0 when total is 0.

    Example:
        >>> compute_response_rate({"Applied": 2, "Interview": 3, "Offer": 1, "Rejected": 4}, 10)
        80.0
    """
    if total <= 0:
        return 0.0
    responses = sum(status_counts.get(s, 0) for s in RESPONSE_STATUSES)
    rate = Decimal(responses) * 100 / Decimal(total)
    return float(rate.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def build_stats(
    status_counts: Mapping[str, int], upcoming_interviews: int
) -> DashboardStats:
    """Assemble DashboardStats from grouped status counts.

    The total is the sum of all groups, so it always agrees with the
    per-status numbers.
    """
    total = sum(status_counts.values())
    return DashboardStats(
        total_applications=total,
        applied=status_counts.get(ApplicationStatus.APPLIED.value, 0),
        interviews=status_counts.get(ApplicationStatus.INTERVIEW.value, 0),
        offers=status_counts.get(ApplicationStatus.OFFER.value, 0),
        accepted=status_counts.get(ApplicationStatus.ACCEPTED.value, 0),
        rejected=status_counts.get(ApplicationStatus.REJECTED.value, 0),
        withdrawn=status_counts.get(ApplicationStatus.WITHDRAWN.value, 0),
        upcoming_interviews=upcoming_interviews,
        response_rate=compute_response_rate(status_counts, total),
    )


async def count_by_status(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    date_from: date | None = None,
    date_to: date | None = None,
) -> dict[str, int]:
    """Count the owner's applications per status in one grouped query.

    Args:
        db: Async database session.
        user_id: Owner's UUID.
        date_from: Inclusive lower bound on application_date.
        date_to: Inclusive upper bound on application_date.

    Returns:
        Mapping of status to count; statuses with no rows are absent.
    """
    stmt = (
        select(JobApplication.status, func.count())
        .where(JobApplication.user_id == user_id)
        .group_by(JobApplication.status)
    )
    if date_from is not None:
        stmt = stmt.where(JobApplication.application_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(JobApplication.application_date <= date_to)

    result = await db.execute(stmt)
    return {status: count for status, count in result.all()}


async def get_dashboard_stats(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    now: datetime,
    date_from: date | None = None,
    date_to: date | None = None,
) -> DashboardStats:
    """Compute the dashboard statistics for one owner.

    Args:
        db: Async database session.
        user_id: Owner's UUID.
        now: Reference time for "upcoming".
        date_from: Inclusive lower bound on application_date.
        date_to: Inclusive upper bound on application_date.

    Returns:
        DashboardStats for the owner.
    """
    status_counts = await count_by_status(
        db, user_id=user_id, date_from=date_from, date_to=date_to
    )
    upcoming = await InterviewRepository.count_upcoming(db, user_id=user_id, now=now)
    stats = build_stats(status_counts, upcoming)
    logger.debug(
        "Dashboard stats for %s: total=%d upcoming=%d",
        user_id,
        stats.total_applications,
        stats.upcoming_interviews,
    )
    return stats
