"""Repository for Interview per-user operations.

Interviews carry their own user_id; every read filters on it directly.
"Upcoming" is computed here (scheduled_date >= now AND status Scheduled),
never stored.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from job_tracker.models import Interview
from job_tracker.schemas.enums import InterviewStatus


def _upcoming_clauses(now: datetime) -> tuple[Any, ...]:
    return (
        Interview.scheduled_date >= now,
        Interview.status == InterviewStatus.SCHEDULED.value,
    )


class InterviewRepository:
    """Stateless repository for Interview operations.

    Stateless: the session and the owner id are passed to every call,
    and nothing here commits.
    """

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        job_application_id: uuid.UUID | None = None,
        upcoming_only: bool = False,
        now: datetime | None = None,
    ) -> list[Interview]:
        """Fetch the owner's interviews with their parent application.

        Args:
            db: Async database session.
            user_id: Owner's UUID.
            job_application_id: Restrict to one application.
            upcoming_only: Only interviews still Scheduled and not yet past.
            now: Reference time for ``upcoming_only`` (required when set).

        Returns:
            Interviews ordered by scheduled_date ascending, with
            ``job_application`` eagerly loaded.
        """
        stmt = (
            select(Interview)
            .where(Interview.user_id == user_id)
            .options(selectinload(Interview.job_application))
            .order_by(Interview.scheduled_date.asc(), Interview.id.asc())
        )
        if job_application_id is not None:
            stmt = stmt.where(Interview.job_application_id == job_application_id)
        if upcoming_only:
            if now is None:
                msg = "now is required when upcoming_only is set"
                raise ValueError(msg)
            stmt = stmt.where(*_upcoming_clauses(now))

        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_upcoming(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        now: datetime,
    ) -> int:
        """Count the owner's upcoming interviews.

        Args:
            db: Async database session.
            user_id: Owner's UUID.
            now: Reference time.

        Returns:
            Number of Scheduled interviews at or after ``now``.
        """
        stmt = (
            select(func.count())
            .select_from(Interview)
            .where(Interview.user_id == user_id, *_upcoming_clauses(now))
        )
        result = await db.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        job_application_id: uuid.UUID,
        interview_type: str,
        scheduled_date: datetime,
        **optional: Any,
    ) -> Interview:
        """Create an interview.

        The caller must already have verified that the parent application
        belongs to ``user_id``.

        Args:
            db: Async database session.
            user_id: Owner's UUID.
            job_application_id: Parent application UUID.
            interview_type: One of InterviewType.
            scheduled_date: When the interview takes place.
            **optional: duration_minutes, interviewer_name,
                interviewer_email, notes, status.

        Returns:
            Created Interview with database-generated fields populated.
        """
        interview = Interview(
            user_id=user_id,
            job_application_id=job_application_id,
            interview_type=interview_type,
            scheduled_date=scheduled_date,
            **optional,
        )
        db.add(interview)
        await db.flush()
        await db.refresh(interview)
        return interview
