"""Repository for the append-only activity log.

There is no update or delete: entries are written once, alongside the
mutation they describe, and read back newest first.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from job_tracker.models import ActivityLogEntry, JobApplication


class ActivityLogRepository:
    """Stateless repository for ActivityLogEntry operations.

    Stateless: the session and the owner id are passed to every call,
    and nothing here commits.
    """

    @staticmethod
    async def list_recent(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        limit: int,
    ) -> list[ActivityLogEntry]:
        """Fetch the owner's most recent entries.

        Args:
            db: Async database session.
            user_id: Owner's UUID.
            limit: Maximum number of entries.

        Returns:
            Entries newest first, with ``job_application`` eagerly loaded
            (None for entries whose application was deleted).
        """
        stmt = (
            select(ActivityLogEntry)
            .where(ActivityLogEntry.user_id == user_id)
            .options(selectinload(ActivityLogEntry.job_application))
            .order_by(ActivityLogEntry.created_at.desc(), ActivityLogEntry.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def add(
        db: AsyncSession,
        *,
        application: JobApplication,
        action_type: str,
        description: str,
        old_value: str | None = None,
        new_value: str | None = None,
    ) -> ActivityLogEntry:
        """Append an entry about an application.

        The entry belongs to the application's owner and snapshots its
        company and position so it stays readable after a delete.

        Args:
            db: Async database session.
            application: The application the entry describes.
            action_type: One of ActivityType.
            description: Human-readable summary.
            old_value: Previous value, for change entries.
            new_value: New value, for change entries.

        Returns:
            Created ActivityLogEntry.
        """
        entry = ActivityLogEntry(
            user_id=application.user_id,
            job_application_id=application.id,
            job_company_snapshot=application.company_name,
            job_position_snapshot=application.position_title,
            action_type=action_type,
            description=description,
            old_value=old_value,
            new_value=new_value,
        )
        db.add(entry)
        await db.flush()
        await db.refresh(entry)
        return entry
