"""Activity log side effects of application and interview mutations.

Each mutation that a user would want in their history writes one entry:

- create application          -> application_created
- status changed              -> status_change (old/new status)
- notes changed               -> notes_update
- interview created           -> interview_scheduled, or interview_completed
                                 when it is created already Completed

Entries are written in the same session as the mutation, so they commit
or roll back together with it.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from job_tracker.models import ActivityLogEntry, Interview, JobApplication
from job_tracker.repositories.activity_log_repository import ActivityLogRepository
from job_tracker.schemas.enums import ActivityType, InterviewStatus

logger = logging.getLogger(__name__)

# Fields whose changes produce activity entries.
TRACKED_FIELDS: tuple[str, ...] = ("status", "notes")


def tracked_values(application: JobApplication) -> dict[str, Any]:
    """Snapshot the tracked fields before an update is applied."""
    return {field: getattr(application, field) for field in TRACKED_FIELDS}


async def record_application_created(
    db: AsyncSession, application: JobApplication
) -> ActivityLogEntry:
    """Record that an application was added."""
    return await ActivityLogRepository.add(
        db,
        application=application,
        action_type=ActivityType.APPLICATION_CREATED.value,
        description=(
            f"Applied to {application.position_title} at {application.company_name}"
        ),
        new_value=application.status,
    )


async def record_application_changes(
    db: AsyncSession,
    application: JobApplication,
    previous: Mapping[str, Any],
) -> list[ActivityLogEntry]:
    """Record status and notes changes made by an update.

    Args:
        db: Async database session.
        application: The application after the update.
        previous: Output of ``tracked_values`` taken before the update.

    Returns:
        The entries written (empty when nothing tracked changed).
    """
    entries: list[ActivityLogEntry] = []

    old_status = previous.get("status")
    if old_status != application.status:
        entries.append(
            await ActivityLogRepository.add(
                db,
                application=application,
                action_type=ActivityType.STATUS_CHANGE.value,
                description=(
                    f"Status changed from {old_status} to {application.status}"
                ),
                old_value=old_status,
                new_value=application.status,
            )
        )

    old_notes = previous.get("notes")
    if (old_notes or None) != (application.notes or None):
        entries.append(
            await ActivityLogRepository.add(
                db,
                application=application,
                action_type=ActivityType.NOTES_UPDATE.value,
                description=f"Notes updated for {application.company_name}",
                old_value=old_notes,
                new_value=application.notes,
            )
        )

    if entries:
        logger.debug(
            "Recorded %d activity entries for application %s",
            len(entries),
            application.id,
        )
    return entries


async def record_interview_created(
    db: AsyncSession,
    application: JobApplication,
    interview: Interview,
) -> ActivityLogEntry:
    """Record a newly created interview against its application."""
    if interview.status == InterviewStatus.COMPLETED.value:
        action_type = ActivityType.INTERVIEW_COMPLETED
        verb = "completed"
    else:
        action_type = ActivityType.INTERVIEW_SCHEDULED
        verb = "scheduled"

    return await ActivityLogRepository.add(
        db,
        application=application,
        action_type=action_type.value,
        description=(
            f"{interview.interview_type} interview {verb} with "
            f"{application.company_name}"
        ),
        new_value=interview.scheduled_date.isoformat(),
    )
