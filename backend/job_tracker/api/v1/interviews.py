"""Interviews API router.

Endpoints:
- GET  /interviews  - The caller's interviews, soonest first
- POST /interviews  - Schedule (or log) an interview on an owned application
"""

import uuid
from datetime import UTC, datetime

from fastapi import APIRouter, Query, status

from job_tracker.api.deps import CurrentUserId, DbSession
from job_tracker.core.errors import NotFoundError
from job_tracker.core.responses import DataResponse
from job_tracker.repositories.interview_repository import InterviewRepository
from job_tracker.repositories.job_application_repository import (
    JobApplicationRepository,
)
from job_tracker.schemas.interview import CreateInterviewRequest
from job_tracker.schemas.job_application import interview_to_dict
from job_tracker.services.activity_recorder import record_interview_created

router = APIRouter()


@router.get("")
async def list_interviews(
    user_id: CurrentUserId,
    db: DbSession,
    job_application_id: uuid.UUID | None = Query(default=None),
    upcoming_only: str | None = Query(default=None),
) -> DataResponse[list[dict]]:
    """List the caller's interviews ordered by scheduled date.

    Args:
        user_id: Current authenticated user (injected).
        db: Database session (injected).
        job_application_id: Restrict to one application.
        upcoming_only: "true" to keep only Scheduled interviews from now on.

    Returns:
        DataResponse with interviews, each carrying a job_application summary.
    """
    interviews = await InterviewRepository.list_for_user(
        db,
        user_id=user_id,
        job_application_id=job_application_id,
        upcoming_only=upcoming_only is not None and upcoming_only.lower() == "true",
        now=datetime.now(UTC),
    )
    return DataResponse(
        data=[interview_to_dict(i, with_application=True) for i in interviews]
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_interview(
    request: CreateInterviewRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Create an interview on one of the caller's applications.

    Args:
        request: The create request body.
        user_id: Current authenticated user (injected).
        db: Database session (injected).

    Returns:
        DataResponse with the created interview.

    Raises:
        NotFoundError: If the parent application doesn't belong to the caller.
    """
    application = await JobApplicationRepository.get_by_id(
        db, request.job_application_id, user_id=user_id
    )
    if application is None:
        raise NotFoundError("Job application", str(request.job_application_id))

    interview = await InterviewRepository.create(
        db,
        user_id=user_id,
        **request.model_dump(),
    )
    await record_interview_created(db, application, interview)

    return DataResponse(data=interview_to_dict(interview))
