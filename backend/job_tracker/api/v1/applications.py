"""Job applications API router.

Endpoints:
- GET    /applications         - Filtered, sorted, paginated list
- POST   /applications         - Create (owner attached from identity)
- PUT    /applications/bulk    - Apply the same updates to many applications
- DELETE /applications/bulk    - Delete many applications
- GET    /applications/{id}    - Single application with interviews + activity
- PUT    /applications/{id}    - Update
- DELETE /applications/{id}    - Hard delete

Every query is scoped to the caller's user id. An application owned by
someone else answers exactly like a missing one (404).
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request, status

from job_tracker.api.deps import CurrentUserId, DbSession
from job_tracker.core.config import settings
from job_tracker.core.errors import NotFoundError, ValidationError
from job_tracker.core.filtering import ApplicationFilters, SortParams, decode_filters
from job_tracker.core.pagination import PaginationParams, pagination_params
from job_tracker.core.rate_limiting import limiter
from job_tracker.core.responses import (
    DataMessageResponse,
    DataResponse,
    MessageResponse,
    PaginatedResponse,
)
from job_tracker.repositories.job_application_repository import (
    JobApplicationRepository,
)
from job_tracker.schemas.bulk import BulkDeleteRequest, BulkUpdateRequest
from job_tracker.schemas.job_application import (
    CreateJobApplicationRequest,
    UpdateJobApplicationRequest,
    application_to_dict,
)
from job_tracker.services.activity_recorder import (
    record_application_changes,
    record_application_created,
    tracked_values,
)

router = APIRouter()


# =============================================================================
# Query Parameter Dependencies
# =============================================================================


def application_filters(request: Request) -> ApplicationFilters:
    """Decode the filter set from the raw query string."""
    return decode_filters(request.query_params)


def sort_params(
    sort_field: str | None = Query(default=None, description="Column to order by"),
    sort_direction: str | None = Query(default=None, description="asc or desc"),
) -> SortParams:
    """Parse sort parameters; only the exact value "asc" sorts ascending."""
    return SortParams.from_query(sort_field, sort_direction)


def _is_true(value: str | None) -> bool:
    return value is not None and value.lower() == "true"


def _affected_message(verb: str, count: int) -> str:
    noun = "job application" if count == 1 else "job applications"
    return f"{verb} {count} {noun}"


# =============================================================================
# Collection
# =============================================================================


@router.get("")
async def list_applications(
    user_id: CurrentUserId,
    db: DbSession,
    filters: ApplicationFilters = Depends(application_filters),
    sort: SortParams = Depends(sort_params),
    pagination: PaginationParams = Depends(pagination_params),
    include_interviews: str | None = Query(default=None),
    include_activity: str | None = Query(default=None),
) -> PaginatedResponse[dict]:
    """List the caller's job applications.

    Filters: status, priority, employment_type (comma-separated, OR),
    company_name (substring), search (substring across text columns),
    date_from / date_to (inclusive application_date window).

    Args:
        user_id: Current authenticated user (injected).
        db: Database session (injected).
        filters: Decoded filter set (injected).
        sort: Sort field and direction (injected).
        pagination: Page window (injected).
        include_interviews: "true" to attach interviews to each row.
        include_activity: "true" to attach the activity log to each row.

    Returns:
        PaginatedResponse with the page rows and the total match count.

    Raises:
        ValidationError: If a date filter or the sort field is invalid.
    """
    with_interviews = _is_true(include_interviews)
    with_activity = _is_true(include_activity)

    rows, total = await JobApplicationRepository.list_page(
        db,
        user_id=user_id,
        filters=filters,
        sort=sort,
        pagination=pagination,
        include_interviews=with_interviews,
        include_activity=with_activity,
    )

    return PaginatedResponse(
        data=[
            application_to_dict(
                row,
                include_interviews=with_interviews,
                include_activity=with_activity,
            )
            for row in rows
        ],
        count=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_application(
    request: CreateJobApplicationRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Create a job application for the caller.

    Args:
        request: The create request body.
        user_id: Current authenticated user (injected).
        db: Database session (injected).

    Returns:
        DataResponse with the created application.
    """
    fields = request.model_dump(exclude={"company_name", "position_title"})
    application = await JobApplicationRepository.create(
        db,
        user_id=user_id,
        company_name=request.company_name,
        position_title=request.position_title,
        **fields,
    )
    await record_application_created(db, application)

    return DataResponse(data=application_to_dict(application))


# =============================================================================
# Bulk Operations
# =============================================================================
# Declared before /{application_id} so "bulk" never parses as an id.


@router.put("/bulk")
@limiter.limit(settings.rate_limit_bulk)
async def bulk_update_applications(
    request: Request,  # noqa: ARG001 - Required by rate limiter
    body: BulkUpdateRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataMessageResponse[list[dict]]:
    """Apply the same updates to several applications.

    Ids that don't exist or belong to another owner are skipped. All
    rows are written in the request's single transaction.

    Args:
        request: HTTP request (required by the rate limiter).
        body: Ids and the updates to apply.
        user_id: Current authenticated user (injected).
        db: Database session (injected).

    Returns:
        The updated applications and a message with the affected count.

    Raises:
        ValidationError: If ids or updates are empty.
    """
    if not body.ids:
        raise ValidationError("No application ids provided")
    changes = body.updates.changes()
    if not changes:
        raise ValidationError("No updates provided")

    applications = await JobApplicationRepository.get_many(
        db, body.ids, user_id=user_id
    )
    updated = []
    for application in applications:
        previous = tracked_values(application)
        application = await JobApplicationRepository.apply_updates(
            db, application, changes
        )
        await record_application_changes(db, application, previous)
        updated.append(application_to_dict(application))

    return DataMessageResponse(
        data=updated, message=_affected_message("Updated", len(updated))
    )


@router.delete("/bulk")
@limiter.limit(settings.rate_limit_bulk)
async def bulk_delete_applications(
    request: Request,  # noqa: ARG001 - Required by rate limiter
    body: BulkDeleteRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> MessageResponse:
    """Delete several applications.

    Args:
        request: HTTP request (required by the rate limiter).
        body: Ids to delete.
        user_id: Current authenticated user (injected).
        db: Database session (injected).

    Returns:
        Message with the number of rows actually deleted.

    Raises:
        ValidationError: If ids is empty.
    """
    if not body.ids:
        raise ValidationError("No application ids provided")

    deleted = await JobApplicationRepository.bulk_delete(
        db, application_ids=body.ids, user_id=user_id
    )
    return MessageResponse(message=_affected_message("Deleted", deleted))


# =============================================================================
# Single Application
# =============================================================================


@router.get("/{application_id}")
async def get_application(
    application_id: uuid.UUID,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Get one application with its interviews and activity log.

    Raises:
        NotFoundError: If no application with this id belongs to the caller.
    """
    application = await JobApplicationRepository.get_by_id(
        db, application_id, user_id=user_id, with_relations=True
    )
    if application is None:
        raise NotFoundError("Job application", str(application_id))

    return DataResponse(
        data=application_to_dict(
            application, include_interviews=True, include_activity=True
        )
    )


@router.put("/{application_id}")
async def update_application(
    application_id: uuid.UUID,
    request: UpdateJobApplicationRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Update an application.

    Only fields present in the body are written; id, user_id and the
    timestamps are never taken from the body.

    Args:
        application_id: The application ID.
        request: The update request body.
        user_id: Current authenticated user (injected).
        db: Database session (injected).

    Returns:
        DataResponse with the updated application.

    Raises:
        NotFoundError: If no application with this id belongs to the caller.
    """
    application = await JobApplicationRepository.get_by_id(
        db, application_id, user_id=user_id
    )
    if application is None:
        raise NotFoundError("Job application", str(application_id))

    previous = tracked_values(application)
    application = await JobApplicationRepository.apply_updates(
        db, application, request.changes()
    )
    await record_application_changes(db, application, previous)

    return DataResponse(data=application_to_dict(application))


@router.delete("/{application_id}")
async def delete_application(
    application_id: uuid.UUID,
    user_id: CurrentUserId,
    db: DbSession,
) -> MessageResponse:
    """Hard-delete an application.

    Raises:
        NotFoundError: If no application with this id belongs to the caller.
    """
    deleted = await JobApplicationRepository.delete(
        db, application_id, user_id=user_id
    )
    if not deleted:
        raise NotFoundError("Job application", str(application_id))

    return MessageResponse(message="Job application deleted successfully")
