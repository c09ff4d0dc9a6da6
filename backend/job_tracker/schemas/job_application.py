"""Job application request/response schemas.

Request models validate enum membership and text bounds before anything
reaches the database (the CHECK constraints are the second line).

Response models read straight from ORM rows (``from_attributes``). They
declare no relationship fields: related rows are attached by the
serializers below, and only when they were eager-loaded, so an async
session is never asked to lazy-load.
"""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from job_tracker.core.text import DbText
from job_tracker.schemas.enums import ApplicationStatus, EmploymentType, Priority

if TYPE_CHECKING:
    from job_tracker.models import ActivityLogEntry, Interview, JobApplication

_MAX_TEXT_LENGTH = 50000
"""Upper bound on free-text fields (notes)."""

_MAX_URL_LENGTH = 2048

# Columns that are NOT NULL in the database; an explicit null in an
# update body is rejected instead of failing at the backend.
_NON_NULLABLE_FIELDS = (
    "company_name",
    "position_title",
    "employment_type",
    "status",
    "priority",
    "application_date",
)


# =============================================================================
# Requests
# =============================================================================


class CreateJobApplicationRequest(BaseModel):
    """Request body for POST /applications.

    Unknown keys (including user_id) are ignored: the owner always comes
    from the caller's identity. Omitted enum/date fields take the column
    defaults.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    company_name: DbText = Field(..., min_length=1, max_length=255)
    position_title: DbText = Field(..., min_length=1, max_length=255)
    job_url: DbText | None = Field(default=None, max_length=_MAX_URL_LENGTH)
    location: DbText | None = Field(default=None, max_length=255)
    salary_range: DbText | None = Field(default=None, max_length=100)
    employment_type: EmploymentType | None = None
    status: ApplicationStatus | None = None
    priority: Priority | None = None
    application_date: date | None = None
    notes: DbText | None = Field(default=None, max_length=_MAX_TEXT_LENGTH)
    contact_person: DbText | None = Field(default=None, max_length=255)
    contact_email: DbText | None = Field(default=None, max_length=255)


class UpdateJobApplicationRequest(BaseModel):
    """Request body for PUT /applications/{id} and the bulk update payload.

    All fields optional; only fields present in the body are written.
    id, user_id, created_at and updated_at are silently dropped.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    company_name: DbText | None = Field(default=None, min_length=1, max_length=255)
    position_title: DbText | None = Field(default=None, min_length=1, max_length=255)
    job_url: DbText | None = Field(default=None, max_length=_MAX_URL_LENGTH)
    location: DbText | None = Field(default=None, max_length=255)
    salary_range: DbText | None = Field(default=None, max_length=100)
    employment_type: EmploymentType | None = None
    status: ApplicationStatus | None = None
    priority: Priority | None = None
    application_date: date | None = None
    notes: DbText | None = Field(default=None, max_length=_MAX_TEXT_LENGTH)
    contact_person: DbText | None = Field(default=None, max_length=255)
    contact_email: DbText | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "UpdateJobApplicationRequest":
        """Required columns may be omitted but never set to null."""
        for field in _NON_NULLABLE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                msg = f"{field} cannot be null"
                raise ValueError(msg)
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Responses
# =============================================================================


class ApplicationSummary(BaseModel):
    """Minimal application reference embedded in interviews and activity."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    company_name: str
    position_title: str


class JobApplicationResponse(BaseModel):
    """Job application columns."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    company_name: str
    position_title: str
    job_url: str | None = None
    location: str | None = None
    salary_range: str | None = None
    employment_type: str
    status: str
    priority: str
    application_date: date
    notes: str | None = None
    contact_person: str | None = None
    contact_email: str | None = None
    created_at: datetime
    updated_at: datetime


class InterviewResponse(BaseModel):
    """Interview columns."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    job_application_id: uuid.UUID
    interview_type: str
    scheduled_date: datetime
    duration_minutes: int
    interviewer_name: str | None = None
    interviewer_email: str | None = None
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class ActivityLogEntryResponse(BaseModel):
    """Activity log entry columns, including the insert-time snapshot."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    job_application_id: uuid.UUID | None = None
    job_company_snapshot: str | None = None
    job_position_snapshot: str | None = None
    action_type: str
    description: str
    old_value: str | None = None
    new_value: str | None = None
    created_at: datetime


# =============================================================================
# Serializers
# =============================================================================


def interview_to_dict(
    interview: "Interview", *, with_application: bool = False
) -> dict[str, Any]:
    """Convert an Interview to an API response dict.

    Args:
        interview: The Interview model instance.
        with_application: Attach the parent summary (must be eager-loaded).

    Returns:
        JSON-ready dict.
    """
    data = InterviewResponse.model_validate(interview).model_dump(mode="json")
    if with_application:
        data["job_application"] = ApplicationSummary.model_validate(
            interview.job_application
        ).model_dump(mode="json")
    return data


def activity_to_dict(
    entry: "ActivityLogEntry", *, with_application: bool = False
) -> dict[str, Any]:
    """Convert an ActivityLogEntry to an API response dict.

    When ``with_application`` is set, ``job_application`` is the summary of
    the linked application, or None once it has been deleted.
    """
    data = ActivityLogEntryResponse.model_validate(entry).model_dump(mode="json")
    if with_application:
        parent = entry.job_application
        data["job_application"] = (
            ApplicationSummary.model_validate(parent).model_dump(mode="json")
            if parent is not None
            else None
        )
    return data


def application_to_dict(
    application: "JobApplication",
    *,
    include_interviews: bool = False,
    include_activity: bool = False,
) -> dict[str, Any]:
    """Convert a JobApplication to an API response dict.

    Args:
        application: The JobApplication model instance.
        include_interviews: Attach ``interviews`` (must be eager-loaded).
        include_activity: Attach ``activity_log`` (must be eager-loaded).

    Returns:
        JSON-ready dict.
    """
    data = JobApplicationResponse.model_validate(application).model_dump(mode="json")
    if include_interviews:
        data["interviews"] = [interview_to_dict(i) for i in application.interviews]
    if include_activity:
        data["activity_log"] = [activity_to_dict(a) for a in application.activity_log]
    return data
