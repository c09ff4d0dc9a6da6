"""Interview request schemas."""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from job_tracker.core.text import DbText
from job_tracker.schemas.enums import InterviewStatus, InterviewType


class CreateInterviewRequest(BaseModel):
    """Request body for POST /interviews.

    The parent application must belong to the caller; user_id is taken
    from the caller's identity, never from the body.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    job_application_id: uuid.UUID
    interview_type: InterviewType
    scheduled_date: datetime
    duration_minutes: int = Field(default=60, gt=0, le=24 * 60)
    interviewer_name: DbText | None = Field(default=None, max_length=255)
    interviewer_email: DbText | None = Field(default=None, max_length=255)
    notes: DbText | None = Field(default=None, max_length=50000)
    status: InterviewStatus = Field(
        default=InterviewStatus.SCHEDULED, validate_default=True
    )

    @field_validator("scheduled_date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
