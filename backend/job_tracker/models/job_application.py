"""Job application, interview and activity log models."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from job_tracker.models.base import Base, TimestampMixin
from job_tracker.schemas.enums import (
    ActivityType,
    ApplicationStatus,
    EmploymentType,
    InterviewStatus,
    InterviewType,
    Priority,
    sql_in_list,
)

_DEFAULT_UUID = text("gen_random_uuid()")


class JobApplication(Base, TimestampMixin):
    """A job application owned by exactly one user.

    Ownership (user_id) is set at creation and never changes.
    """

    __tablename__ = "job_applications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=_DEFAULT_UUID,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    position_title: Mapped[str] = mapped_column(String(255), nullable=False)
    job_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    salary_range: Mapped[str | None] = mapped_column(String(100), nullable=True)

    employment_type: Mapped[str] = mapped_column(
        String(20),
        default=EmploymentType.FULL_TIME.value,
        server_default=text(f"'{EmploymentType.FULL_TIME.value}'"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=ApplicationStatus.APPLIED.value,
        server_default=text(f"'{ApplicationStatus.APPLIED.value}'"),
        nullable=False,
    )
    priority: Mapped[str] = mapped_column(
        String(10),
        default=Priority.MEDIUM.value,
        server_default=text(f"'{Priority.MEDIUM.value}'"),
        nullable=False,
    )
    application_date: Mapped[date] = mapped_column(
        Date,
        server_default=func.current_date(),
        nullable=False,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint(
            f"status IN ({sql_in_list(ApplicationStatus)})",
            name="ck_jobapplication_status",
        ),
        CheckConstraint(
            f"priority IN ({sql_in_list(Priority)})",
            name="ck_jobapplication_priority",
        ),
        CheckConstraint(
            f"employment_type IN ({sql_in_list(EmploymentType)})",
            name="ck_jobapplication_employment_type",
        ),
        CheckConstraint(
            "length(company_name) > 0 AND length(position_title) > 0",
            name="ck_jobapplication_required_text",
        ),
        Index("idx_jobapplication_user_created", "user_id", "created_at"),
        Index("idx_jobapplication_user_status", "user_id", "status"),
    )

    # Relationships
    interviews: Mapped[list["Interview"]] = relationship(
        "Interview",
        back_populates="job_application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Interview.scheduled_date",
    )
    activity_log: Mapped[list["ActivityLogEntry"]] = relationship(
        "ActivityLogEntry",
        back_populates="job_application",
        passive_deletes=True,
        order_by="ActivityLogEntry.created_at.desc()",
    )


class Interview(Base, TimestampMixin):
    """An interview belonging to one job application.

    "Upcoming" is derived at query time (scheduled_date >= now AND
    status = 'Scheduled'), never stored.
    """

    __tablename__ = "interviews"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=_DEFAULT_UUID,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    job_application_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    interview_type: Mapped[str] = mapped_column(String(20), nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        default=60,
        server_default=text("60"),
        nullable=False,
    )
    interviewer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    interviewer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=InterviewStatus.SCHEDULED.value,
        server_default=text(f"'{InterviewStatus.SCHEDULED.value}'"),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            f"interview_type IN ({sql_in_list(InterviewType)})",
            name="ck_interview_type",
        ),
        CheckConstraint(
            f"status IN ({sql_in_list(InterviewStatus)})",
            name="ck_interview_status",
        ),
        CheckConstraint("duration_minutes > 0", name="ck_interview_duration"),
        Index("idx_interview_user_scheduled", "user_id", "scheduled_date"),
        Index("idx_interview_application", "job_application_id"),
    )

    job_application: Mapped["JobApplication"] = relationship(
        "JobApplication",
        back_populates="interviews",
    )


class ActivityLogEntry(Base):
    """Append-only history entry.

    The link to the job application is weak (SET NULL on delete); the
    company/position snapshot keeps the entry readable afterwards.
    """

    __tablename__ = "activity_log"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=_DEFAULT_UUID,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    job_application_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_applications.id", ondelete="SET NULL"),
        nullable=True,
    )
    job_company_snapshot: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    job_position_snapshot: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    action_type: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            f"action_type IN ({sql_in_list(ActivityType)})",
            name="ck_activitylog_action_type",
        ),
        Index("idx_activitylog_user_created", "user_id", "created_at"),
    )

    job_application: Mapped["JobApplication | None"] = relationship(
        "JobApplication",
        back_populates="activity_log",
    )
