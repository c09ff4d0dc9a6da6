"""Closed value sets shared by models, schemas and the client.

Values match the database check constraints in the migration.
"""

from enum import Enum


class ApplicationStatus(str, Enum):
    """Job application status values."""

    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"
    ACCEPTED = "Accepted"


class Priority(str, Enum):
    """Job application priority values."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EmploymentType(str, Enum):
    """Employment type values."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"


class InterviewType(str, Enum):
    """Interview format values."""

    PHONE = "Phone"
    VIDEO = "Video"
    IN_PERSON = "In-person"
    TECHNICAL = "Technical"
    FINAL = "Final"


class InterviewStatus(str, Enum):
    """Interview lifecycle values."""

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    RESCHEDULED = "Rescheduled"


class ActivityType(str, Enum):
    """Activity log action types."""

    APPLICATION_CREATED = "application_created"
    STATUS_CHANGE = "status_change"
    NOTES_UPDATE = "notes_update"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"


# Statuses that take an application out of the active pipeline.
INACTIVE_STATUSES: frozenset[str] = frozenset(
    {
        ApplicationStatus.REJECTED.value,
        ApplicationStatus.WITHDRAWN.value,
        ApplicationStatus.ACCEPTED.value,
    }
)

# Statuses counted as "the company responded" for the response rate.
RESPONSE_STATUSES: tuple[str, ...] = (
    ApplicationStatus.INTERVIEW.value,
    ApplicationStatus.OFFER.value,
    ApplicationStatus.REJECTED.value,
)


def sql_in_list(enum_cls: type[Enum]) -> str:
    """Render enum values as a SQL IN list for check constraints.

    Example:
        >>> sql_in_list(Priority)
        "'Low', 'Medium', 'High'"
    """
    return ", ".join(f"'{member.value}'" for member in enum_cls)
