"""SQLAlchemy ORM models for the job tracker.

All models are exported from this module for convenient imports:
    from job_tracker.models import JobApplication, Interview, ActivityLogEntry

- base.py: Base, TimestampMixin
- job_application.py: JobApplication, Interview, ActivityLogEntry
"""

from job_tracker.models.base import Base, TimestampMixin
from job_tracker.models.job_application import (
    ActivityLogEntry,
    Interview,
    JobApplication,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Tables
    "JobApplication",
    "Interview",
    "ActivityLogEntry",
]
