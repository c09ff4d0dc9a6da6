"""Pydantic request/response schemas for API endpoints."""

from job_tracker.schemas.bulk import BulkDeleteRequest, BulkUpdateRequest
from job_tracker.schemas.dashboard import DashboardStats
from job_tracker.schemas.interview import CreateInterviewRequest
from job_tracker.schemas.job_application import (
    ActivityLogEntryResponse,
    ApplicationSummary,
    CreateJobApplicationRequest,
    InterviewResponse,
    JobApplicationResponse,
    UpdateJobApplicationRequest,
)

__all__ = [
    # Bulk operations
    "BulkDeleteRequest",
    "BulkUpdateRequest",
    # Dashboard
    "DashboardStats",
    # Interviews
    "CreateInterviewRequest",
    # Job applications
    "ActivityLogEntryResponse",
    "ApplicationSummary",
    "CreateJobApplicationRequest",
    "InterviewResponse",
    "JobApplicationResponse",
    "UpdateJobApplicationRequest",
]
