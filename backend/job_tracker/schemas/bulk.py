"""Bulk operation request schemas.

Bulk update and bulk delete act on a list of application ids. Ids that
don't exist or belong to another owner are skipped; the response message
reports how many rows were actually affected.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from job_tracker.schemas.job_application import UpdateJobApplicationRequest


class BulkUpdateRequest(BaseModel):
    """Request body for PUT /applications/bulk.

    Attributes:
        ids: Application UUIDs to update.
        updates: Fields to write on every owned application in ``ids``.
    """

    ids: list[UUID] = Field(..., description="Application IDs to update")
    updates: UpdateJobApplicationRequest = Field(
        ..., description="Fields to apply to every selected application"
    )


class BulkDeleteRequest(BaseModel):
    """Request body for DELETE /applications/bulk.

    Attributes:
        ids: Application UUIDs to delete.
    """

    ids: list[UUID] = Field(..., description="Application IDs to delete")
