"""Repository for JobApplication per-user operations.

Every method takes the owner's user_id explicitly and scopes its
statement with it. A row owned by someone else is indistinguishable
from a missing row.
"""

import uuid
from datetime import date
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from job_tracker.core.filtering import ApplicationFilters, SortParams
from job_tracker.core.pagination import PaginationParams
from job_tracker.models import JobApplication
from job_tracker.repositories.application_query import (
    build_count_statement,
    build_list_statement,
)

# Optional fields accepted by JobApplicationRepository.create().
# Required fields (company_name, position_title) are explicit parameters.
CREATABLE_OPTIONAL_FIELDS: frozenset[str] = frozenset(
    {
        "job_url",
        "location",
        "salary_range",
        "employment_type",
        "status",
        "priority",
        "application_date",
        "notes",
        "contact_person",
        "contact_email",
    }
)

# Fields that may be written via apply_updates().
# Never allow updating id, user_id, created_at or updated_at.
_UPDATABLE_FIELDS: frozenset[str] = CREATABLE_OPTIONAL_FIELDS | {
    "company_name",
    "position_title",
}


def _check_fields(fields: set[str], allowed: frozenset[str]) -> None:
    unknown = fields - allowed
    if unknown:
        msg = f"Unknown fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


class JobApplicationRepository:
    """Stateless repository for JobApplication operations.

    Stateless: the session and the owner id are passed to every call,
    and nothing here commits.
    """

    @staticmethod
    async def list_page(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        filters: ApplicationFilters,
        sort: SortParams,
        pagination: PaginationParams,
        include_interviews: bool = False,
        include_activity: bool = False,
    ) -> tuple[list[JobApplication], int]:
        """Fetch one page of applications plus the total match count.

        Args:
            db: Async database session.
            user_id: Owner's UUID.
            filters: Decoded filter set.
            sort: Sort field and direction.
            pagination: Page window.
            include_interviews: Eager-load interviews.
            include_activity: Eager-load activity log entries.

        Returns:
            Tuple of (rows on this page, total rows matching the filters).

        Raises:
            ValidationError: If the sort field is not sortable.
        """
        stmt = build_list_statement(
            user_id,
            filters,
            sort,
            pagination,
            include_interviews=include_interviews,
            include_activity=include_activity,
        )
        rows = list((await db.execute(stmt)).scalars().all())
        total = (await db.execute(build_count_statement(user_id, filters))).scalar_one()
        return rows, total

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        application_id: uuid.UUID,
        *,
        user_id: uuid.UUID,
        with_relations: bool = False,
    ) -> JobApplication | None:
        """Fetch an application by ID, scoped to owner.

        Args:
            db: Async database session.
            application_id: UUID primary key.
            user_id: Owner's UUID.
            with_relations: Eager-load interviews and activity log.

        Returns:
            JobApplication if found and owned, None otherwise.
        """
        stmt = select(JobApplication).where(
            JobApplication.user_id == user_id,
            JobApplication.id == application_id,
        )
        if with_relations:
            stmt = stmt.options(
                selectinload(JobApplication.interviews),
                selectinload(JobApplication.activity_log),
            )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_many(
        db: AsyncSession,
        application_ids: list[uuid.UUID],
        *,
        user_id: uuid.UUID,
    ) -> list[JobApplication]:
        """Fetch the owned subset of the given application IDs.

        IDs that don't exist or belong to another owner are skipped.
        """
        if not application_ids:
            return []
        stmt = select(JobApplication).where(
            JobApplication.user_id == user_id,
            JobApplication.id.in_(application_ids),
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        company_name: str,
        position_title: str,
        **optional: str | date | None,
    ) -> JobApplication:
        """Create a job application for the owner.

        Fields left out (or passed as None) fall back to the column
        defaults: status Applied, priority Medium, employment_type
        Full-time, application_date today.

        Args:
            db: Async database session.
            user_id: Owner's UUID, attached from the caller's identity.
            company_name: Company name.
            position_title: Position title.
            **optional: Optional fields (see ``CREATABLE_OPTIONAL_FIELDS``).

        Returns:
            Created JobApplication with database-generated fields populated.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _check_fields(set(optional), CREATABLE_OPTIONAL_FIELDS)

        application = JobApplication(
            user_id=user_id,
            company_name=company_name,
            position_title=position_title,
            **{field: value for field, value in optional.items() if value is not None},
        )
        db.add(application)
        await db.flush()
        await db.refresh(application)
        return application

    @staticmethod
    async def apply_updates(
        db: AsyncSession,
        application: JobApplication,
        updates: dict[str, Any],
    ) -> JobApplication:
        """Write field updates onto an already-owned application.

        Args:
            db: Async database session.
            application: Row previously fetched with an owner check.
            updates: Field names and values.

        Returns:
            The refreshed application.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _check_fields(set(updates), _UPDATABLE_FIELDS)

        for field, value in updates.items():
            setattr(application, field, value)

        await db.flush()
        await db.refresh(application)
        return application

    @staticmethod
    async def delete(
        db: AsyncSession,
        application_id: uuid.UUID,
        *,
        user_id: uuid.UUID,
    ) -> bool:
        """Hard-delete an application, scoped to owner.

        Interviews go with it (ON DELETE CASCADE); activity entries keep
        their snapshot and lose the link (ON DELETE SET NULL).

        Returns:
            True if a row was deleted, False if none matched.
        """
        stmt = (
            delete(JobApplication)
            .where(
                JobApplication.user_id == user_id,
                JobApplication.id == application_id,
            )
            .returning(JobApplication.id)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def bulk_delete(
        db: AsyncSession,
        *,
        application_ids: list[uuid.UUID],
        user_id: uuid.UUID,
    ) -> int:
        """Delete every owned application among the given IDs.

        Args:
            db: Async database session.
            application_ids: Candidate UUIDs.
            user_id: Owner's UUID (ownership filter).

        Returns:
            Number of rows deleted.
        """
        if not application_ids:
            return 0

        stmt = (
            delete(JobApplication)
            .where(
                JobApplication.user_id == user_id,
                JobApplication.id.in_(application_ids),
            )
            .returning(JobApplication.id)
        )
        result = await db.execute(stmt)
        return len(result.scalars().all())
