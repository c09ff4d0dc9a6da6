"""Statement builders for owner-scoped job application queries.

Turns a filter set, sort and page window into SQLAlchemy statements. The
owner predicate is always the first WHERE clause and every builder takes
the owner id as an explicit argument; there is no ambient identity.

User text (company_name, search) is embedded as a bound parameter, never
spliced into SQL. LIKE metacharacters are escaped so "50%" or "a_b" match
literally, and a comma inside a search term is part of the single
pattern rather than a separator between clauses.
"""

import uuid

from sqlalchemy import ColumnElement, Select, and_, func, or_, select
from sqlalchemy.orm import selectinload

from job_tracker.core.errors import ValidationError
from job_tracker.core.filtering import ApplicationFilters, SortParams
from job_tracker.core.pagination import PaginationParams
from job_tracker.models import JobApplication

LIKE_ESCAPE_CHAR = "\\"

# Columns scanned by the free-text `search` filter.
SEARCH_COLUMNS = (
    JobApplication.company_name,
    JobApplication.position_title,
    JobApplication.contact_person,
    JobApplication.contact_email,
    JobApplication.notes,
    JobApplication.location,
)

# Columns a caller may order by.
SORTABLE_COLUMNS = {
    column.key: column
    for column in (
        JobApplication.company_name,
        JobApplication.position_title,
        JobApplication.status,
        JobApplication.priority,
        JobApplication.employment_type,
        JobApplication.application_date,
        JobApplication.location,
        JobApplication.salary_range,
        JobApplication.created_at,
        JobApplication.updated_at,
    )
}


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally.

    Args:
        term: Raw user text.

    Returns:
        Text with backslash, % and _ escaped.

    Examples:
        >>> escape_like("50%_off")
        "50\\\\%\\\\_off"
        >>> escape_like("Acme, Inc")
        "Acme, Inc"
    """
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def contains_pattern(term: str) -> str:
    """Build a case-insensitive substring pattern for ILIKE."""
    return f"%{escape_like(term)}%"


def search_predicate(term: str) -> ColumnElement[bool]:
    """OR of case-insensitive substring matches across SEARCH_COLUMNS.

    Args:
        term: Search text; used as one token even if it contains commas.

    Returns:
        SQL expression matching rows where any search column contains term.
    """
    pattern = contains_pattern(term)
    return or_(
        *(column.ilike(pattern, escape=LIKE_ESCAPE_CHAR) for column in SEARCH_COLUMNS)
    )


def build_application_filters(
    owner_id: uuid.UUID, filters: ApplicationFilters
) -> list[ColumnElement[bool]]:
    """Compose WHERE clauses for a filter set.

    The owner predicate comes first and is unconditional; every
    user-supplied predicate is ANDed after it.

    Args:
        owner_id: Authenticated caller's user id.
        filters: Decoded filter set.

    Returns:
        List of predicates to AND together.
    """
    clauses: list[ColumnElement[bool]] = [JobApplication.user_id == owner_id]

    if filters.status:
        clauses.append(JobApplication.status.in_(filters.status))
    if filters.priority:
        clauses.append(JobApplication.priority.in_(filters.priority))
    if filters.employment_type:
        clauses.append(JobApplication.employment_type.in_(filters.employment_type))
    if filters.company_name:
        clauses.append(
            JobApplication.company_name.ilike(
                contains_pattern(filters.company_name), escape=LIKE_ESCAPE_CHAR
            )
        )
    if filters.search:
        clauses.append(search_predicate(filters.search))
    if filters.date_from:
        clauses.append(JobApplication.application_date >= filters.date_from)
    if filters.date_to:
        clauses.append(JobApplication.application_date <= filters.date_to)

    return clauses


def resolve_sort_column(sort: SortParams):
    """Look up the column for a sort field.

    Raises:
        ValidationError: If the field is not sortable.
    """
    column = SORTABLE_COLUMNS.get(sort.field)
    if column is None:
        raise ValidationError(
            f"Cannot sort by '{sort.field}'",
            details=[{"field": "sort_field", "allowed": sorted(SORTABLE_COLUMNS)}],
        )
    return column


def build_list_statement(
    owner_id: uuid.UUID,
    filters: ApplicationFilters,
    sort: SortParams,
    pagination: PaginationParams,
    *,
    include_interviews: bool = False,
    include_activity: bool = False,
) -> Select[tuple[JobApplication]]:
    """Build the page query for the job application list.

    Ordering uses the requested column with ``id`` as a tie-breaker so
    consecutive pages never overlap or skip rows, whatever the sort field.
    The window covers rows ``offset`` through ``range_end`` inclusive.

    Args:
        owner_id: Authenticated caller's user id.
        filters: Decoded filter set.
        sort: Sort field and direction.
        pagination: Page window.
        include_interviews: Attach each row's interviews.
        include_activity: Attach each row's activity log.

    Returns:
        SELECT statement for one page of JobApplication rows.

    Raises:
        ValidationError: If the sort field is not sortable.
    """
    column = resolve_sort_column(sort)
    if sort.ascending:
        order_by = (column.asc(), JobApplication.id.asc())
    else:
        order_by = (column.desc(), JobApplication.id.desc())

    stmt = (
        select(JobApplication)
        .where(and_(*build_application_filters(owner_id, filters)))
        .order_by(*order_by)
        .offset(pagination.offset)
        .limit(pagination.limit)
    )

    if include_interviews:
        stmt = stmt.options(selectinload(JobApplication.interviews))
    if include_activity:
        stmt = stmt.options(selectinload(JobApplication.activity_log))

    return stmt


def build_count_statement(
    owner_id: uuid.UUID, filters: ApplicationFilters
) -> Select[tuple[int]]:
    """Build the total-count query for the same filter set.

    The count ignores the page window: it reflects every matching row.
    """
    return (
        select(func.count())
        .select_from(JobApplication)
        .where(and_(*build_application_filters(owner_id, filters)))
    )
