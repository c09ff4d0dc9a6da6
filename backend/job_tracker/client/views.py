"""Derived views over data returned by the client hooks.

Pure functions: they take rows as returned by the API (JSON dicts with
ISO timestamps) and a reference time, and never perform I/O.

- summarize_companies / company_overview: per-company rollup
- pipeline_snapshot: conversion rates, funnel, insights, weekly recap
- timeline_entries / upcoming_interview_entries: display rows
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from job_tracker.client.presentation import (
    EnumStyle,
    activity_style,
    interview_type_style,
)
from job_tracker.schemas.dashboard import DashboardStats
from job_tracker.schemas.enums import INACTIVE_STATUSES, ActivityType, ApplicationStatus

FOLLOW_UP_AFTER = timedelta(days=7)
RECAP_WINDOW = timedelta(days=7)
PLAYBOOK_SIZE = 3

Row = Mapping[str, Any]


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    value = Decimal(numerator) * 100 / Decimal(denominator)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _follow_up_due(application: Row, now: datetime) -> bool:
    """An Applied application whose application date is over a week old."""
    if application.get("status") != ApplicationStatus.APPLIED.value:
        return False
    applied_on = _parse_date(application.get("application_date"))
    if applied_on is None:
        return False
    applied_at = datetime.combine(applied_on, datetime.min.time(), tzinfo=UTC)
    return now - applied_at > FOLLOW_UP_AFTER


# =============================================================================
# Companies
# =============================================================================


@dataclass
class CompanySummary:
    """All of the caller's applications to one company, rolled up.

    Attributes:
        name: Company name (grouping key, exact match).
        location: First non-empty location seen.
        primary_contact: First non-empty contact person seen.
        primary_email: First non-empty contact e-mail seen.
        roles: Position titles applied for.
        statuses: Statuses across the company's applications.
        latest_update: Most recent updated_at.
        follow_up_due: Any Applied application older than a week.
    """

    name: str
    location: str | None = None
    primary_contact: str | None = None
    primary_email: str | None = None
    roles: set[str] = field(default_factory=set)
    statuses: set[str] = field(default_factory=set)
    latest_update: datetime | None = None
    follow_up_due: bool = False

    @property
    def is_active(self) -> bool:
        """At least one application is still in play."""
        return any(status not in INACTIVE_STATUSES for status in self.statuses)

    @property
    def has_contact(self) -> bool:
        return bool(self.primary_email or self.primary_contact)


@dataclass(frozen=True)
class PlaybookItem:
    company: str
    contact: str | None


@dataclass(frozen=True)
class CompanyOverview:
    """Headline numbers for the companies view."""

    active_prospects: int
    warm_contacts: int
    follow_ups_due: int
    playbook: list[PlaybookItem]


def summarize_companies(
    applications: Iterable[Row], now: datetime
) -> list[CompanySummary]:
    """Group applications by company name.

    Args:
        applications: Application rows.
        now: Reference time; also stands in for unparseable updated_at.

    Returns:
        One summary per company, most recently updated first.
    """
    companies: dict[str, CompanySummary] = {}

    for application in applications:
        name = application["company_name"]
        updated_at = _parse_datetime(application.get("updated_at")) or now
        summary = companies.get(name)
        if summary is None:
            summary = companies[name] = CompanySummary(name=name, latest_update=updated_at)

        summary.location = summary.location or application.get("location") or None
        summary.primary_contact = (
            summary.primary_contact or application.get("contact_person") or None
        )
        summary.primary_email = (
            summary.primary_email or application.get("contact_email") or None
        )
        summary.roles.add(application["position_title"])
        summary.statuses.add(application["status"])
        if summary.latest_update is None or updated_at > summary.latest_update:
            summary.latest_update = updated_at
        if _follow_up_due(application, now):
            summary.follow_up_due = True

    return sorted(companies.values(), key=lambda c: c.latest_update, reverse=True)


def company_overview(companies: list[CompanySummary]) -> CompanyOverview:
    """Count active prospects, warm contacts and due follow-ups.

    The playbook lists at most three companies needing a follow-up, in
    the order given, with the e-mail preferred over the contact name.
    """
    due = [company for company in companies if company.follow_up_due]
    return CompanyOverview(
        active_prospects=sum(1 for company in companies if company.is_active),
        warm_contacts=sum(1 for company in companies if company.has_contact),
        follow_ups_due=len(due),
        playbook=[
            PlaybookItem(
                company=company.name,
                contact=company.primary_email or company.primary_contact,
            )
            for company in due[:PLAYBOOK_SIZE]
        ],
    )


# =============================================================================
# Pipeline
# =============================================================================


@dataclass(frozen=True)
class FunnelStage:
    stage: str
    value: int


@dataclass(frozen=True)
class PipelineSnapshot:
    """Analytics view of the caller's search.

    Attributes:
        response_rate: Server-computed response rate (percent).
        interview_conversion: Interview count over Applied count (percent).
        offer_rate: Offers over total applications (percent).
        active_pipeline: Applications not Rejected/Withdrawn/Accepted.
        awaiting_response: Applications still Applied.
        stale_follow_ups: Applied applications older than a week.
        funnel: Applied -> Interview -> Offer -> Accepted counts.
        insights: Short momentum sentences.
        weekly_recap: Activity counts over the last 7 days.
    """

    response_rate: float
    interview_conversion: int
    offer_rate: int
    active_pipeline: int
    awaiting_response: int
    stale_follow_ups: int
    funnel: list[FunnelStage]
    insights: list[str]
    weekly_recap: list[str]


def _weekly_recap(activities: Iterable[Row], now: datetime) -> list[str]:
    window_start = now - RECAP_WINDOW
    counts = {action: 0 for action in ActivityType}
    for activity in activities:
        created_at = _parse_datetime(activity.get("created_at"))
        if created_at is None or created_at < window_start:
            continue
        try:
            counts[ActivityType(activity.get("action_type"))] += 1
        except ValueError:
            continue

    return [
        "Applications added in the last 7 days: "
        f"{counts[ActivityType.APPLICATION_CREATED]}.",
        f"Interviews scheduled this week: {counts[ActivityType.INTERVIEW_SCHEDULED]}.",
        f"Status updates logged: {counts[ActivityType.STATUS_CHANGE]}.",
    ]


def pipeline_snapshot(
    stats: DashboardStats,
    applications: list[Row],
    upcoming_interviews: list[Row],
    activities: list[Row],
    now: datetime,
) -> PipelineSnapshot:
    """Derive the analytics view.

    Args:
        stats: Dashboard statistics.
        applications: Application rows (typically one large page).
        upcoming_interviews: Interviews from the upcoming-only read.
        activities: Recent activity entries.
        now: Reference time.

    Returns:
        PipelineSnapshot.
    """
    awaiting = [
        app for app in applications if app["status"] == ApplicationStatus.APPLIED.value
    ]
    stale = sum(1 for app in awaiting if _follow_up_due(app, now))
    upcoming = len(upcoming_interviews)

    if awaiting:
        follow_up_insight = (
            f"{_plural(stale, 'application')} have been waiting more than a week. "
            "Time for a follow-up."
        )
    else:
        follow_up_insight = "All pending applications have received recent follow-ups."

    return PipelineSnapshot(
        response_rate=stats.response_rate,
        interview_conversion=_percent(stats.interviews, stats.applied),
        offer_rate=_percent(stats.offers, stats.total_applications),
        active_pipeline=sum(
            1 for app in applications if app["status"] not in INACTIVE_STATUSES
        ),
        awaiting_response=len(awaiting),
        stale_follow_ups=stale,
        funnel=[
            FunnelStage("Applied", stats.applied),
            FunnelStage("Interview", stats.interviews),
            FunnelStage("Offer", stats.offers),
            FunnelStage("Accepted", stats.accepted),
        ],
        insights=[
            f"Response rate is {stats.response_rate:g}% with "
            f"{stats.interviews} interviews on the calendar.",
            f"{_plural(upcoming, 'upcoming interview')} scheduled; "
            "prioritise prep for the nearest date.",
            follow_up_insight,
        ],
        weekly_recap=_weekly_recap(activities, now),
    )


# =============================================================================
# Timeline
# =============================================================================


@dataclass(frozen=True)
class TimelineEntry:
    id: str
    description: str
    company: str | None
    position: str | None
    when: str
    style: EnumStyle


def _short_date(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}"


def relative_time(moment: datetime, now: datetime) -> str:
    """Coarse relative timestamp.

    Examples:
        "Just now" (under an hour), "3h ago", "Yesterday" (24-47h),
        otherwise a short date such as "Mar 5".
    """
    hours = int((now - moment).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    if hours < 48:
        return "Yesterday"
    return _short_date(moment)


def timeline_entries(
    activities: Iterable[Row], now: datetime, limit: int = 10
) -> list[TimelineEntry]:
    """Display rows for the activity timeline.

    Company and position come from the linked application when it still
    exists, otherwise from the entry's snapshot.
    """
    entries: list[TimelineEntry] = []
    for activity in activities:
        if len(entries) >= limit:
            break
        parent = activity.get("job_application") or {}
        created_at = _parse_datetime(activity.get("created_at")) or now
        entries.append(
            TimelineEntry(
                id=str(activity["id"]),
                description=activity["description"],
                company=parent.get("company_name")
                or activity.get("job_company_snapshot"),
                position=parent.get("position_title")
                or activity.get("job_position_snapshot"),
                when=relative_time(created_at, now),
                style=activity_style(activity["action_type"]),
            )
        )
    return entries


@dataclass(frozen=True)
class UpcomingInterviewEntry:
    id: str
    company: str | None
    position: str | None
    day: str
    time: str
    duration_minutes: int
    style: EnumStyle


def interview_day(moment: datetime, now: datetime) -> str:
    """Return "Today", "Tomorrow" or a short date, in the timezone of ``now``."""
    local = moment.astimezone(now.tzinfo) if now.tzinfo else moment
    if local.date() == now.date():
        return "Today"
    if local.date() == now.date() + timedelta(days=1):
        return "Tomorrow"
    return _short_date(local)


def upcoming_interview_entries(
    interviews: Iterable[Row], now: datetime
) -> list[UpcomingInterviewEntry]:
    """Display rows for the upcoming interviews panel."""
    entries: list[UpcomingInterviewEntry] = []
    for interview in interviews:
        scheduled = _parse_datetime(interview["scheduled_date"])
        if scheduled is None:
            continue
        local = scheduled.astimezone(now.tzinfo) if now.tzinfo else scheduled
        parent = interview.get("job_application") or {}
        entries.append(
            UpcomingInterviewEntry(
                id=str(interview["id"]),
                company=parent.get("company_name"),
                position=parent.get("position_title"),
                day=interview_day(scheduled, now),
                time=f"{local.hour % 12 or 12}:{local.minute:02d} "
                f"{'AM' if local.hour < 12 else 'PM'}",
                duration_minutes=interview.get("duration_minutes") or 60,
                style=interview_type_style(interview["interview_type"]),
            )
        )
    return entries
