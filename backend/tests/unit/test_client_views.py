"""Tests for derived client views and display metadata."""

from datetime import UTC, datetime, timedelta

import pytest

from job_tracker.client.presentation import (
    ACTIVITY_STYLES,
    INTERVIEW_TYPE_STYLES,
    activity_style,
    interview_type_style,
)
from job_tracker.client.views import (
    company_overview,
    interview_day,
    pipeline_snapshot,
    relative_time,
    summarize_companies,
    timeline_entries,
    upcoming_interview_entries,
)
from job_tracker.schemas.dashboard import DashboardStats
from job_tracker.schemas.enums import ActivityType, InterviewType

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


def _app(company: str, status: str = "Applied", **overrides) -> dict:
    data = {
        "id": f"{company}-{status}",
        "company_name": company,
        "position_title": "Engineer",
        "status": status,
        "application_date": "2024-03-18",
        "updated_at": "2024-03-18T09:00:00+00:00",
        "location": None,
        "contact_person": None,
        "contact_email": None,
    }
    data.update(overrides)
    return data


class TestPresentation:
    """Every enum member has a display style."""

    def test_activity_styles_total(self):
        """No ActivityType is missing a style."""
        assert set(ACTIVITY_STYLES) == set(ActivityType)

    def test_interview_styles_total(self):
        """No InterviewType is missing a style."""
        assert set(INTERVIEW_TYPE_STYLES) == set(InterviewType)

    def test_lookup_by_value(self):
        """Styles are looked up by the wire value."""
        assert activity_style("status_change").label == "Status changed"
        assert interview_type_style("In-person").icon == "map-pin"

    def test_unknown_value_raises(self):
        """An unknown value fails loudly."""
        with pytest.raises(ValueError):
            activity_style("teleported")


class TestCompanies:
    """Per-company rollup."""

    def test_groups_by_company(self):
        """Applications to the same company merge."""
        companies = summarize_companies(
            [
                _app("Acme", position_title="Backend"),
                _app("Acme", status="Interview", position_title="Platform"),
                _app("Globex"),
            ],
            NOW,
        )
        acme = next(c for c in companies if c.name == "Acme")
        assert acme.roles == {"Backend", "Platform"}
        assert acme.statuses == {"Applied", "Interview"}
        assert len(companies) == 2

    def test_most_recent_first(self):
        """Companies are ordered by latest update, newest first."""
        companies = summarize_companies(
            [
                _app("Old", updated_at="2024-01-01T00:00:00+00:00"),
                _app("New", updated_at="2024-03-19T00:00:00+00:00"),
            ],
            NOW,
        )
        assert [c.name for c in companies] == ["New", "Old"]

    def test_follow_up_due_after_a_week(self):
        """Applied more than 7 days ago needs a follow-up."""
        companies = summarize_companies(
            [
                _app("Stale", application_date="2024-03-01"),
                _app("Fresh", application_date="2024-03-18"),
                _app("Moved", status="Interview", application_date="2024-03-01"),
            ],
            NOW,
        )
        due = {c.name for c in companies if c.follow_up_due}
        assert due == {"Stale"}

    def test_overview_counts(self):
        """Active prospects, warm contacts and the playbook."""
        companies = summarize_companies(
            [
                _app("A", application_date="2024-03-01", contact_email="a@a.io"),
                _app("B", status="Rejected", contact_person="Bo"),
                _app("C", application_date="2024-03-02"),
            ],
            NOW,
        )
        overview = company_overview(companies)
        assert overview.active_prospects == 2
        assert overview.warm_contacts == 2
        assert overview.follow_ups_due == 2
        contacts = {item.company: item.contact for item in overview.playbook}
        assert contacts == {"A": "a@a.io", "C": None}


class TestPipelineSnapshot:
    """Analytics view."""

    def _stats(self) -> DashboardStats:
        return DashboardStats(
            total_applications=10,
            applied=4,
            interviews=3,
            offers=1,
            rejected=2,
            upcoming_interviews=1,
            response_rate=60.0,
        )

    def test_rates(self):
        """Conversion and offer rates are rounded percentages."""
        snapshot = pipeline_snapshot(self._stats(), [], [], [], NOW)
        assert snapshot.interview_conversion == 75
        assert snapshot.offer_rate == 10
        assert [s.value for s in snapshot.funnel] == [4, 3, 1, 0]

    def test_zero_denominators(self):
        """No applications means zero rates."""
        snapshot = pipeline_snapshot(DashboardStats(), [], [], [], NOW)
        assert snapshot.interview_conversion == 0
        assert snapshot.offer_rate == 0
        assert snapshot.insights[2] == (
            "All pending applications have received recent follow-ups."
        )

    def test_pipeline_counts(self):
        """Active, awaiting and stale counts come from the rows."""
        applications = [
            _app("A", application_date="2024-03-01"),
            _app("B"),
            _app("C", status="Offer"),
            _app("D", status="Rejected"),
        ]
        snapshot = pipeline_snapshot(self._stats(), applications, [{}], [], NOW)
        assert snapshot.active_pipeline == 3
        assert snapshot.awaiting_response == 2
        assert snapshot.stale_follow_ups == 1
        assert snapshot.insights[0] == (
            "Response rate is 60% with 3 interviews on the calendar."
        )
        assert snapshot.insights[1].startswith("1 upcoming interview scheduled")

    def test_weekly_recap_window(self):
        """Only the last 7 days of activity count."""
        activities = [
            {"action_type": "application_created", "created_at": "2024-03-19T10:00:00Z"},
            {"action_type": "application_created", "created_at": "2024-03-01T10:00:00Z"},
            {"action_type": "status_change", "created_at": "2024-03-18T10:00:00Z"},
            {"action_type": "interview_scheduled", "created_at": "2024-03-17T10:00:00Z"},
        ]
        snapshot = pipeline_snapshot(self._stats(), [], [], activities, NOW)
        assert snapshot.weekly_recap == [
            "Applications added in the last 7 days: 1.",
            "Interviews scheduled this week: 1.",
            "Status updates logged: 1.",
        ]


class TestTimeline:
    """Activity timeline rows."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(minutes=30), "Just now"),
            (timedelta(hours=3), "3h ago"),
            (timedelta(hours=30), "Yesterday"),
            (timedelta(days=15), "Mar 5"),
        ],
    )
    def test_relative_time(self, delta, expected):
        """Coarse relative timestamps."""
        assert relative_time(NOW - delta, NOW) == expected

    def test_snapshot_used_after_delete(self):
        """A deleted application's entry falls back to its snapshot."""
        entries = timeline_entries(
            [
                {
                    "id": "e1",
                    "action_type": "application_created",
                    "description": "Applied to Dev at Gone Inc",
                    "created_at": "2024-03-20T11:30:00+00:00",
                    "job_application": None,
                    "job_company_snapshot": "Gone Inc",
                    "job_position_snapshot": "Dev",
                }
            ],
            NOW,
        )
        assert entries[0].company == "Gone Inc"
        assert entries[0].position == "Dev"
        assert entries[0].when == "Just now"
        assert entries[0].style.label == "Application added"

    def test_limit(self):
        """At most ``limit`` rows."""
        activity = {
            "id": "x",
            "action_type": "notes_update",
            "description": "d",
            "created_at": "2024-03-20T11:30:00+00:00",
        }
        assert len(timeline_entries([activity] * 15, NOW)) == 10


class TestUpcomingInterviews:
    """Upcoming interview rows."""

    def test_interview_day(self):
        """Today, Tomorrow, otherwise a short date."""
        assert interview_day(NOW + timedelta(hours=2), NOW) == "Today"
        assert interview_day(NOW + timedelta(days=1), NOW) == "Tomorrow"
        assert interview_day(NOW + timedelta(days=5), NOW) == "Mar 25"

    def test_entry(self):
        """Rows carry company, time and the type's style."""
        entries = upcoming_interview_entries(
            [
                {
                    "id": "i1",
                    "interview_type": "Technical",
                    "scheduled_date": "2024-03-21T15:05:00+00:00",
                    "duration_minutes": 45,
                    "job_application": {
                        "id": "a1",
                        "company_name": "Acme",
                        "position_title": "Dev",
                    },
                }
            ],
            NOW,
        )
        entry = entries[0]
        assert entry.company == "Acme"
        assert entry.day == "Tomorrow"
        assert entry.time == "3:05 PM"
        assert entry.duration_minutes == 45
        assert entry.style.label == "Technical"
