"""Create job_applications, interviews and activity_log.

Revision ID: 001_job_tracker_tables
Revises: 000_enable_extensions
Create Date: 2026-10-18

Every table carries user_id; all reads are owner-scoped in the
application layer. Enum columns are VARCHAR with CHECK constraints.

FK behaviour:
- interviews.job_application_id: CASCADE (interviews die with the application)
- activity_log.job_application_id: SET NULL (history outlives the application;
  job_company_snapshot / job_position_snapshot keep it readable)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_job_tracker_tables"
down_revision: str | None = "000_enable_extensions"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # =========================================================================
    # JOB APPLICATIONS
    # =========================================================================

    op.create_table(
        "job_applications",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("position_title", sa.String(255), nullable=False),
        sa.Column("job_url", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("salary_range", sa.String(100), nullable=True),
        sa.Column("employment_type", sa.String(20), nullable=False, server_default=sa.text("'Full-time'")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'Applied'")),
        sa.Column("priority", sa.String(10), nullable=False, server_default=sa.text("'Medium'")),
        sa.Column("application_date", sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # Check constraints
        sa.CheckConstraint(
            "status IN ('Applied', 'Interview', 'Offer', 'Rejected', 'Withdrawn', 'Accepted')",
            name="ck_jobapplication_status",
        ),
        sa.CheckConstraint(
            "priority IN ('Low', 'Medium', 'High')",
            name="ck_jobapplication_priority",
        ),
        sa.CheckConstraint(
            "employment_type IN ('Full-time', 'Part-time', 'Contract', 'Internship')",
            name="ck_jobapplication_employment_type",
        ),
        sa.CheckConstraint(
            "length(company_name) > 0 AND length(position_title) > 0",
            name="ck_jobapplication_required_text",
        ),
    )
    op.create_index("idx_jobapplication_user_created", "job_applications", ["user_id", "created_at"])
    op.create_index("idx_jobapplication_user_status", "job_applications", ["user_id", "status"])

    # =========================================================================
    # INTERVIEWS
    # =========================================================================

    op.create_table(
        "interviews",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("job_application_id", sa.UUID(), nullable=False),
        sa.Column("interview_type", sa.String(20), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default=sa.text("60")),
        sa.Column("interviewer_name", sa.String(255), nullable=True),
        sa.Column("interviewer_email", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'Scheduled'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["job_application_id"], ["job_applications.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "interview_type IN ('Phone', 'Video', 'In-person', 'Technical', 'Final')",
            name="ck_interview_type",
        ),
        sa.CheckConstraint(
            "status IN ('Scheduled', 'Completed', 'Cancelled', 'Rescheduled')",
            name="ck_interview_status",
        ),
        sa.CheckConstraint("duration_minutes > 0", name="ck_interview_duration"),
    )
    op.create_index("idx_interview_user_scheduled", "interviews", ["user_id", "scheduled_date"])
    op.create_index("idx_interview_application", "interviews", ["job_application_id"])

    # =========================================================================
    # ACTIVITY LOG (append-only)
    # =========================================================================

    op.create_table(
        "activity_log",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("job_application_id", sa.UUID(), nullable=True),
        sa.Column("job_company_snapshot", sa.String(255), nullable=True),
        sa.Column("job_position_snapshot", sa.String(255), nullable=True),
        sa.Column("action_type", sa.String(30), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["job_application_id"], ["job_applications.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "action_type IN ('application_created', 'status_change', 'notes_update', "
            "'interview_scheduled', 'interview_completed')",
            name="ck_activitylog_action_type",
        ),
    )
    op.create_index("idx_activitylog_user_created", "activity_log", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_activitylog_user_created", table_name="activity_log")
    op.drop_table("activity_log")

    op.drop_index("idx_interview_application", table_name="interviews")
    op.drop_index("idx_interview_user_scheduled", table_name="interviews")
    op.drop_table("interviews")

    op.drop_index("idx_jobapplication_user_status", table_name="job_applications")
    op.drop_index("idx_jobapplication_user_created", table_name="job_applications")
    op.drop_table("job_applications")
