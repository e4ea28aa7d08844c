"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

TABLES = ("job_applications", "contacts", "interview_stages", "job_boards")


def _has_table(insp: sa.Inspector, table: str) -> bool:
    return table in insp.get_table_names()


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.String(32), nullable=False, index=True),
        sa.Column("updated_at", sa.String(32), nullable=False),
    ]


def upgrade() -> None:
    insp = sa.inspect(op.get_bind())

    if not _has_table(insp, "job_applications"):
        op.create_table(
            "job_applications",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("company", sa.String(255), nullable=False),
            sa.Column("position_title", sa.String(255), nullable=False),
            sa.Column("application_date", sa.String(32), nullable=False, index=True),
            sa.Column("interest_rating", sa.Integer(), nullable=True),
            sa.Column("next_event_date", sa.String(32), nullable=True),
            sa.Column("job_posting_url", sa.Text(), nullable=True),
            sa.Column("job_description", sa.Text(), nullable=True),
            sa.Column("source_type", sa.String(40), nullable=False, server_default="other"),
            sa.Column("job_board_id", sa.String(36), nullable=True),
            sa.Column("source_notes", sa.Text(), nullable=True),
            sa.Column("is_remote", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("status_log", sa.JSON(), nullable=False),
            sa.Column("notes", sa.JSON(), nullable=False),
            *_timestamps(),
        )

    if not _has_table(insp, "contacts"):
        op.create_table(
            "contacts",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("job_application_id", sa.String(36), nullable=False, index=True),
            sa.Column("contact_name", sa.String(255), nullable=False),
            sa.Column("contact_email", sa.String(255), nullable=True),
            sa.Column("linkedin_url", sa.String(500), nullable=True),
            sa.Column("role", sa.String(40), nullable=True),
            sa.Column("channel", sa.String(40), nullable=False, server_default="other"),
            sa.Column("outreach_date", sa.String(32), nullable=False),
            sa.Column("response_received", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(),
        )

    if not _has_table(insp, "interview_stages"):
        op.create_table(
            "interview_stages",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("job_application_id", sa.String(36), nullable=False, index=True),
            sa.Column("round", sa.Integer(), nullable=False),
            sa.Column("interview_type", sa.String(40), nullable=False),
            sa.Column("is_final_round", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("scheduled_date", sa.String(32), nullable=True),
            sa.Column("completed_date", sa.String(32), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("questions", sa.JSON(), nullable=False),
            *_timestamps(),
        )

    if not _has_table(insp, "job_boards"):
        op.create_table(
            "job_boards",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("root_domain", sa.String(255), nullable=False, unique=True),
            sa.Column("domains", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.String(32), nullable=False, index=True),
        )


def downgrade() -> None:
    insp = sa.inspect(op.get_bind())
    for table in reversed(TABLES):
        if _has_table(insp, table):
            op.drop_table(table)
