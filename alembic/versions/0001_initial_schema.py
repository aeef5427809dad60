"""Initial schema: postings and applications

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-09-28

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "postings",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("summary", sa.Text(), nullable=False, server_default=""),
        sa.Column("team", sa.String(255), nullable=False, server_default=""),
        sa.Column("company", sa.String(255), nullable=False, server_default=""),
        sa.Column("location", sa.String(255), nullable=False, server_default=""),
        sa.Column("deadline", sa.String(64), nullable=False, server_default=""),
        sa.Column("checklist_json", sa.JSON(), nullable=False),
        sa.Column("creator_id", sa.String(128), nullable=False),
        sa.Column("creator_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("created_at", sa.String(64), nullable=False, server_default=""),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_postings_creator_id", "postings", ["creator_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("seeker_id", sa.String(128), nullable=False),
        sa.Column("seeker_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("seeker_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("job_id", sa.String(64), nullable=False),
        sa.Column("job_title", sa.Text(), nullable=False, server_default=""),
        sa.Column("job_creator_id", sa.String(128), nullable=False, server_default=""),
        sa.Column("team_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("status", sa.String(64), nullable=False, server_default=""),
        sa.Column("checklist_details_json", sa.JSON(), nullable=True),
        sa.Column("checked_items_json", sa.JSON(), nullable=True),
        sa.Column("comments_json", sa.JSON(), nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("applied_at", sa.String(64), nullable=False, server_default=""),
        sa.Column("applied_date", sa.String(64), nullable=False, server_default=""),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_applications_seeker_id", "applications", ["seeker_id"])
    op.create_index("ix_applications_job_id", "applications", ["job_id"])
    op.create_index("ix_applications_job_creator_id", "applications", ["job_creator_id"])


def downgrade() -> None:
    op.drop_index("ix_applications_job_creator_id", table_name="applications")
    op.drop_index("ix_applications_job_id", table_name="applications")
    op.drop_index("ix_applications_seeker_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_postings_creator_id", table_name="postings")
    op.drop_table("postings")
