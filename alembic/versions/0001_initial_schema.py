"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "files",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("file_type", sa.String(length=120), nullable=False),
        sa.Column("storage_path", sa.String(length=600), nullable=False),
        sa.Column("text_content", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("url", sa.String(length=800), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "versions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("file_id", sa.String(length=36), nullable=True),
        sa.Column("job_id", sa.String(length=36), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("resume_html", sa.Text(), nullable=False),
        sa.Column("resume_html_redacted", sa.Text(), nullable=False),
        sa.Column("cover_html", sa.Text(), nullable=False),
        sa.Column("cover_html_redacted", sa.Text(), nullable=False),
        sa.Column("public_token", sa.String(length=64), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_versions_file_id", "versions", ["file_id"])
    op.create_index("ix_versions_job_id", "versions", ["job_id"])
    op.create_index("ix_versions_public_token", "versions", ["public_token"], unique=True)

    op.create_table(
        "views",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "version_id",
            sa.String(length=36),
            sa.ForeignKey("versions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column("referrer", sa.String(length=500), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_views_version_id", "views", ["version_id"])


def downgrade() -> None:
    op.drop_index("ix_views_version_id", table_name="views")
    op.drop_table("views")
    op.drop_index("ix_versions_public_token", table_name="versions")
    op.drop_index("ix_versions_job_id", table_name="versions")
    op.drop_index("ix_versions_file_id", table_name="versions")
    op.drop_table("versions")
    op.drop_table("jobs")
    op.drop_table("files")
