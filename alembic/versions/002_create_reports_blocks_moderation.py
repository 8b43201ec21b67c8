"""Create reports, blocked_users and moderation record tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reporter_id", sa.Integer(), nullable=False),
        sa.Column("reported_content_id", sa.Integer(), nullable=False),
        sa.Column("reported_user_id", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("moderator_id", sa.Integer(), nullable=True),
        sa.Column("moderator_notes", sa.Text(), nullable=True),
        sa.Column("action_taken", sa.String(30), nullable=True),
        sa.Column("resolved_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["reporter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reported_content_id"], ["sifs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reported_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["moderator_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reports_reported_content_id"), "reports", ["reported_content_id"], unique=False)
    op.create_index("ix_reports_reporter_content", "reports", ["reporter_id", "reported_content_id"], unique=False)
    op.create_index("ix_reports_status_created", "reports", ["status", "created_at"], unique=False)

    op.create_table(
        "blocked_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("blocker_id", sa.Integer(), nullable=False),
        sa.Column("blocked_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(30), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["blocker_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["blocked_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_blocked_users_blocker_blocked"),
    )
    op.create_index(op.f("ix_blocked_users_blocker_id"), "blocked_users", ["blocker_id"], unique=False)
    op.create_index(op.f("ix_blocked_users_blocked_id"), "blocked_users", ["blocked_id"], unique=False)

    op.create_table(
        "moderator_actions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("moderator_id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["moderator_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_moderator_actions_report_id"), "moderator_actions", ["report_id"], unique=False)

    op.create_table(
        "user_warnings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(30), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=True),
        sa.Column("issued_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["issued_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_warnings_user_id"), "user_warnings", ["user_id"], unique=False)

    op.create_table(
        "user_suspensions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=True),
        sa.Column("issued_by", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["issued_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_suspensions_user_id"), "user_suspensions", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_suspensions_user_id"), table_name="user_suspensions")
    op.drop_table("user_suspensions")
    op.drop_index(op.f("ix_user_warnings_user_id"), table_name="user_warnings")
    op.drop_table("user_warnings")
    op.drop_index(op.f("ix_moderator_actions_report_id"), table_name="moderator_actions")
    op.drop_table("moderator_actions")
    op.drop_index(op.f("ix_blocked_users_blocked_id"), table_name="blocked_users")
    op.drop_index(op.f("ix_blocked_users_blocker_id"), table_name="blocked_users")
    op.drop_table("blocked_users")
    op.drop_index("ix_reports_status_created", table_name="reports")
    op.drop_index("ix_reports_reporter_content", table_name="reports")
    op.drop_index(op.f("ix_reports_reported_content_id"), table_name="reports")
    op.drop_table("reports")
