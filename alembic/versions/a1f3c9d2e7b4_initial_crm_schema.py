"""initial crm schema

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-18 10:12:41.318207

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9d2e7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _created_at():
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=True),
        _created_at(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "auth_sessions",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("token", name="uq_auth_sessions_token"),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    op.create_table(
        "clients",
        sa.Column("id", _uuid(), primary_key=True),

        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("company_name", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("group_name", sa.Text(), nullable=True),
        sa.Column("services", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("payment_amount", sa.Numeric(12, 2), nullable=True),

        sa.Column("status", sa.String(length=16), nullable=False, server_default="NEW"),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("created_by_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("sold_by_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),

        sa.Column("assigned_to_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assignment_seen", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("designer_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("designer_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("designer_assignment_seen", sa.Boolean(), nullable=False, server_default=sa.false()),

        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("row_version", sa.Integer(), nullable=False, server_default="1"),

        sa.CheckConstraint(
            "full_name IS NOT NULL OR company_name IS NOT NULL",
            name="ck_clients_has_name",
        ),
        sa.CheckConstraint(
            "status IN ('NEW','ASSIGNED','IN_WORK','DONE','REJECTED')",
            name="ck_clients_status_domain",
        ),
    )
    op.create_index("ix_clients_status", "clients", ["status"])
    op.create_index("ix_clients_assigned_to_id", "clients", ["assigned_to_id"])
    op.create_index("ix_clients_designer_id", "clients", ["designer_id"])

    op.create_table(
        "assignment_history",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("specialist_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("designer_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("assigned_by_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "(type = 'SPECIALIST' AND specialist_id IS NOT NULL) "
            "OR (type = 'DESIGNER' AND designer_id IS NOT NULL)",
            name="ck_assignment_history_slot",
        ),
    )
    op.create_index("ix_assignment_history_client_id", "assignment_history", ["client_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_audit_logs_client_id", "audit_logs", ["client_id"])

    op.create_table(
        "tasks",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="NEW"),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("creator_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("assignee_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("priority BETWEEN 0 AND 100", name="ck_tasks_priority_range"),
        sa.CheckConstraint(
            "status IN ('NEW','IN_PROGRESS','DONE')",
            name="ck_tasks_status_domain",
        ),
    )
    op.create_index("ix_tasks_client_id", "tasks", ["client_id"])
    op.create_index("ix_tasks_assignee_id", "tasks", ["assignee_id"])

    op.create_table(
        "comments",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_client_id", "comments", ["client_id"])

    op.create_table(
        "payments",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("manager_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("is_renewal", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_client_id", "payments", ["client_id"])
    op.create_index("ix_payments_month", "payments", ["month"])

    op.create_table(
        "creatives",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("client_id", _uuid(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("designer_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        _created_at(),
        sa.CheckConstraint("count > 0", name="ck_creatives_count_positive"),
    )
    op.create_index("ix_creatives_client_id", "creatives", ["client_id"])
    op.create_index("ix_creatives_month", "creatives", ["month"])

    op.create_table(
        "notifications",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "publications",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("author_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )


def downgrade():
    op.drop_table("publications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_creatives_month", table_name="creatives")
    op.drop_index("ix_creatives_client_id", table_name="creatives")
    op.drop_table("creatives")
    op.drop_index("ix_payments_month", table_name="payments")
    op.drop_index("ix_payments_client_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_comments_client_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_tasks_assignee_id", table_name="tasks")
    op.drop_index("ix_tasks_client_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_audit_logs_client_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_assignment_history_client_id", table_name="assignment_history")
    op.drop_table("assignment_history")
    op.drop_index("ix_clients_designer_id", table_name="clients")
    op.drop_index("ix_clients_assigned_to_id", table_name="clients")
    op.drop_index("ix_clients_status", table_name="clients")
    op.drop_table("clients")
    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_table("users")
