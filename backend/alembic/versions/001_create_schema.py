"""Create CampusCare schema

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates every table (users, roles, user_roles, facilities,
       sla_policies, reports, wellness_records, menus, menu_ratings,
       notifications) and inserts the fixed roles and SLA policies.
How:   Generic SQLAlchemy types (Uuid, DateTime(timezone=True)) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("student", "teacher", "maintenance", "wellness", "cafeteria", "admin")

SLA_POLICIES = (
    ("low", 168),
    ("medium", 72),
    ("high", 24),
    ("critical", 4),
)


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=nullable,
        server_default=None if nullable else sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    # ── Accounts ──────────────────────────────────────────────────────────
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("deleted_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "role_id"),
    )

    # ── Facilities & damage reports ───────────────────────────────────────
    op.create_table(
        "facilities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_facilities_name"),
    )

    sla_policies = op.create_table(
        "sla_policies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("priority", sa.String(32), nullable=False),
        sa.Column("response_hours", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("priority", name="uq_sla_policies_priority"),
        sa.CheckConstraint("response_hours > 0", name="ck_sla_policies_response_hours"),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("facility_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("priority_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("due_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["facility_id"], ["facilities.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["priority_id"], ["sla_policies.id"], ondelete="RESTRICT"),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'resolved', 'verified', 'escalated')",
            name="ck_reports_status",
        ),
    )
    op.create_index("idx_reports_user_created", "reports", ["user_id", "created_at"])
    op.create_index("idx_reports_status_created", "reports", ["status", "created_at"])

    # ── Wellness ──────────────────────────────────────────────────────────
    op.create_table(
        "wellness_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("stress_level", sa.Integer(), nullable=False),
        sa.Column("sleep_hours", sa.Float(), nullable=False),
        sa.Column("diet_quality", sa.String(50), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("stress_level BETWEEN 0 AND 5", name="ck_wellness_stress_level"),
        sa.CheckConstraint("sleep_hours BETWEEN 0 AND 24", name="ck_wellness_sleep_hours"),
    )
    op.create_index("idx_wellness_user_created", "wellness_records", ["user_id", "created_at"])

    # ── Menus ─────────────────────────────────────────────────────────────
    op.create_table(
        "menus",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("menu_date", sa.Date(), nullable=False),
        sa.Column("breakfast", sa.Text(), nullable=True),
        sa.Column("lunch", sa.Text(), nullable=True),
        sa.Column("dinner", sa.Text(), nullable=True),
        sa.Column("snack", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("menu_date", name="uq_menus_menu_date"),
    )

    op.create_table(
        "menu_ratings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("menu_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["menu_id"], ["menus.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_menu_ratings_rating"),
        sa.UniqueConstraint("menu_id", "user_id", name="uq_menu_ratings_menu_user"),
    )
    op.create_index("ix_menu_ratings_menu_id", "menu_ratings", ["menu_id"])

    # ── Notifications ─────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_notifications_user_created", "notifications", ["user_id", "created_at"])

    # ── Reference data ────────────────────────────────────────────────────
    op.bulk_insert(roles, [{"name": name} for name in ROLES])
    op.bulk_insert(
        sla_policies,
        [{"priority": p, "response_hours": h} for p, h in SLA_POLICIES],
    )


def downgrade() -> None:
    op.drop_index("idx_notifications_user_created", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_menu_ratings_menu_id", table_name="menu_ratings")
    op.drop_table("menu_ratings")
    op.drop_table("menus")
    op.drop_index("idx_wellness_user_created", table_name="wellness_records")
    op.drop_table("wellness_records")
    op.drop_index("idx_reports_status_created", table_name="reports")
    op.drop_index("idx_reports_user_created", table_name="reports")
    op.drop_table("reports")
    op.drop_table("sla_policies")
    op.drop_table("facilities")
    op.drop_table("user_roles")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
    op.drop_table("roles")
