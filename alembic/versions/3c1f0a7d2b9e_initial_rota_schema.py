"""Initial rota schema: users, employees, teams, shift assignments

Revision ID: 3c1f0a7d2b9e
Revises:
Create Date: 2026-10-19 09:12:44.120331
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f0a7d2b9e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMPLOYMENT_STATUS = ("Active", "Inactive", "Terminated")
WORK_LOCATION = ("Office", "Home", "Field", "Client Site")
WORK_TYPE = ("Regular", "Overtime", "Weekend overtime", "Client side overtime")
ASSIGNMENT_STATUS = ("Scheduled", "Completed", "Missed", "Swapped", "Cancelled")
SWAP_STATUS = ("Pending", "Approved", "Rejected")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        sa.Column("is_manager", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("status", sa.Enum(*EMPLOYMENT_STATUS, name="employment_status"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        sa.Column("deleted", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_employees_user_id", "employees", ["user_id"], unique=True)

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("initials", sa.String(length=5), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "team_members",
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("team_id", "employee_id"),
    )
    op.create_index("ix_team_members_employee_id", "team_members", ["employee_id"])

    op.create_table(
        "shift_assignments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("shift_name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("location", sa.Enum(*WORK_LOCATION, name="work_location"), nullable=False),
        sa.Column("work_type", sa.Enum(*WORK_TYPE, name="work_type"), nullable=False),
        sa.Column("status", sa.Enum(*ASSIGNMENT_STATUS, name="assignment_status"), nullable=False),
        sa.Column("break_duration", sa.Integer(), nullable=False),
        sa.Column("assigned_by", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("swap_requested_by", sa.Integer(), nullable=True),
        sa.Column("swap_requested_with", sa.Integer(), nullable=True),
        sa.Column("swap_status", sa.Enum(*SWAP_STATUS, name="swap_status"), nullable=True),
        sa.Column("swap_reason", sa.Text(), nullable=False),
        sa.Column("swap_requested_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("swap_reviewed_by", sa.Integer(), nullable=True),
        sa.Column("swap_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assigned_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["swap_requested_by"], ["employees.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["swap_requested_with"], ["employees.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["swap_reviewed_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shift_assignments_employee_id", "shift_assignments", ["employee_id"])
    op.create_index("ix_shift_assignments_group_id", "shift_assignments", ["group_id"])
    op.create_index("ix_shift_assignments_assigned_by", "shift_assignments", ["assigned_by"])
    op.create_index("ix_shift_assignments_employee_date", "shift_assignments", ["employee_id", "date"])
    op.create_index("ix_shift_assignments_group_date", "shift_assignments", ["group_id", "date"])
    op.create_index("ix_shift_assignments_status_date", "shift_assignments", ["status", "date"])


def downgrade() -> None:
    op.drop_index("ix_shift_assignments_status_date", table_name="shift_assignments")
    op.drop_index("ix_shift_assignments_group_date", table_name="shift_assignments")
    op.drop_index("ix_shift_assignments_employee_date", table_name="shift_assignments")
    op.drop_index("ix_shift_assignments_assigned_by", table_name="shift_assignments")
    op.drop_index("ix_shift_assignments_group_id", table_name="shift_assignments")
    op.drop_index("ix_shift_assignments_employee_id", table_name="shift_assignments")
    op.drop_table("shift_assignments")

    op.drop_index("ix_team_members_employee_id", table_name="team_members")
    op.drop_table("team_members")
    op.drop_table("teams")

    op.drop_index("ix_employees_user_id", table_name="employees")
    op.drop_table("employees")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("swap_status", "assignment_status", "work_type", "work_location", "employment_status"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
