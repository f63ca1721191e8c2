"""create workers, assignments, assignment_queue and action_log tables

Revision ID: 0001_create_dishduty_tables
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


revision = "0001_create_dishduty_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "workers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("last_assigned_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_workers_id", "workers", ["id"])
    # Names are unique case-insensitively
    op.create_index("ix_workers_name_lower", "workers", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("worker_id", sa.Integer(), sa.ForeignKey("workers.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="assigned"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_assignments_id", "assignments", ["id"])
    op.create_index("ix_assignments_worker_id", "assignments", ["worker_id"])

    op.create_table(
        "assignment_queue",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("worker_id", sa.Integer(), sa.ForeignKey("workers.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "duration_days BETWEEN 1 AND 7",
            name="ck_assignment_queue_duration_days",
        ),
    )
    op.create_index("ix_assignment_queue_id", "assignment_queue", ["id"])
    op.create_index("ix_assignment_queue_worker_id", "assignment_queue", ["worker_id"])

    op.create_table(
        "action_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
    )
    op.create_index("ix_action_log_id", "action_log", ["id"])
    op.create_index("ix_action_log_timestamp", "action_log", ["timestamp"])


def downgrade():
    op.drop_index("ix_action_log_timestamp", table_name="action_log")
    op.drop_index("ix_action_log_id", table_name="action_log")
    op.drop_table("action_log")
    op.drop_index("ix_assignment_queue_worker_id", table_name="assignment_queue")
    op.drop_index("ix_assignment_queue_id", table_name="assignment_queue")
    op.drop_table("assignment_queue")
    op.drop_index("ix_assignments_worker_id", table_name="assignments")
    op.drop_index("ix_assignments_id", table_name="assignments")
    op.drop_table("assignments")
    op.drop_index("ix_workers_name_lower", table_name="workers")
    op.drop_index("ix_workers_id", table_name="workers")
    op.drop_table("workers")
