"""Stage/exercise catalog and saved lesson plans."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20261019_01_lesson_catalog"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "lesson_stages",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )

    op.create_table(
        "exercises",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("stage_id", sa.String(length=36), sa.ForeignKey("lesson_stages.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_index("ix_exercises_stage_id", "exercises", ["stage_id"])

    op.create_table(
        "lesson_plans",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("total_duration", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_lesson_plans_title", "lesson_plans", ["title"], unique=True)

    op.create_table(
        "lesson_plan_items",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("plan_id", sa.String(length=36), sa.ForeignKey("lesson_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("stage_id", sa.String(length=36), nullable=False),
        sa.Column("stage_name", sa.String(length=200), nullable=False),
        sa.Column("exercise_id", sa.String(length=36), nullable=False),
        sa.Column("exercise_name", sa.String(length=200), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_lesson_plan_items_plan_order", "lesson_plan_items", ["plan_id", "order"])


def downgrade() -> None:
    op.drop_index("ix_lesson_plan_items_plan_order", table_name="lesson_plan_items")
    op.drop_table("lesson_plan_items")
    op.drop_index("ix_lesson_plans_title", table_name="lesson_plans")
    op.drop_table("lesson_plans")
    op.drop_index("ix_exercises_stage_id", table_name="exercises")
    op.drop_table("exercises")
    op.drop_table("lesson_stages")
