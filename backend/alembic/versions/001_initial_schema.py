"""Initial grammar drills schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Creates the following tables:
- topics: Grammar topics and their generation prompts
- prompt_versions: Retained prompt history per topic
- exercises: Cached generated exercises keyed by topic and prompt hash
- user_exercise_views: Per-user serving history for review scheduling
- user_stats: Per-user practice totals and preferences
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "topics",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "prompt_versions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("topic_id", sa.String(36), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("topic_id", "version", name="uq_prompt_versions_topic_version"),
    )
    op.create_index("ix_prompt_versions_topic_id", "prompt_versions", ["topic_id"])

    op.create_table(
        "exercises",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("topic_id", sa.String(36), nullable=False),
        sa.Column("prompt_hash", sa.String(64), nullable=False),
        sa.Column("exercise_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_exercises_topic_prompt_hash", "exercises", ["topic_id", "prompt_hash"]
    )

    op.create_table(
        "user_exercise_views",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("exercise_id", sa.String(36), nullable=False),
        sa.Column("last_viewed", sa.DateTime(timezone=True), nullable=False),
        sa.Column("repetition_counter", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "exercise_id", name="uq_user_exercise_views_user_exercise"
        ),
    )
    op.create_index("ix_user_exercise_views_user_id", "user_exercise_views", ["user_id"])

    op.create_table(
        "user_stats",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("total_exercises", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_mistakes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_hints", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_topic_id", sa.String(36), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("user_stats")
    op.drop_index("ix_user_exercise_views_user_id", table_name="user_exercise_views")
    op.drop_table("user_exercise_views")
    op.drop_index("ix_exercises_topic_prompt_hash", table_name="exercises")
    op.drop_table("exercises")
    op.drop_index("ix_prompt_versions_topic_id", table_name="prompt_versions")
    op.drop_table("prompt_versions")
    op.drop_table("topics")
