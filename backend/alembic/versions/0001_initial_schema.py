"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Tabletop Scheduler:
users, availabilities, date_range_settings, games, game_subscriptions,
game_session_days, time_ranges.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("onboarding_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("dismissed_hints", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- availabilities ---
    op.create_table(
        "availabilities",
        sa.Column("availability_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("is_available", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "date", name="uq_availability_user_date"),
    )
    op.create_index("ix_availabilities_user_id", "availabilities", ["user_id"])
    op.create_index("ix_availabilities_date", "availabilities", ["date"])

    # --- date_range_settings ---
    op.create_table(
        "date_range_settings",
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("start_date <= end_date", name="ck_date_range_order"),
    )

    # --- games ---
    op.create_table(
        "games",
        sa.Column("game_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("dm_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_always_available", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("max_players", sa.Integer, nullable=True),
        sa.Column("subscription_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "start_date IS NULL OR end_date IS NULL OR start_date <= end_date",
            name="ck_game_date_order",
        ),
        sa.CheckConstraint("max_players IS NULL OR max_players >= 1", name="ck_game_max_players"),
        sa.CheckConstraint(
            "max_players IS NULL OR subscription_count <= max_players",
            name="ck_game_capacity",
        ),
    )
    op.create_index("ix_games_dm_id", "games", ["dm_id"])

    # --- game_subscriptions ---
    op.create_table(
        "game_subscriptions",
        sa.Column("subscription_id", sa.String(36), primary_key=True),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.game_id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("game_id", "user_id", name="uq_subscription_game_user"),
    )
    op.create_index("ix_game_subscriptions_game_id", "game_subscriptions", ["game_id"])
    op.create_index("ix_game_subscriptions_user_id", "game_subscriptions", ["user_id"])

    # --- game_session_days ---
    op.create_table(
        "game_session_days",
        sa.Column("session_day_id", sa.String(36), primary_key=True),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.game_id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("start_time", sa.Time, nullable=True),
        sa.Column("end_time", sa.Time, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("is_confirmed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_game_session_days_game_id", "game_session_days", ["game_id"])

    # --- time_ranges ---
    op.create_table(
        "time_ranges",
        sa.Column("time_range_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer, nullable=False),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.UniqueConstraint("user_id", "day_of_week", name="uq_time_range_user_day"),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_time_range_day_of_week"),
    )
    op.create_index("ix_time_ranges_user_id", "time_ranges", ["user_id"])


def downgrade() -> None:
    op.drop_table("time_ranges")
    op.drop_table("game_session_days")
    op.drop_table("game_subscriptions")
    op.drop_table("games")
    op.drop_table("date_range_settings")
    op.drop_table("availabilities")
    op.drop_table("users")
