"""Game, GameSubscription and GameSessionDay ORM models."""
import uuid
from sqlalchemy import (
    Column, String, Text, Boolean, Date, Time, Integer, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tabletop_scheduler.database import Base


class Game(Base):
    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(
            "start_date IS NULL OR end_date IS NULL OR start_date <= end_date",
            name="ck_game_date_order",
        ),
        CheckConstraint("max_players IS NULL OR max_players >= 1", name="ck_game_max_players"),
        # The cap is enforced by the store, not only by the join pre-check
        CheckConstraint(
            "max_players IS NULL OR subscription_count <= max_players",
            name="ck_game_capacity",
        ),
    )

    game_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    dm_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_always_available = Column(Boolean, nullable=False, default=False)
    max_players = Column(Integer, nullable=True)
    subscription_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    dm = relationship("User")
    subscriptions = relationship(
        "GameSubscription",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameSubscription.created_at",
    )
    session_days = relationship(
        "GameSessionDay",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameSessionDay.date",
    )


class GameSubscription(Base):
    __tablename__ = "game_subscriptions"
    __table_args__ = (UniqueConstraint("game_id", "user_id", name="uq_subscription_game_user"),)

    subscription_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    game_id = Column(String(36), ForeignKey("games.game_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    game = relationship("Game", back_populates="subscriptions")
    user = relationship("User")


class GameSessionDay(Base):
    __tablename__ = "game_session_days"

    session_day_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    game_id = Column(String(36), ForeignKey("games.game_id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    notes = Column(Text, nullable=True)
    is_confirmed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    game = relationship("Game", back_populates="session_days")
