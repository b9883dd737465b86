"""Pydantic schemas for Games, subscriptions and per-date game statistics."""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, field_validator, model_validator

from tabletop_scheduler.schemas.session_day import SessionDayOut
from tabletop_scheduler.schemas.user import UserSummary


class GameCreate(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    is_always_available: bool = False
    max_players: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Game name is required")
        return value

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("max_players")
    @classmethod
    def _positive_cap(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("max_players must be at least 1")
        return value

    @model_validator(mode="after")
    def _check_date_range(self) -> "GameCreate":
        if self.is_always_available:
            # Always-available games carry no bounds
            self.start_date = None
            self.end_date = None
            return self
        if self.start_date is None or self.end_date is None:
            raise ValueError("Start and end dates are required unless the game is always available")
        if self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        return self


class GameOut(BaseModel):
    game_id: str
    name: str
    description: Optional[str] = None
    dm: UserSummary
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    is_always_available: bool
    max_players: Optional[int] = None
    subscription_count: int
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class DateStats(BaseModel):
    date: dt.date
    total_available: int
    available_players: list[UserSummary]
    subscribed_players: list[UserSummary]
    session_day: Optional[SessionDayOut] = None


class GameStatsOut(BaseModel):
    game_id: str
    name: str
    description: Optional[str] = None
    dm: UserSummary
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    is_always_available: bool
    max_players: Optional[int] = None
    total_subscriptions: int
    subscriber_ids: list[str]
    availability_by_date: list[DateStats]


class GameListOut(BaseModel):
    success: bool = True
    games: list[GameStatsOut]
    dates: list[dt.date]
    start_date: dt.date
    end_date: dt.date


class GameEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    game: GameOut


class SubscriptionOut(BaseModel):
    subscription_id: str
    game_id: str
    user_id: str
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class SubscriptionEnvelope(BaseModel):
    success: bool = True
    message: str
    created: bool
    subscription: SubscriptionOut
