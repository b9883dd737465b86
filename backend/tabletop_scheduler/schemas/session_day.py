"""Pydantic schemas for GameSessionDays."""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, field_validator


class SessionDayItem(BaseModel):
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    notes: Optional[str] = None


class SessionDayBatchCreate(BaseModel):
    game_id: str
    session_days: list[SessionDayItem]

    @field_validator("session_days")
    @classmethod
    def _not_empty(cls, value: list[SessionDayItem]) -> list[SessionDayItem]:
        if not value:
            raise ValueError("at least one session day is required")
        return value


class SessionDayUpdate(BaseModel):
    # Confirmation has its own endpoint and cannot be undone here
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    notes: Optional[str] = None


class SessionDayOut(BaseModel):
    session_day_id: str
    game_id: str
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    notes: Optional[str] = None
    is_confirmed: bool
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class SessionDayEnvelope(BaseModel):
    success: bool = True
    session_day: SessionDayOut


class SessionDayListOut(BaseModel):
    success: bool = True
    message: Optional[str] = None
    session_days: list[SessionDayOut]
