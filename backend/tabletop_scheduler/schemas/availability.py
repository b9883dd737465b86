"""Pydantic schemas for Availability."""
import datetime as dt
from typing import Literal, Optional
from pydantic import BaseModel


class AvailabilitySave(BaseModel):
    # A null value clears the day back to "undecided"
    availabilities: dict[dt.date, Optional[bool]]
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class UserAvailabilityOut(BaseModel):
    user_id: str
    email: str
    display_name: str
    availabilities: dict[dt.date, bool] = {}


class AvailabilityRangeOut(BaseModel):
    success: bool = True
    users: list[UserAvailabilityOut]
    dates: list[dt.date]
    start_date: dt.date
    end_date: dt.date


class AvailabilityResult(BaseModel):
    date: dt.date
    action: Literal["created", "updated", "deleted", "no-op", "error"]
    error: Optional[str] = None


class AvailabilitySaveOut(BaseModel):
    success: bool = True
    results: list[AvailabilityResult]


class AvailabilityClearOut(BaseModel):
    success: bool = True
    message: str
    deleted: int
