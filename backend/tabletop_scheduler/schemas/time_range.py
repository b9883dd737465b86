"""Pydantic schemas for weekly TimeRanges."""
from datetime import time
from pydantic import BaseModel, Field


class TimeRangeUpsert(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday … 6 = Saturday")
    start_time: time
    end_time: time


class TimeRangeOut(BaseModel):
    time_range_id: str
    day_of_week: int
    start_time: time
    end_time: time

    model_config = {"from_attributes": True}


class TimeRangeEnvelope(BaseModel):
    success: bool = True
    time_range: TimeRangeOut


class TimeRangeListOut(BaseModel):
    success: bool = True
    time_ranges: list[TimeRangeOut]
