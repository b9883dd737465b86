"""Availability and DateRangeSettings ORM models.

A missing Availability row means the user has not decided for that day.
"""
import uuid
from sqlalchemy import (
    Column, String, Boolean, Date, DateTime, ForeignKey, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.sql import func
from tabletop_scheduler.database import Base


class Availability(Base):
    __tablename__ = "availabilities"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_availability_user_date"),)

    availability_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    is_available = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class DateRangeSettings(Base):
    __tablename__ = "date_range_settings"
    __table_args__ = (CheckConstraint("start_date <= end_date", name="ck_date_range_order"),)

    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
