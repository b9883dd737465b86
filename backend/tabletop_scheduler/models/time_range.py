"""TimeRange ORM model — weekly preferred play window per weekday."""
import uuid
from sqlalchemy import Column, String, Integer, Time, ForeignKey, UniqueConstraint, CheckConstraint
from tabletop_scheduler.database import Base


class TimeRange(Base):
    __tablename__ = "time_ranges"
    __table_args__ = (
        UniqueConstraint("user_id", "day_of_week", name="uq_time_range_user_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_time_range_day_of_week"),
    )

    time_range_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
