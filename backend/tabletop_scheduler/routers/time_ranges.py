"""Weekly time-range preference routes."""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tabletop_scheduler.auth import get_current_user
from tabletop_scheduler.database import get_db
from tabletop_scheduler.errors import NotFoundOrForbidden
from tabletop_scheduler.models.time_range import TimeRange
from tabletop_scheduler.models.user import User
from tabletop_scheduler.schemas.common import MessageOut
from tabletop_scheduler.schemas.time_range import (
    TimeRangeEnvelope,
    TimeRangeListOut,
    TimeRangeOut,
    TimeRangeUpsert,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=TimeRangeListOut)
def list_time_ranges(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    time_ranges = (
        db.query(TimeRange)
        .filter(TimeRange.user_id == current_user.user_id)
        .order_by(TimeRange.day_of_week)
        .all()
    )
    return TimeRangeListOut(time_ranges=[TimeRangeOut.model_validate(tr) for tr in time_ranges])


@router.post("/", response_model=TimeRangeEnvelope)
def save_time_range(
    payload: TimeRangeUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's time range for one weekday."""
    time_range = (
        db.query(TimeRange)
        .filter(TimeRange.user_id == current_user.user_id, TimeRange.day_of_week == payload.day_of_week)
        .first()
    )
    if time_range:
        time_range.start_time = payload.start_time
        time_range.end_time = payload.end_time
    else:
        time_range = TimeRange(
            user_id=current_user.user_id,
            day_of_week=payload.day_of_week,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
        db.add(time_range)
    db.commit()
    db.refresh(time_range)
    logger.info("Saved time range for user %s on day %d", current_user.user_id, payload.day_of_week)
    return TimeRangeEnvelope(time_range=TimeRangeOut.model_validate(time_range))


@router.delete("/", response_model=MessageOut)
def delete_time_range(
    day_of_week: int = Query(..., ge=0, le=6),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    deleted = (
        db.query(TimeRange)
        .filter(TimeRange.user_id == current_user.user_id, TimeRange.day_of_week == day_of_week)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        raise NotFoundOrForbidden("Time range not found")
    db.commit()
    logger.info("Deleted time range for user %s on day %d", current_user.user_id, day_of_week)
    return MessageOut(message="Time range deleted successfully")
