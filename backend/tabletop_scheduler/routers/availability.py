"""Availability API routes."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tabletop_scheduler.auth import get_current_user
from tabletop_scheduler.database import get_db
from tabletop_scheduler.models.user import User
from tabletop_scheduler.schemas.availability import (
    AvailabilityClearOut,
    AvailabilityRangeOut,
    AvailabilitySave,
    AvailabilitySaveOut,
)
from tabletop_scheduler.services import availability_service
from tabletop_scheduler.services.date_range import generate_date_range, resolve_range, validate_range

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=AvailabilityRangeOut)
def get_availability(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Everyone's availability for a range (defaults: saved range, then this month)."""
    start, end = resolve_range(db, current_user.user_id, start_date, end_date)
    dates = generate_date_range(start, end)
    users = availability_service.get_availability_for_range(db, dates)
    return AvailabilityRangeOut(users=users, dates=dates, start_date=start, end_date=end)


@router.post("/", response_model=AvailabilitySaveOut)
def save_availability(
    payload: AvailabilitySave,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Bulk-set the caller's availability; null clears a day.

    Returns one ledger entry per date in the range. A failing date is
    reported as ``error`` without undoing the others.
    """
    if payload.start_date and payload.end_date:
        validate_range(payload.start_date, payload.end_date)
        availability_service.save_date_range_settings(
            db, current_user.user_id, payload.start_date, payload.end_date
        )

    start, end = resolve_range(db, current_user.user_id, payload.start_date, payload.end_date)
    dates = generate_date_range(start, end)
    results = availability_service.save_availability(db, current_user.user_id, payload.availabilities, dates)
    return AvailabilitySaveOut(results=results)


@router.delete("/", response_model=AvailabilityClearOut)
def clear_availability(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Wipe the caller's availability within a range."""
    start, end = resolve_range(db, current_user.user_id, start_date, end_date)
    dates = generate_date_range(start, end)
    deleted = availability_service.clear_availability(db, current_user.user_id, dates)
    return AvailabilityClearOut(message="All availability data cleared", deleted=deleted)
