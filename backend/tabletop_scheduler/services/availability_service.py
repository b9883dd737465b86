"""Availability service — tri-state per-day availability store.

A day is True (available), False (unavailable) or absent (undecided).
Setting a day to None removes its row.
"""
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tabletop_scheduler.models.availability import Availability, DateRangeSettings
from tabletop_scheduler.models.user import User

logger = logging.getLogger(__name__)


def get_availability_for_range(db: Session, dates: list[date]) -> list[dict[str, Any]]:
    """Return every user with their date → bool mapping restricted to ``dates``."""
    users = db.query(User).order_by(User.display_name).all()
    rows = db.query(Availability).filter(Availability.date.in_(dates)).all() if dates else []

    by_user: dict[str, dict[date, bool]] = {}
    for row in rows:
        by_user.setdefault(row.user_id, {})[row.date] = row.is_available

    return [
        {
            "user_id": user.user_id,
            "email": user.email,
            "display_name": user.display_name,
            "availabilities": by_user.get(user.user_id, {}),
        }
        for user in users
    ]


def set_availability(db: Session, user_id: str, day: date, value: Optional[bool]) -> str:
    """Apply one day's value and report what happened.

    Returns one of ``created``, ``updated``, ``deleted`` or ``no-op``.
    Does not commit.
    """
    existing = (
        db.query(Availability)
        .filter(Availability.user_id == user_id, Availability.date == day)
        .first()
    )

    if value is None:
        if existing is None:
            return "no-op"
        db.delete(existing)
        db.flush()
        return "deleted"

    if existing is not None:
        existing.is_available = bool(value)
        db.flush()
        return "updated"

    db.add(Availability(user_id=user_id, date=day, is_available=bool(value)))
    db.flush()
    return "created"


def save_availability(
    db: Session,
    user_id: str,
    values: dict[date, Optional[bool]],
    dates: list[date],
) -> list[dict[str, Any]]:
    """Best-effort bulk save.

    Each day runs in its own SAVEPOINT, so a failing day is rolled back
    alone and reported as ``error`` while the other days still apply.
    Days outside ``dates`` are ignored. One ledger entry per applied day.
    """
    allowed = set(dates)
    results: list[dict[str, Any]] = []

    for day, value in values.items():
        if day not in allowed:
            continue
        try:
            with db.begin_nested():
                action = set_availability(db, user_id, day, value)
            results.append({"date": day, "action": action})
        except SQLAlchemyError as exc:
            logger.warning("Availability update failed for user %s on %s: %s", user_id, day, exc)
            results.append({"date": day, "action": "error", "error": str(exc.__cause__ or exc)})

    db.commit()
    logger.info(
        "Saved availability for user %s: %d days (%d errors)",
        user_id, len(results), sum(1 for r in results if r["action"] == "error"),
    )
    return results


def clear_availability(db: Session, user_id: str, dates: list[date]) -> int:
    """Delete every availability row the user has within ``dates``."""
    if not dates:
        return 0
    deleted = (
        db.query(Availability)
        .filter(Availability.user_id == user_id, Availability.date.in_(dates))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Cleared %d availability rows for user %s (%s..%s)", deleted, user_id, dates[0], dates[-1])
    return deleted


def save_date_range_settings(db: Session, user_id: str, start: date, end: date) -> DateRangeSettings:
    """Upsert the user's default date range. Does not commit."""
    saved = db.query(DateRangeSettings).filter(DateRangeSettings.user_id == user_id).first()
    if saved:
        saved.start_date = start
        saved.end_date = end
    else:
        saved = DateRangeSettings(user_id=user_id, start_date=start, end_date=end)
        db.add(saved)
    db.flush()
    return saved
