"""Calendar date ranges.

Ranges are built from plain ``datetime.date`` values, so a day is a calendar
day and never shifts with a timezone or a DST transition. The only place a
timezone matters is deciding what "today" is, which uses the configured
calendar timezone.
"""
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from tabletop_scheduler.config import settings
from tabletop_scheduler.errors import InvalidInput
from tabletop_scheduler.models.availability import DateRangeSettings

logger = logging.getLogger(__name__)


def generate_date_range(start: date, end: date) -> list[date]:
    """Return every calendar day from start to end, inclusive.

    An inverted range (end before start) yields an empty list.
    """
    days = (end - start).days
    return [start + timedelta(days=offset) for offset in range(days + 1)]


def to_iso_dates(dates: list[date]) -> list[str]:
    return [d.isoformat() for d in dates]


def current_month_range(tz_name: Optional[str] = None) -> tuple[date, date]:
    """First and last day of the current month in the calendar timezone."""
    tz = pytz.timezone(tz_name or settings.CALENDAR_TIMEZONE)
    today = datetime.now(pytz.utc).astimezone(tz).date()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def validate_range(start: date, end: date) -> None:
    """Reject inverted or oversized ranges before any dates are generated."""
    if start > end:
        raise InvalidInput("End date must be on or after start date")
    span = (end - start).days + 1
    if span > settings.MAX_RANGE_DAYS:
        raise InvalidInput(f"Date range may span at most {settings.MAX_RANGE_DAYS} days (got {span})")


def resolve_range(
    db: Session,
    user_id: str,
    start: Optional[date],
    end: Optional[date],
) -> tuple[date, date]:
    """Pick the range for a request.

    An explicit (start, end) wins; otherwise the user's saved range;
    otherwise the current month.
    """
    if start is None or end is None:
        saved = db.query(DateRangeSettings).filter(DateRangeSettings.user_id == user_id).first()
        if saved:
            start, end = saved.start_date, saved.end_date
        else:
            start, end = current_month_range()
        logger.debug("Resolved default range %s..%s for user %s", start, end, user_id)

    validate_range(start, end)
    return start, end
