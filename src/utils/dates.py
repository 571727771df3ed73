"""Calendar helpers shared by the scoring services.

All engine arithmetic happens on calendar dates; time of day is dropped at the
record boundary so that "overdue" means strictly before today.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple

from utils.logging_config import get_logger

logger = get_logger(__name__)

# Distance reported when the event never happened.
NEVER_DAYS = 999


def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a date-like value to a calendar date.

    Accepts date, datetime and ISO-8601 strings. Anything unparsable yields
    None and is treated downstream exactly like a missing date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                logger.debug("Ignoring unparsable date", extra={"value": value})
                return None
    logger.debug("Ignoring non-date value", extra={"value": repr(value)})
    return None


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)."""
    return (end - start).days


def days_since(moment: Optional[date], today: date, never: int = NEVER_DAYS) -> int:
    """Days elapsed since moment, or the never sentinel when there is no moment."""
    if moment is None:
        return never
    return days_between(moment, today)


def month_bounds(today: date) -> Tuple[date, date]:
    """First and last day of the month containing today."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def previous_month_bounds(today: date) -> Tuple[date, date]:
    """First and last day of the month before today's month."""
    first_of_month = today.replace(day=1)
    return month_bounds(first_of_month - timedelta(days=1))


def subtract_months(today: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the month's length."""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
