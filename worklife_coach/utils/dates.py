"""Date helpers for due dates, month offsets and duration strings."""

import re
from datetime import datetime, time, timedelta, timezone

from dateutil.relativedelta import SU as SUNDAY, relativedelta

DURATION_PATTERN = re.compile(r"(\d+)-?(\d+)?\s*months?", re.IGNORECASE)
DEFAULT_DURATION_MONTHS = 12.0


def parse_mean_months(duration: str) -> float:
    """Mean month count of a range string: "6-12 months" -> 9.0, "3 months" -> 3.0.

    Unparseable strings count as 12 months.
    """
    match = DURATION_PATTERN.search(duration or "")
    if not match:
        return DEFAULT_DURATION_MONTHS
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else low
    return (low + high) / 2


def parse_max_months(duration: str) -> int:
    match = DURATION_PATTERN.search(duration or "")
    if not match:
        return int(DEFAULT_DURATION_MONTHS)
    return int(match.group(2) or match.group(1))


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones are returned unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def end_of_week(moment: datetime) -> datetime:
    """End of the upcoming Sunday (today when today is Sunday)."""
    return end_of_day(moment + relativedelta(weekday=SUNDAY))


def end_of_month(moment: datetime) -> datetime:
    return end_of_day(moment + relativedelta(day=31))


def add_months(moment: datetime, months: int) -> datetime:
    return moment + relativedelta(months=months)


def within_month_band(
    start: datetime, moment: datetime, min_months: int, max_months: int
) -> bool:
    """True when ``moment`` lies between start+min_months and start+max_months, inclusive."""
    return add_months(start, min_months) <= moment <= add_months(start, max_months)


def days_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier) / timedelta(days=1)
