"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def _relative_start(keyword: str, unit: str, today: date) -> Optional[date]:
    """Start of the week/month/year named by 'last', 'this' or 'next'."""
    offset = {"last": -1, "this": 0, "next": 1}[keyword]
    if unit == "week":
        return today - timedelta(days=today.weekday()) + timedelta(weeks=offset)
    if unit == "month":
        return today.replace(day=1) + relativedelta(months=offset)
    if unit == "year":
        return today.replace(month=1, day=1) + relativedelta(years=offset)
    if keyword == "last" and unit in WEEKDAYS:
        days_ago = (today.weekday() - WEEKDAYS.index(unit)) % 7 or 7
        return today - timedelta(days=days_ago)
    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", "last/this/next week|month|year"
    (first day of that period) and "last monday" etc.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    keyword, _, unit = text.partition(" ")
    if keyword in ("last", "this", "next") and unit:
        relative = _relative_start(keyword, unit, today)
        if relative is not None:
            return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    week, month or year.

    Args:
        period: One of PERIODS
        today: Reference day (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    keyword, _, unit = period.partition("-")

    if period not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    start = _relative_start(keyword, unit, today)
    if keyword == "this":
        return start, today

    # End of the previous period is the day before the current one starts
    return start, _relative_start("this", unit, today) - timedelta(days=1)
