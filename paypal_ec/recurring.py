"""First billing date for PayPal billing agreements."""

import calendar
from datetime import datetime, timedelta, timezone

# PayPal rejects agreements starting less than 24 hours ahead.
IMMEDIATE_LEAD = timedelta(hours=25)
# Midday keeps the date stable when PayPal converts it to the merchant's timezone.
MIDDAY = timedelta(hours=12)


def _clamp(day: int, year: int, month: int) -> int:
    return min(day, calendar.monthrange(year, month)[1])


def calculate_start_date(start_day: int, now: datetime) -> datetime:
    """Return the start of the first billing cycle.

    ``start_day`` 0 means "as soon as PayPal allows", 1-31 means that day of
    the month. Day 31 in a 30-day month becomes the 30th. Once that day has
    been reached in the current month the start moves to the next one.
    """
    if not 0 <= start_day <= 31:
        raise ValueError(f"Recurring start day must be between 0 and 31, {start_day} given.")
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if start_day == 0:
        return now + IMMEDIATE_LEAD

    year, month = now.year, now.month
    if now.day >= _clamp(start_day, year, month):
        month += 1
        if month > 12:
            year, month = year + 1, 1

    start = datetime(year, month, _clamp(start_day, year, month), tzinfo=now.tzinfo)
    return start + MIDDAY


def format_start_date(value: datetime) -> str:
    return value.isoformat(timespec="seconds")
