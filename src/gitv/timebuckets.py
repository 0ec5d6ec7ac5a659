from __future__ import annotations

import datetime as dt
import math

DAYS_IN_LAST_SIX_MONTHS = 183
WEEKS_IN_LAST_SIX_MONTHS = 26
DAYS_PER_WEEK = 7
OUT_OF_RANGE = 99999


def _today(today: dt.date | None) -> dt.date:
    if today is None:
        return dt.date.today()
    if isinstance(today, dt.datetime):
        return beginning_of_day(today).date()
    return today


def beginning_of_day(value: dt.date | dt.datetime) -> dt.datetime:
    """Local midnight of `value`. Aware datetimes are converted to local time first."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        d = value.date()
    else:
        d = value
    return dt.datetime(d.year, d.month, d.day)


def days_since(value: dt.date | dt.datetime, *, today: dt.date | None = None) -> int:
    now = beginning_of_day(_today(today))
    then = beginning_of_day(value)
    days = math.ceil((now - then).total_seconds() / 86400)
    if days > DAYS_IN_LAST_SIX_MONTHS:
        return OUT_OF_RANGE
    return days


def weekday_sunday_first(d: dt.date) -> int:
    # Sunday=0 .. Saturday=6
    return (d.weekday() + 1) % 7


def week_offset(*, today: dt.date | None = None) -> int:
    return DAYS_PER_WEEK - weekday_sunday_first(_today(today))
