"""Working-day arithmetic for drip release.

A working day is a calendar day that is not Saturday, not Sunday and
not an admin-declared holiday. Every value is reduced to a UTC calendar
day first so the caller's local time never shifts the count.

Pure functions — no I/O, no clock access except ``utc_today``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from app.exceptions import InvalidDateError

_SATURDAY = 5
_SUNDAY = 6


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def to_utc_date(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO-8601 string to its UTC calendar day.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, str):
        raw = value.strip()
        try:
            return date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidDateError(value) from exc

    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()
    if isinstance(value, date):
        return value
    raise InvalidDateError(value)


def count_working_days(
    reference_date: date | datetime | str,
    holiday_dates: Iterable[date | datetime | str] = (),
    today: date | datetime | None = None,
) -> int:
    """Count working days from ``reference_date`` through ``today``, both inclusive.

    Returns 0 when ``reference_date`` lies in the future. A reference date
    that is itself a working day counts as day 1.
    """
    start = to_utc_date(reference_date)
    end = to_utc_date(today) if today is not None else utc_today()
    if end < start:
        return 0

    holidays = {to_utc_date(h) for h in holiday_dates}

    # Whole weeks contribute five weekdays each; walk only the remainder
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    tail_start = start + timedelta(days=full_weeks * 7)
    for offset in range(remainder):
        if (tail_start + timedelta(days=offset)).weekday() not in (_SATURDAY, _SUNDAY):
            count += 1

    count -= sum(
        1 for h in holidays
        if start <= h <= end and h.weekday() not in (_SATURDAY, _SUNDAY)
    )
    return count
