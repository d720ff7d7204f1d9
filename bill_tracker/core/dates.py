"""
Day-granularity date helpers.

Bills only care about calendar days, so everything here works on
datetime.date. Time components are dropped before any arithmetic.

Month-end policy for recurring bills: the day of month is clamped to
the last valid day of the target month (Jan 31 -> Feb 29 in a leap
year, Feb 28 otherwise; Feb 29 -> Feb 28 on a non-leap target year).
The original day is not remembered, so a Jan 31 monthly bill continues
Feb 29 -> Mar 29.
"""

import calendar
from datetime import date, datetime
from typing import Optional, Union

from bill_tracker.models.bill import Recurrence


DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO yyyy-mm-dd string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def days_until(due: DateLike, today: Optional[DateLike] = None) -> int:
    """
    Signed number of days from today to the due date.

    Positive = future, negative = past, zero = due today.
    """
    reference = to_date(today) if today is not None else date.today()
    return (to_date(due) - reference).days


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def next_occurrence(due: DateLike, recurrence: Recurrence) -> date:
    """Due date of the next cycle of a recurring bill."""
    current = to_date(due)
    recurrence = Recurrence(recurrence)
    if recurrence == Recurrence.MONTHLY:
        return add_months(current, 1)
    if recurrence == Recurrence.YEARLY:
        return add_months(current, 12)
    return current
