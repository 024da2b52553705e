"""
Calendar and Recurrence Helpers

A recurring expense repeats on its anchor day-of-month every month from
its anchor month onward, never backward. In months shorter than the
anchor day the occurrence is capped to the last day of the month
(a Jan-31 anchor lands on Feb-28, or Feb-29 in leap years).
"""

import calendar
from datetime import date
from typing import Optional, Union


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD string. Dates pass through unchanged."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid ISO date: {value!r}")


def year_month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def start_of_month(year: int, month: int) -> date:
    return date(year, month, 1)


def end_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def is_within_range(
    value: date,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> bool:
    """Inclusive range check; a missing bound is open."""
    if date_from and value < date_from:
        return False
    if date_to and value > date_to:
        return False
    return True


def occurs_in_month(
    anchor: date,
    year: int,
    month: int,
    is_recurring: bool,
) -> bool:
    """
    Is an expense anchored at `anchor` in scope for (year, month)?
    
    Non-recurring: only in the anchor's own month.
    Recurring: in every month from the anchor's month onward.
    """
    if not is_recurring:
        return (anchor.year, anchor.month) == (year, month)
    return (anchor.year, anchor.month) <= (year, month)


def effective_date(
    anchor: date,
    year: int,
    month: int,
    is_recurring: bool,
) -> date:
    """
    The date an in-scope expense is attributed to within (year, month).
    
    Same-month (or non-recurring) expenses keep their anchor date;
    projected recurrences take the anchor day capped to the month length.
    """
    if not is_recurring or (anchor.year, anchor.month) == (year, month):
        return anchor
    return date(year, month, min(anchor.day, days_in_month(year, month)))
