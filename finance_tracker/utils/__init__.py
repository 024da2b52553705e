"""Calendar, recurrence and id helpers."""

from finance_tracker.utils.dates import (
    days_in_month,
    effective_date,
    end_of_month,
    is_within_range,
    occurs_in_month,
    parse_iso_date,
    start_of_month,
    year_month_key,
)
from finance_tracker.utils.ids import (
    CATEGORY_PREFIX,
    EXPENSE_PREFIX,
    INCOME_PREFIX,
    USER_PREFIX,
    new_id,
    salary_id,
)

__all__ = [
    "CATEGORY_PREFIX",
    "EXPENSE_PREFIX",
    "INCOME_PREFIX",
    "USER_PREFIX",
    "days_in_month",
    "effective_date",
    "end_of_month",
    "is_within_range",
    "new_id",
    "occurs_in_month",
    "parse_iso_date",
    "salary_id",
    "start_of_month",
    "year_month_key",
]
