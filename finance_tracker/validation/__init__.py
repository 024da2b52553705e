"""Input validation package."""

from finance_tracker.validation.validator import (
    FieldReader,
    validate_category_create,
    validate_category_update,
    validate_expense_create,
    validate_expense_query,
    validate_expense_update,
    validate_income_create,
    validate_income_query,
    validate_income_update,
    validate_login,
    validate_salary_amount,
    validate_salary_query,
    validate_user_create,
    validate_user_update,
    validate_year_month,
)

__all__ = [
    "FieldReader",
    "validate_category_create",
    "validate_category_update",
    "validate_expense_create",
    "validate_expense_query",
    "validate_expense_update",
    "validate_income_create",
    "validate_income_query",
    "validate_income_update",
    "validate_login",
    "validate_salary_amount",
    "validate_salary_query",
    "validate_user_create",
    "validate_user_update",
    "validate_year_month",
]
