"""
Input Models

Typed inputs produced by the validation functions and consumed by the
domain services. They carry no rules of their own: every rule lives in
finance_tracker.validation, which builds these only from clean values.

Update inputs are built with only the fields the caller provided, so
`model_dump(exclude_unset=True)` is exactly the patch to merge.
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from finance_tracker.models.records import PaymentMethod


# =============================================================================
# USERS
# =============================================================================

class UserCreate(BaseModel):
    name: str
    username: str
    password: str


class UserUpdate(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None


class LoginInput(BaseModel):
    username: str
    password: str


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryCreate(BaseModel):
    name: str
    budget: Optional[Decimal] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    budget: Optional[Decimal] = None


# =============================================================================
# INCOMES
# =============================================================================

class IncomeCreate(BaseModel):
    date: datetime.date
    description: str
    category_id: str
    amount: Decimal


class IncomeUpdate(BaseModel):
    date: Optional[datetime.date] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    amount: Optional[Decimal] = None


class DateRangeQuery(BaseModel):
    """Inclusive ISO date range; either bound may be open."""
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None


class IncomeQuery(DateRangeQuery):
    category_id: Optional[str] = None


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseCreate(BaseModel):
    date: datetime.date
    description: str
    category_id: str
    payment_method: PaymentMethod
    amount: Decimal
    is_recurring: bool
    notes: Optional[str] = None


class ExpenseUpdate(BaseModel):
    date: Optional[datetime.date] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    amount: Optional[Decimal] = None
    is_recurring: Optional[bool] = None
    notes: Optional[str] = None


class ExpenseQuery(DateRangeQuery):
    category_id: Optional[str] = None
    recurring: Optional[bool] = None


# =============================================================================
# SALARIES AND PERIODS
# =============================================================================

class SalaryUpsert(BaseModel):
    amount: Decimal


class SalaryQuery(BaseModel):
    year: Optional[int] = None
    month: Optional[int] = None


class YearMonth(BaseModel):
    """A calendar month, the period every report covers."""
    year: int
    month: int
