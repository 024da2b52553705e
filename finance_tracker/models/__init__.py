"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.records import (
    Amount,
    AuthenticatedUser,
    Category,
    Expense,
    Income,
    Money,
    PaymentMethod,
    PositiveMoney,
    PublicUser,
    Record,
    Salary,
    User,
)
from finance_tracker.models.inputs import (
    CategoryCreate,
    CategoryUpdate,
    DateRangeQuery,
    ExpenseCreate,
    ExpenseQuery,
    ExpenseUpdate,
    IncomeCreate,
    IncomeQuery,
    IncomeUpdate,
    LoginInput,
    SalaryQuery,
    SalaryUpsert,
    UserCreate,
    UserUpdate,
    YearMonth,
)
from finance_tracker.models.reports import (
    CategorySummary,
    ExpenseOccurrence,
    MonthlySummary,
)
from finance_tracker.models.validation import ValidationIssue
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Amount",
    "AuthenticatedUser",
    "Category",
    "Expense",
    "Income",
    "Money",
    "PaymentMethod",
    "PositiveMoney",
    "PublicUser",
    "Record",
    "Salary",
    "User",
    # Inputs
    "CategoryCreate",
    "CategoryUpdate",
    "DateRangeQuery",
    "ExpenseCreate",
    "ExpenseQuery",
    "ExpenseUpdate",
    "IncomeCreate",
    "IncomeQuery",
    "IncomeUpdate",
    "LoginInput",
    "SalaryQuery",
    "SalaryUpsert",
    "UserCreate",
    "UserUpdate",
    "YearMonth",
    # Reports
    "CategorySummary",
    "ExpenseOccurrence",
    "MonthlySummary",
    # Validation
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
