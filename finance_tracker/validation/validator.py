"""
Input Validation

DESIGN DECISION: Every input type has one explicit validation function.
It reads a raw mapping (as an HTTP or CLI layer would deliver it),
normalizes values (trimming, lowercasing usernames), and either returns
a typed input model or raises ValidationFailedError listing EVERY
failing field, not just the first.

Validation happens before domain logic. Domain services assume their
inputs are clean and only enforce rules that need stored state
(uniqueness, ownership).

Wire names are camelCase (categoryId, paymentMethod, isRecurring);
the snake_case attribute names are accepted too.

IMPORTANT: Validation NEVER silently fixes issues beyond normalization.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from finance_tracker.errors import ValidationFailedError
from finance_tracker.models.inputs import (
    CategoryCreate,
    CategoryUpdate,
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
from finance_tracker.models.records import MAX_AMOUNT, PaymentMethod
from finance_tracker.models.validation import ValidationIssue

MIN_YEAR = 1900
MAX_YEAR = 2100
MIN_PASSWORD_LENGTH = 6
CENT = Decimal("0.01")

_MISSING = object()


class FieldReader:
    """
    Reads fields out of a raw mapping, collecting issues as it goes.
    
    Each reader method returns the clean value (or None) and records
    an issue for anything malformed. `finish()` raises if any were found.
    """
    
    def __init__(self, data: Optional[Mapping[str, Any]]):
        self._data = data or {}
        self.issues: list[ValidationIssue] = []
        self.values: dict[str, Any] = {}
    
    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------
    
    def _raw(self, wire_name: str, attr: str) -> Any:
        if wire_name in self._data:
            return self._data[wire_name]
        if attr in self._data:
            return self._data[attr]
        return _MISSING
    
    def _issue(
        self,
        field: str,
        issue_type: str,
        message: str,
        suggested_fix: Optional[str] = None,
    ) -> None:
        self.issues.append(ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
            severity="error",
            suggested_fix=suggested_fix,
        ))
    
    def _lookup(
        self,
        wire_name: str,
        attr: Optional[str],
        required: bool,
        nullable: bool = False,
    ) -> Any:
        raw = self._raw(wire_name, attr or wire_name)
        if raw is None and nullable:
            # An explicit null clears the field
            self._store(attr or wire_name, None)
            return _MISSING
        if raw is _MISSING or raw is None:
            if required:
                self._issue(wire_name, "missing", f"{wire_name} is required")
            return _MISSING
        return raw
    
    def _store(self, attr: str, value: Any) -> Any:
        self.values[attr] = value
        return value
    
    def finish(self) -> dict[str, Any]:
        if self.issues:
            raise ValidationFailedError(self.issues)
        return self.values
    
    # -------------------------------------------------------------------------
    # Field readers
    # -------------------------------------------------------------------------
    
    def text(
        self,
        wire_name: str,
        attr: Optional[str] = None,
        *,
        required: bool = True,
        max_length: Optional[int] = None,
        min_length: int = 1,
        strip: bool = True,
        lower: bool = False,
        nullable: bool = False,
    ) -> Optional[str]:
        raw = self._lookup(wire_name, attr, required, nullable)
        if raw is _MISSING:
            return None
        if not isinstance(raw, str):
            self._issue(wire_name, "invalid_type", f"{wire_name} must be a string")
            return None
        value = raw.strip() if strip else raw
        if lower:
            value = value.lower()
        if len(value) < min_length:
            if min_length == 1:
                self._issue(wire_name, "empty", f"{wire_name} must not be empty")
            else:
                self._issue(
                    wire_name,
                    "too_short",
                    f"{wire_name} must be at least {min_length} characters",
                )
            return None
        if max_length is not None and len(value) > max_length:
            self._issue(
                wire_name,
                "too_long",
                f"{wire_name} must be at most {max_length} characters",
            )
            return None
        return self._store(attr or wire_name, value)
    
    def money(
        self,
        wire_name: str,
        attr: Optional[str] = None,
        *,
        required: bool = True,
        allow_zero: bool = False,
    ) -> Optional[Decimal]:
        raw = self._lookup(wire_name, attr, required)
        if raw is _MISSING:
            return None
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str, Decimal)):
            self._issue(wire_name, "invalid_type", f"{wire_name} must be a number")
            return None
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            self._issue(wire_name, "invalid_format", f"{wire_name} must be a number")
            return None
        if not value.is_finite():
            self._issue(wire_name, "invalid_format", f"{wire_name} must be a finite number")
            return None
        if value < 0 or (value == 0 and not allow_zero):
            bound = "zero or greater" if allow_zero else "greater than zero"
            self._issue(wire_name, "out_of_range", f"{wire_name} must be {bound}")
            return None
        if value > MAX_AMOUNT:
            self._issue(
                wire_name,
                "out_of_range",
                f"{wire_name} must be at most {MAX_AMOUNT}",
            )
            return None
        quantized = value.quantize(CENT)
        if quantized != value:
            self._issue(
                wire_name,
                "invalid_precision",
                f"{wire_name} must have at most two decimal places",
                suggested_fix=f"Use {quantized}",
            )
            return None
        return self._store(attr or wire_name, quantized)
    
    def iso_date(
        self,
        wire_name: str,
        attr: Optional[str] = None,
        *,
        required: bool = True,
    ) -> Optional[date]:
        raw = self._lookup(wire_name, attr, required)
        if raw is _MISSING:
            return None
        if isinstance(raw, date):
            return self._store(attr or wire_name, raw)
        if isinstance(raw, str) and raw.strip() == "" and not required:
            return None
        try:
            value = date.fromisoformat(raw.strip())
        except (AttributeError, ValueError):
            self._issue(
                wire_name,
                "invalid_format",
                f"{wire_name} must be an ISO date (YYYY-MM-DD)",
            )
            return None
        return self._store(attr or wire_name, value)
    
    def boolean(
        self,
        wire_name: str,
        attr: Optional[str] = None,
        *,
        required: bool = True,
    ) -> Optional[bool]:
        raw = self._lookup(wire_name, attr, required)
        if raw is _MISSING:
            return None
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered == "" and not required:
                return None
            if lowered in ("true", "false"):
                raw = lowered == "true"
        if not isinstance(raw, bool):
            self._issue(wire_name, "invalid_type", f"{wire_name} must be true or false")
            return None
        return self._store(attr or wire_name, raw)
    
    def integer(
        self,
        wire_name: str,
        attr: Optional[str] = None,
        *,
        required: bool = True,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> Optional[int]:
        raw = self._lookup(wire_name, attr, required)
        if raw is _MISSING:
            return None
        if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
            raw = int(raw.strip())
        if isinstance(raw, bool) or not isinstance(raw, int):
            self._issue(wire_name, "invalid_type", f"{wire_name} must be an integer")
            return None
        if (minimum is not None and raw < minimum) or (maximum is not None and raw > maximum):
            self._issue(
                wire_name,
                "out_of_range",
                f"{wire_name} must be between {minimum} and {maximum}",
            )
            return None
        return self._store(attr or wire_name, raw)
    
    def choice(
        self,
        wire_name: str,
        enum_type: type[Enum],
        attr: Optional[str] = None,
        *,
        required: bool = True,
    ) -> Optional[Enum]:
        raw = self._lookup(wire_name, attr, required)
        if raw is _MISSING:
            return None
        try:
            value = enum_type(raw)
        except (TypeError, ValueError):
            allowed = ", ".join(member.value for member in enum_type)
            self._issue(
                wire_name,
                "invalid_choice",
                f"{wire_name} must be one of: {allowed}",
            )
            return None
        return self._store(attr or wire_name, value)


# =============================================================================
# USERS
# =============================================================================

def validate_user_create(data: Mapping[str, Any]) -> UserCreate:
    reader = FieldReader(data)
    reader.text("name", max_length=80)
    reader.text("username", max_length=40, lower=True)
    reader.text("password", strip=False, min_length=MIN_PASSWORD_LENGTH)
    return UserCreate(**reader.finish())


def validate_user_update(data: Mapping[str, Any]) -> UserUpdate:
    reader = FieldReader(data)
    reader.text("name", required=False, max_length=80)
    reader.text("password", required=False, strip=False, min_length=MIN_PASSWORD_LENGTH)
    return UserUpdate(**reader.finish())


def validate_login(data: Mapping[str, Any]) -> LoginInput:
    reader = FieldReader(data)
    reader.text("username", lower=True)
    reader.text("password", strip=False)
    return LoginInput(**reader.finish())


# =============================================================================
# CATEGORIES
# =============================================================================

def validate_category_create(data: Mapping[str, Any]) -> CategoryCreate:
    reader = FieldReader(data)
    reader.text("name", max_length=80)
    reader.money("budget", required=False, allow_zero=True)
    return CategoryCreate(**reader.finish())


def validate_category_update(data: Mapping[str, Any]) -> CategoryUpdate:
    reader = FieldReader(data)
    reader.text("name", required=False, max_length=80)
    reader.money("budget", required=False, allow_zero=True)
    return CategoryUpdate(**reader.finish())


# =============================================================================
# INCOMES
# =============================================================================

def _read_ledger_fields(reader: FieldReader, required: bool) -> None:
    reader.iso_date("date", required=required)
    reader.text("description", required=required, max_length=120)
    reader.text("categoryId", "category_id", required=required, max_length=60)
    reader.money("amount", required=required)


def _read_date_range(reader: FieldReader) -> None:
    reader.iso_date("from", "date_from", required=False)
    reader.iso_date("to", "date_to", required=False)


def validate_income_create(data: Mapping[str, Any]) -> IncomeCreate:
    reader = FieldReader(data)
    _read_ledger_fields(reader, required=True)
    return IncomeCreate(**reader.finish())


def validate_income_update(data: Mapping[str, Any]) -> IncomeUpdate:
    reader = FieldReader(data)
    _read_ledger_fields(reader, required=False)
    return IncomeUpdate(**reader.finish())


def validate_income_query(data: Optional[Mapping[str, Any]] = None) -> IncomeQuery:
    reader = FieldReader(data)
    _read_date_range(reader)
    reader.text("categoryId", "category_id", required=False, max_length=60)
    return IncomeQuery(**reader.finish())


# =============================================================================
# EXPENSES
# =============================================================================

def _read_expense_fields(reader: FieldReader, required: bool) -> None:
    _read_ledger_fields(reader, required)
    reader.choice("paymentMethod", PaymentMethod, "payment_method", required=required)
    reader.boolean("isRecurring", "is_recurring", required=required)
    reader.text("notes", required=False, max_length=240, min_length=0, nullable=True)


def validate_expense_create(data: Mapping[str, Any]) -> ExpenseCreate:
    reader = FieldReader(data)
    _read_expense_fields(reader, required=True)
    return ExpenseCreate(**reader.finish())


def validate_expense_update(data: Mapping[str, Any]) -> ExpenseUpdate:
    reader = FieldReader(data)
    _read_expense_fields(reader, required=False)
    return ExpenseUpdate(**reader.finish())


def validate_expense_query(data: Optional[Mapping[str, Any]] = None) -> ExpenseQuery:
    reader = FieldReader(data)
    _read_date_range(reader)
    reader.text("categoryId", "category_id", required=False, max_length=60)
    reader.boolean("recurring", required=False)
    return ExpenseQuery(**reader.finish())


# =============================================================================
# SALARIES AND PERIODS
# =============================================================================

def validate_salary_amount(data: Mapping[str, Any]) -> SalaryUpsert:
    reader = FieldReader(data)
    reader.money("amount")
    return SalaryUpsert(**reader.finish())


def validate_salary_query(data: Optional[Mapping[str, Any]] = None) -> SalaryQuery:
    reader = FieldReader(data)
    reader.integer("year", required=False, minimum=MIN_YEAR, maximum=MAX_YEAR)
    reader.integer("month", required=False, minimum=1, maximum=12)
    return SalaryQuery(**reader.finish())


def validate_year_month(data: Mapping[str, Any]) -> YearMonth:
    """Required year (1900..2100) and month (1..12); run before any report."""
    reader = FieldReader(data)
    reader.integer("year", minimum=MIN_YEAR, maximum=MAX_YEAR)
    reader.integer("month", minimum=1, maximum=12)
    return YearMonth(**reader.finish())
