"""
Persisted Record Models

These models define the strict schemas for every record the record
store persists. They are designed to:
1. Enforce type safety when a collection is read back from disk
2. Keep monetary values exact (Decimal, two decimal places)
3. Serialize to the on-disk camelCase layout (userId, categoryId, ...)

DESIGN DECISION: Money is a Decimal in memory and a JSON number on disk.
Totals and percentages are computed without binary float artefacts.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# MONEY TYPES
# =============================================================================

MAX_AMOUNT = Decimal("999999999999.99")
"""Largest amount stored; every two-decimal value up to it survives the JSON number round trip."""

Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""A signed monetary value (e.g. a balance)."""

Money = Annotated[
    Decimal,
    Field(ge=0, le=MAX_AMOUNT, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""A non-negative monetary value (e.g. a category budget)."""

PositiveMoney = Annotated[
    Decimal,
    Field(gt=0, le=MAX_AMOUNT, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""A strictly positive monetary value (income, expense, salary amounts)."""


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentMethod(str, Enum):
    """How an expense was paid."""
    CREDIT_CARD = "credit_card"
    DEBIT = "debit"
    PIX = "pix"
    CASH = "cash"


# =============================================================================
# RECORDS
# =============================================================================

class Record(BaseModel):
    """
    Base for every persisted record.
    
    Ids are opaque strings, unique within their collection.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
    
    id: str = Field(
        ...,
        min_length=1,
        description="Opaque record id"
    )
    
    def to_record(self) -> dict:
        """Convert to the dict written to the collection file."""
        return self.model_dump(mode="json", by_alias=True)


class User(Record):
    """
    A registered user.
    
    The username is unique and always stored lowercase.
    """
    
    name: str = Field(
        ...,
        min_length=1,
        max_length=80,
    )
    username: str = Field(
        ...,
        min_length=1,
        max_length=40,
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        description="Opaque hash produced by the password hasher"
    )


class PublicUser(BaseModel):
    """The profile of a user as shown to callers (never the hash)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    id: str
    name: str
    username: str


class AuthenticatedUser(PublicUser):
    """Identity embedded in a verified bearer token."""
    pass


class Category(Record):
    """A budget category, unique by name (case-insensitive) per user."""
    
    user_id: str = Field(..., min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=80,
    )
    budget: Money = Field(
        default=Decimal("0"),
        description="Monthly budget; 0 means no budget"
    )


class Income(Record):
    """A one-time income tied to exactly one calendar date."""
    
    user_id: str = Field(..., min_length=1)
    date: datetime.date
    description: str = Field(
        ...,
        min_length=1,
        max_length=120,
    )
    category_id: str = Field(..., min_length=1, max_length=60)
    amount: PositiveMoney


class Expense(Record):
    """
    An expense anchored at a calendar date.
    
    A recurring expense repeats on the same day-of-month every month
    from its anchor date onward, indefinitely.
    """
    
    user_id: str = Field(..., min_length=1)
    date: datetime.date = Field(
        ...,
        description="Anchor date"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=120,
    )
    category_id: str = Field(..., min_length=1, max_length=60)
    payment_method: PaymentMethod
    amount: PositiveMoney
    is_recurring: bool = False
    notes: Optional[str] = Field(
        default=None,
        max_length=240,
    )


class Salary(Record):
    """
    The salary for one (user, year, month).
    
    At most one exists per period; the id is derived from the period.
    """
    
    user_id: str = Field(..., min_length=1)
    year: int = Field(..., ge=1900, le=2100)
    month: int = Field(..., ge=1, le=12)
    amount: PositiveMoney
