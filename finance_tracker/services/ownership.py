"""
Ownership helpers shared by the domain services.

A record owned by another user is reported exactly like a missing one.
"""

from typing import Any, Optional, TypeVar

from finance_tracker.errors import NotFoundError
from finance_tracker.models.inputs import DateRangeQuery
from finance_tracker.utils import is_within_range

RecordT = TypeVar("RecordT")


def owned_by(items: list[RecordT], user_id: str) -> list[RecordT]:
    return [item for item in items if item.user_id == user_id]


def find_owned_index(
    items: list[Any],
    record_id: str,
    user_id: str,
    label: str,
) -> int:
    """Index of the record, or NotFoundError("<label> not found")."""
    for index, item in enumerate(items):
        if item.id == record_id and item.user_id == user_id:
            return index
    raise NotFoundError(f"{label} not found")


def ensure_owned(item: Optional[RecordT], user_id: str, label: str) -> RecordT:
    if item is None or item.user_id != user_id:
        raise NotFoundError(f"{label} not found")
    return item


def remove_owned(
    items: list[RecordT],
    record_id: str,
    user_id: str,
    label: str,
) -> list[RecordT]:
    remaining = [
        item for item in items
        if not (item.id == record_id and item.user_id == user_id)
    ]
    if len(remaining) == len(items):
        raise NotFoundError(f"{label} not found")
    return remaining


def matches_range(item: Any, query: DateRangeQuery) -> bool:
    return is_within_range(item.date, query.date_from, query.date_to)


def patch_of(data: Any) -> dict:
    """The fields a partial update actually provided."""
    return data.model_dump(exclude_unset=True)
