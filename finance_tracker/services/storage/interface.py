"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap JSON files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
A collection is a homogeneous list of records, and the whole list is
the unit of read and write.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from finance_tracker.errors import StorageCorruptionError, StorageError

RawRecord = dict[str, Any]
T = TypeVar("T")

Mutator = Callable[[list[RawRecord]], tuple[list[RawRecord], T]]
"""Receives the current records, returns (next records, result)."""


class RecordStoreInterface(ABC):
    """
    Abstract interface for collection storage.
    
    Any storage implementation must implement these methods.
    """
    
    @abstractmethod
    async def read_all(self, collection: str) -> list[RawRecord]:
        """
        Read every record of a collection.
        
        A collection that was never written reads as empty.
        
        Raises:
            StorageCorruptionError: If the persisted content cannot be parsed
            StorageError: On any other I/O failure
        """
        pass
    
    @abstractmethod
    async def replace_all(self, collection: str, records: list[RawRecord]) -> None:
        """
        Durably replace the whole collection.
        
        Writers to the same collection are serialized and readers never
        observe a partially written collection.
        
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    async def modify(self, collection: str, mutator: Mutator[T]) -> T:
        """
        Read-modify-write a collection as one exclusive unit.
        
        No other mutation of the same collection overlaps the call.
        If the mutator raises, nothing is written and the error propagates.
        
        Returns:
            The result produced by the mutator
        """
        pass


__all__ = [
    "Mutator",
    "RawRecord",
    "RecordStoreInterface",
    "StorageCorruptionError",
    "StorageError",
]
