"""
Storage Services Package

Provides the abstract record store interface, the JSON file
implementation and the typed entity repositories built on it.
"""

from finance_tracker.services.storage.interface import (
    Mutator,
    RawRecord,
    RecordStoreInterface,
    StorageCorruptionError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileRecordStore
from finance_tracker.services.storage.repositories import (
    CategoriesRepository,
    ExpensesRepository,
    IncomesRepository,
    Repository,
    SalariesRepository,
    UsersRepository,
)

__all__ = [
    # Interfaces
    "Mutator",
    "RawRecord",
    "RecordStoreInterface",
    # Exceptions
    "StorageCorruptionError",
    "StorageError",
    # JSON file implementation
    "JsonFileRecordStore",
    # Repositories
    "CategoriesRepository",
    "ExpensesRepository",
    "IncomesRepository",
    "Repository",
    "SalariesRepository",
    "UsersRepository",
]
