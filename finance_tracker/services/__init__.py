"""Services package: record storage and the per-entity domain services."""

from finance_tracker.services.storage import (
    CategoriesRepository,
    ExpensesRepository,
    IncomesRepository,
    JsonFileRecordStore,
    RecordStoreInterface,
    SalariesRepository,
    StorageCorruptionError,
    StorageError,
    UsersRepository,
)
from finance_tracker.services.categories import CategoriesService
from finance_tracker.services.expenses import ExpensesService
from finance_tracker.services.incomes import IncomesService
from finance_tracker.services.salaries import SalariesService
from finance_tracker.services.users import UsersService

__all__ = [
    # Storage
    "CategoriesRepository",
    "ExpensesRepository",
    "IncomesRepository",
    "JsonFileRecordStore",
    "RecordStoreInterface",
    "SalariesRepository",
    "StorageCorruptionError",
    "StorageError",
    "UsersRepository",
    # Domain services
    "CategoriesService",
    "ExpensesService",
    "IncomesService",
    "SalariesService",
    "UsersService",
]
