"""
Entity Repositories

Thin typed wrappers over the record store, one per entity kind, each
bound to a fixed collection name. They hold no state and add no logic
beyond converting raw records to and from their models.
"""

from typing import Callable, ClassVar, Generic, Optional, TypeVar

from pydantic import ValidationError

from finance_tracker.models.records import (
    Category,
    Expense,
    Income,
    Record,
    Salary,
    User,
)
from finance_tracker.services.storage.interface import (
    RawRecord,
    RecordStoreInterface,
    StorageCorruptionError,
)

RecordT = TypeVar("RecordT", bound=Record)
ResultT = TypeVar("ResultT")


class Repository(Generic[RecordT]):
    """Typed access to one collection."""
    
    collection: ClassVar[str]
    model: ClassVar[type[Record]]
    
    def __init__(self, store: RecordStoreInterface):
        self._store = store
    
    def _parse(self, raw: RawRecord) -> RecordT:
        try:
            return self.model.model_validate(raw)
        except ValidationError as e:
            raise StorageCorruptionError(
                f"Malformed record in {self.collection}: {e.error_count()} invalid field(s)"
            )
    
    def _parse_all(self, raw_records: list[RawRecord]) -> list[RecordT]:
        return [self._parse(raw) for raw in raw_records]
    
    async def find_all(self) -> list[RecordT]:
        return self._parse_all(await self._store.read_all(self.collection))
    
    async def find_by_id(self, record_id: str) -> Optional[RecordT]:
        for item in await self.find_all():
            if item.id == record_id:
                return item
        return None
    
    async def save_all(self, items: list[RecordT]) -> None:
        await self._store.replace_all(
            self.collection,
            [item.to_record() for item in items],
        )
    
    async def modify(
        self,
        mutator: Callable[[list[RecordT]], tuple[list[RecordT], ResultT]],
    ) -> ResultT:
        """Run a typed read-modify-write under the collection's lock."""
        def apply(raw_records: list[RawRecord]) -> tuple[list[RawRecord], ResultT]:
            items, result = mutator(self._parse_all(raw_records))
            return [item.to_record() for item in items], result
        
        return await self._store.modify(self.collection, apply)


class UsersRepository(Repository[User]):
    collection = "users"
    model = User


class CategoriesRepository(Repository[Category]):
    collection = "categories"
    model = Category


class IncomesRepository(Repository[Income]):
    collection = "incomes"
    model = Income


class ExpensesRepository(Repository[Expense]):
    collection = "expenses"
    model = Expense


class SalariesRepository(Repository[Salary]):
    collection = "salaries"
    model = Salary
