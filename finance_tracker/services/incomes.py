"""Income Service: one-time incomes, scoped to their owner."""

from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.models.inputs import IncomeCreate, IncomeQuery, IncomeUpdate
from finance_tracker.models.records import Income
from finance_tracker.services.ownership import (
    ensure_owned,
    find_owned_index,
    matches_range,
    owned_by,
    patch_of,
    remove_owned,
)
from finance_tracker.services.storage import IncomesRepository
from finance_tracker.utils import INCOME_PREFIX, new_id


class IncomesService:
    entity_type = "income"
    
    def __init__(
        self,
        repository: IncomesRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
    
    async def list_incomes(
        self,
        user_id: str,
        query: Optional[IncomeQuery] = None,
    ) -> list[Income]:
        """The user's incomes matching the filters, most recent first."""
        query = query or IncomeQuery()
        items = [
            item for item in owned_by(await self._repository.find_all(), user_id)
            if matches_range(item, query)
            and (not query.category_id or item.category_id == query.category_id)
        ]
        return sorted(items, key=lambda item: item.date, reverse=True)
    
    async def get_income(self, user_id: str, income_id: str) -> Income:
        item = await self._repository.find_by_id(income_id)
        return ensure_owned(item, user_id, "Income")
    
    async def create_income(self, user_id: str, data: IncomeCreate) -> Income:
        income = Income(
            id=new_id(INCOME_PREFIX),
            user_id=user_id,
            **data.model_dump(),
        )
        await self._repository.modify(lambda items: (items + [income], None))
        if self._audit_logger:
            await self._audit_logger.log_created(
                self.entity_type, income.id, user_id, {"amount": str(income.amount)}
            )
        return income
    
    async def update_income(
        self,
        user_id: str,
        income_id: str,
        data: IncomeUpdate,
    ) -> Income:
        patch = patch_of(data)
        
        def mutate(items: list[Income]) -> tuple[list[Income], Income]:
            index = find_owned_index(items, income_id, user_id, "Income")
            updated = Income.model_validate({**items[index].model_dump(), **patch})
            items[index] = updated
            return items, updated
        
        income = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_updated(
                self.entity_type, income.id, user_id, sorted(patch)
            )
        return income
    
    async def delete_income(self, user_id: str, income_id: str) -> None:
        await self._repository.modify(
            lambda items: (remove_owned(items, income_id, user_id, "Income"), None)
        )
        if self._audit_logger:
            await self._audit_logger.log_deleted(self.entity_type, income_id, user_id)
