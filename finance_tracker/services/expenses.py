"""
Expense Service

Expenses are stored once, at their anchor date. Recurrence is not
materialized here: the reporting engine projects recurring expenses
into later months when it builds a report.
"""

from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.models.inputs import ExpenseCreate, ExpenseQuery, ExpenseUpdate
from finance_tracker.models.records import Expense
from finance_tracker.services.ownership import (
    ensure_owned,
    find_owned_index,
    matches_range,
    owned_by,
    patch_of,
    remove_owned,
)
from finance_tracker.services.storage import ExpensesRepository
from finance_tracker.utils import EXPENSE_PREFIX, new_id


def _matches(item: Expense, query: ExpenseQuery) -> bool:
    if not matches_range(item, query):
        return False
    if query.category_id and item.category_id != query.category_id:
        return False
    if query.recurring is not None and item.is_recurring != query.recurring:
        return False
    return True


class ExpensesService:
    entity_type = "expense"
    
    def __init__(
        self,
        repository: ExpensesRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
    
    async def list_expenses(
        self,
        user_id: str,
        query: Optional[ExpenseQuery] = None,
    ) -> list[Expense]:
        """
        The user's expenses matching the filters, most recent first.
        
        The date range applies to the anchor date.
        """
        query = query or ExpenseQuery()
        items = [
            item for item in owned_by(await self._repository.find_all(), user_id)
            if _matches(item, query)
        ]
        return sorted(items, key=lambda item: item.date, reverse=True)
    
    async def get_expense(self, user_id: str, expense_id: str) -> Expense:
        item = await self._repository.find_by_id(expense_id)
        return ensure_owned(item, user_id, "Expense")
    
    async def create_expense(self, user_id: str, data: ExpenseCreate) -> Expense:
        expense = Expense(
            id=new_id(EXPENSE_PREFIX),
            user_id=user_id,
            **data.model_dump(),
        )
        await self._repository.modify(lambda items: (items + [expense], None))
        if self._audit_logger:
            await self._audit_logger.log_created(
                self.entity_type,
                expense.id,
                user_id,
                {
                    "amount": str(expense.amount),
                    "is_recurring": expense.is_recurring,
                },
            )
        return expense
    
    async def update_expense(
        self,
        user_id: str,
        expense_id: str,
        data: ExpenseUpdate,
    ) -> Expense:
        patch = patch_of(data)
        
        def mutate(items: list[Expense]) -> tuple[list[Expense], Expense]:
            index = find_owned_index(items, expense_id, user_id, "Expense")
            updated = Expense.model_validate({**items[index].model_dump(), **patch})
            items[index] = updated
            return items, updated
        
        expense = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_updated(
                self.entity_type, expense.id, user_id, sorted(patch)
            )
        return expense
    
    async def delete_expense(self, user_id: str, expense_id: str) -> None:
        await self._repository.modify(
            lambda items: (remove_owned(items, expense_id, user_id, "Expense"), None)
        )
        if self._audit_logger:
            await self._audit_logger.log_deleted(self.entity_type, expense_id, user_id)
