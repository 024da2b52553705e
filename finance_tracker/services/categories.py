"""
Category Service

Categories are owned by one user and unique by name per user
(case-insensitive). Renames are checked against the user's other
categories; other users' names never conflict.
"""

from decimal import Decimal
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.errors import ConflictError
from finance_tracker.models.inputs import CategoryCreate, CategoryUpdate
from finance_tracker.models.records import Category
from finance_tracker.services.ownership import (
    ensure_owned,
    find_owned_index,
    owned_by,
    patch_of,
    remove_owned,
)
from finance_tracker.services.storage import CategoriesRepository
from finance_tracker.utils import CATEGORY_PREFIX, new_id


def _ensure_unique_name(items: list[Category], name: str) -> None:
    wanted = name.casefold()
    if any(item.name.casefold() == wanted for item in items):
        raise ConflictError("Category name already exists")


class CategoriesService:
    entity_type = "category"
    
    def __init__(
        self,
        repository: CategoriesRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
    
    async def list_categories(self, user_id: str) -> list[Category]:
        """The user's categories, ordered by name."""
        items = owned_by(await self._repository.find_all(), user_id)
        return sorted(items, key=lambda item: item.name.casefold())
    
    async def get_category(self, user_id: str, category_id: str) -> Category:
        item = await self._repository.find_by_id(category_id)
        return ensure_owned(item, user_id, "Category")
    
    async def create_category(self, user_id: str, data: CategoryCreate) -> Category:
        def mutate(items: list[Category]) -> tuple[list[Category], Category]:
            _ensure_unique_name(owned_by(items, user_id), data.name)
            category = Category(
                id=new_id(CATEGORY_PREFIX),
                user_id=user_id,
                name=data.name,
                budget=data.budget if data.budget is not None else Decimal("0"),
            )
            return items + [category], category
        
        category = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_created(
                self.entity_type, category.id, user_id, {"name": category.name}
            )
        return category
    
    async def update_category(
        self,
        user_id: str,
        category_id: str,
        data: CategoryUpdate,
    ) -> Category:
        # A budget of None means "keep the current budget"
        patch = {k: v for k, v in patch_of(data).items() if v is not None}
        
        def mutate(items: list[Category]) -> tuple[list[Category], Category]:
            index = find_owned_index(items, category_id, user_id, "Category")
            if "name" in patch:
                others = [
                    item for item in owned_by(items, user_id)
                    if item.id != category_id
                ]
                _ensure_unique_name(others, patch["name"])
            updated = Category.model_validate({**items[index].model_dump(), **patch})
            items[index] = updated
            return items, updated
        
        category = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_updated(
                self.entity_type, category.id, user_id, sorted(patch)
            )
        return category
    
    async def delete_category(self, user_id: str, category_id: str) -> None:
        """
        Delete a category. Expenses and incomes that reference it are
        left untouched; reports fall back to the raw id for them.
        """
        def mutate(items: list[Category]) -> tuple[list[Category], None]:
            return remove_owned(items, category_id, user_id, "Category"), None
        
        await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_deleted(self.entity_type, category_id, user_id)
