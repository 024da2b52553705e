"""
Salary Service

One salary per (user, year, month). The id is derived from the period,
so upserting the same period twice replaces the record in place.
"""

from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.errors import NotFoundError
from finance_tracker.models.inputs import SalaryQuery, SalaryUpsert
from finance_tracker.models.records import Salary
from finance_tracker.services.ownership import owned_by
from finance_tracker.services.storage import SalariesRepository
from finance_tracker.utils import salary_id, year_month_key


class SalariesService:
    entity_type = "salary"
    
    def __init__(
        self,
        repository: SalariesRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
    
    async def list_salaries(
        self,
        user_id: str,
        query: Optional[SalaryQuery] = None,
    ) -> list[Salary]:
        """The user's salaries, optionally for one year and/or month, oldest first."""
        query = query or SalaryQuery()
        items = [
            item for item in owned_by(await self._repository.find_all(), user_id)
            if (query.year is None or item.year == query.year)
            and (query.month is None or item.month == query.month)
        ]
        return sorted(items, key=lambda item: (item.year, item.month))
    
    async def find_salary(self, user_id: str, year: int, month: int) -> Optional[Salary]:
        for item in await self._repository.find_all():
            if item.user_id == user_id and item.year == year and item.month == month:
                return item
        return None
    
    async def get_salary(self, user_id: str, year: int, month: int) -> Salary:
        salary = await self.find_salary(user_id, year, month)
        if salary is None:
            raise NotFoundError("Salary not found for period")
        return salary
    
    async def upsert_salary(
        self,
        user_id: str,
        year: int,
        month: int,
        data: SalaryUpsert,
    ) -> Salary:
        salary = Salary(
            id=salary_id(user_id, year, month),
            user_id=user_id,
            year=year,
            month=month,
            amount=data.amount,
        )
        
        def mutate(items: list[Salary]) -> tuple[list[Salary], bool]:
            for index, item in enumerate(items):
                if item.user_id == user_id and item.year == year and item.month == month:
                    items[index] = salary
                    return items, True
            return items + [salary], False
        
        replaced = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_salary_upserted(
                salary.id,
                user_id,
                year_month_key(year, month),
                str(salary.amount),
                replaced,
            )
        return salary
