"""
Monthly Reporting Engine

DESIGN DECISION: Reports are computed on demand from the stored
collections. Nothing is cached and nothing is written.

For a (user, year, month) the engine folds:
- income: the period's salary (if any) plus one-time incomes dated
  within the month
- expense: non-recurring expenses anchored in the month, plus recurring
  expenses anchored in or before the month, projected forward to the
  anchor day (capped to the month length)
- per category: spend vs. budget for every category the user owns

The four collections are read concurrently and without locks, so a
report may reflect a state between two independent writes. Category
ids that no longer resolve (deleted categories) are tolerated: the CSV
falls back to the raw id.
"""

import asyncio
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.config import get_settings
from finance_tracker.models.records import Category, Income, Salary
from finance_tracker.models.reports import (
    CategorySummary,
    ExpenseOccurrence,
    MonthlySummary,
)
from finance_tracker.services.storage import (
    CategoriesRepository,
    ExpensesRepository,
    IncomesRepository,
    SalariesRepository,
)
from finance_tracker.utils import (
    effective_date,
    end_of_month,
    occurs_in_month,
    start_of_month,
    year_month_key,
)

CSV_HEADER = ["type", "date", "description", "category", "paymentMethod", "amount"]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    return f"{round_money(value):.2f}"


def escape_csv(value: str) -> str:
    """Quote a field containing a comma, quote or newline; double inner quotes."""
    if "," in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


class ReportService:
    """
    Builds month-scoped summaries and CSV exports.
    
    GUARANTEES:
    - Only counts records owned by the requested user
    - Never fails on empty collections (zeroed totals instead)
    - Never writes
    """
    
    def __init__(
        self,
        incomes: IncomesRepository,
        expenses: ExpensesRepository,
        categories: CategoriesRepository,
        salaries: SalariesRepository,
        audit_logger: Optional[AuditLogger] = None,
        salary_label: Optional[str] = None,
    ):
        self._incomes = incomes
        self._expenses = expenses
        self._categories = categories
        self._salaries = salaries
        self._audit_logger = audit_logger
        self._salary_label = salary_label or get_settings().app.salary_csv_label
    
    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------
    
    async def get_summary(self, user_id: str, year: int, month: int) -> MonthlySummary:
        """Income, expense, balance and per-category spend for one month."""
        incomes, occurrences, categories, salary = await asyncio.gather(
            self.incomes_for_month(user_id, year, month),
            self.expenses_for_month(user_id, year, month),
            self._categories_of(user_id),
            self.salary_for_month(user_id, year, month),
        )
        
        salary_amount = salary.amount if salary else Decimal("0")
        income_total = salary_amount + sum((i.amount for i in incomes), Decimal("0"))
        expense_total = sum((o.amount for o in occurrences), Decimal("0"))
        
        summary = MonthlySummary(
            income_total=income_total,
            expense_total=expense_total,
            balance=income_total - expense_total,
            by_category=self._build_category_summary(occurrences, categories),
        )
        
        if self._audit_logger:
            await self._audit_logger.log_summary_generated(
                user_id, year_month_key(year, month), len(occurrences)
            )
        return summary
    
    async def export_csv(self, user_id: str, year: int, month: int) -> str:
        """
        The month's ledger as CSV text.
        
        Rows: header, the salary (if any), incomes by date, then expenses
        by effective date. Rows are joined with "\\n", no trailing newline.
        """
        incomes, occurrences, categories, salary = await asyncio.gather(
            self.incomes_for_month(user_id, year, month),
            self.expenses_for_month(user_id, year, month),
            self._categories_of(user_id),
            self.salary_for_month(user_id, year, month),
        )
        
        names = {category.id: category.name for category in categories}
        
        rows: list[list[str]] = [list(CSV_HEADER)]
        
        if salary:
            rows.append([
                "salary",
                start_of_month(year, month).isoformat(),
                self._salary_label,
                "",
                "",
                format_amount(salary.amount),
            ])
        
        for income in incomes:
            rows.append([
                "income",
                income.date.isoformat(),
                income.description,
                names.get(income.category_id, income.category_id),
                "",
                format_amount(income.amount),
            ])
        
        for occurrence in occurrences:
            expense = occurrence.expense
            rows.append([
                "expense",
                occurrence.effective_date.isoformat(),
                expense.description,
                names.get(expense.category_id, expense.category_id),
                expense.payment_method.value,
                format_amount(expense.amount),
            ])
        
        if self._audit_logger:
            await self._audit_logger.log_csv_exported(
                user_id, year_month_key(year, month), len(rows) - 1
            )
        return "\n".join(",".join(escape_csv(field) for field in row) for row in rows)
    
    @staticmethod
    def csv_filename(year: int, month: int) -> str:
        return f"report-{year_month_key(year, month)}.csv"
    
    # -------------------------------------------------------------------------
    # Month-scoped reads
    # -------------------------------------------------------------------------
    
    async def salary_for_month(self, user_id: str, year: int, month: int) -> Optional[Salary]:
        for item in await self._salaries.find_all():
            if item.user_id == user_id and item.year == year and item.month == month:
                return item
        return None
    
    async def incomes_for_month(self, user_id: str, year: int, month: int) -> list[Income]:
        """The user's incomes dated within the month, oldest first."""
        start = start_of_month(year, month)
        end = end_of_month(year, month)
        items = [
            item for item in await self._incomes.find_all()
            if item.user_id == user_id and start <= item.date <= end
        ]
        return sorted(items, key=lambda item: item.date)
    
    async def expenses_for_month(
        self,
        user_id: str,
        year: int,
        month: int,
    ) -> list[ExpenseOccurrence]:
        """The user's in-scope expenses with their effective dates, oldest first."""
        occurrences = [
            ExpenseOccurrence(
                expense=item,
                effective_date=effective_date(item.date, year, month, item.is_recurring),
            )
            for item in await self._expenses.find_all()
            if item.user_id == user_id
            and occurs_in_month(item.date, year, month, item.is_recurring)
        ]
        return sorted(occurrences, key=lambda o: o.effective_date)
    
    async def _categories_of(self, user_id: str) -> list[Category]:
        return [item for item in await self._categories.find_all() if item.user_id == user_id]
    
    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------
    
    def _build_category_summary(
        self,
        occurrences: list[ExpenseOccurrence],
        categories: list[Category],
    ) -> list[CategorySummary]:
        """One entry per owned category, including those with no spend."""
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for occurrence in occurrences:
            totals[occurrence.category_id] += occurrence.amount
        
        summaries = []
        for category in categories:
            total = round_money(totals.get(category.id, Decimal("0")))
            if category.budget > 0:
                percent = round_money(total / category.budget * HUNDRED)
            else:
                percent = Decimal("0")
            summaries.append(CategorySummary(
                category_id=category.id,
                total=total,
                budget=category.budget,
                percent=percent,
            ))
        return summaries
