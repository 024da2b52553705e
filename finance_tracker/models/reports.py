"""
Report Models

Outputs of the reporting engine. Serialized by alias they use the
camelCase keys callers expect: incomeTotal, expenseTotal, balance,
byCategory[{categoryId, total, budget, percent}].
"""

import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from finance_tracker.models.records import Amount, Expense, Money


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategorySummary(ReportModel):
    """Spend vs. budget for one category in one month."""
    
    category_id: str
    total: Amount
    budget: Money
    percent: Amount


class MonthlySummary(ReportModel):
    """Income, expense and balance for one month."""
    
    income_total: Amount
    expense_total: Amount
    balance: Amount
    by_category: list[CategorySummary]


class ExpenseOccurrence(ReportModel):
    """An in-scope expense and the date it is attributed to in the month."""
    
    expense: Expense
    effective_date: datetime.date
    
    @property
    def amount(self):
        return self.expense.amount
    
    @property
    def category_id(self) -> str:
        return self.expense.category_id
