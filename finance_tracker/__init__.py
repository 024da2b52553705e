"""
Finance Tracker - Source Package

A personal finance tracker: users record salary, incomes, expenses and
budget categories, and retrieve month-scoped summaries and CSV exports.

DESIGN PRINCIPLES:
1. Every record belongs to exactly one user
2. Fail early, fail visibly
3. The full collection is the unit of read and write
4. Reports never write
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
