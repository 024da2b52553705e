"""Reporting package."""

from finance_tracker.reports.engine import CSV_HEADER, ReportService, escape_csv

__all__ = ["CSV_HEADER", "ReportService", "escape_csv"]
