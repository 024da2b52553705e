"""
Application Composition Root

This module wires the whole object graph once, explicitly:

    store -> repositories -> domain services -> auth / reports

DESIGN DECISION: There is no global registry. One record store instance
owns the per-file locks, and every repository receives that same instance,
so every writer of a given file shares one lock.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.auth import PasswordHasher, TokenService
from finance_tracker.auth.service import AuthService
from finance_tracker.config import Settings, get_settings
from finance_tracker.reports import ReportService
from finance_tracker.services import (
    CategoriesRepository,
    CategoriesService,
    ExpensesRepository,
    ExpensesService,
    IncomesRepository,
    IncomesService,
    JsonFileRecordStore,
    RecordStoreInterface,
    SalariesRepository,
    SalariesService,
    UsersRepository,
    UsersService,
)


@dataclass
class AppComponents:
    """Everything an HTTP, CLI or UI layer needs to serve requests."""
    
    store: RecordStoreInterface
    users: UsersService
    categories: CategoriesService
    incomes: IncomesService
    expenses: ExpensesService
    salaries: SalariesService
    auth: AuthService
    reports: ReportService
    audit_logger: AuditLogger


def create_app_components(
    settings: Optional[Settings] = None,
    data_dir: Optional[Union[str, Path]] = None,
    store: Optional[RecordStoreInterface] = None,
    hasher: Optional[PasswordHasher] = None,
    configure_logs: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.
    
    Args:
        settings: Settings to use (defaults to the cached settings)
        data_dir: Overrides the configured data directory
        store: A ready-made record store (e.g. for tests); wins over data_dir
        hasher: Password hasher to use (defaults to the configured schemes)
        configure_logs: Whether to set the stdlib log level from settings
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings.app.log_level)
    
    audit_logger = AuditLogger()
    if store is None:
        storage_settings = settings.storage
        store = JsonFileRecordStore(
            data_dir=data_dir if data_dir is not None else storage_settings.data_dir,
            indent=storage_settings.json_indent,
            retry_attempts=storage_settings.write_retry_attempts,
        )
    
    users_repository = UsersRepository(store)
    categories_repository = CategoriesRepository(store)
    incomes_repository = IncomesRepository(store)
    expenses_repository = ExpensesRepository(store)
    salaries_repository = SalariesRepository(store)
    
    users = UsersService(users_repository, hasher or PasswordHasher(), audit_logger)
    
    return AppComponents(
        store=store,
        users=users,
        categories=CategoriesService(categories_repository, audit_logger),
        incomes=IncomesService(incomes_repository, audit_logger),
        expenses=ExpensesService(expenses_repository, audit_logger),
        salaries=SalariesService(salaries_repository, audit_logger),
        auth=AuthService(users, TokenService(settings.auth), audit_logger),
        reports=ReportService(
            incomes_repository,
            expenses_repository,
            categories_repository,
            salaries_repository,
            audit_logger=audit_logger,
            salary_label=settings.app.salary_csv_label,
        ),
        audit_logger=audit_logger,
    )
