"""
Audit Logger

DESIGN DECISION: Every mutation and every report is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. A history of each user's changes

The audit logger:
- Is async so services can await it uniformly
- Writes structured JSON log lines only (no persisted collection)
- Never records passwords, hashes or tokens
"""

import logging
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.
    
    Domain services and the reporting engine receive one instance
    at composition time and call the typed helpers below.
    """
    
    def __init__(self, logger_name: str = "finance_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)
    
    async def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()
        
        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
    
    async def log_user_registered(self, user_id: str, username: str) -> None:
        await self.log(AuditEventBuilder.user_registered(user_id, username))
    
    async def log_user_updated(self, user_id: str, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.user_updated(user_id, fields))
    
    async def log_user_deleted(self, user_id: str) -> None:
        await self.log(AuditEventBuilder.user_deleted(user_id))
    
    async def log_login(self, user_id: Optional[str]) -> None:
        """Log a login attempt; `None` means it failed."""
        if user_id is None:
            await self.log(AuditEventBuilder.login_failed())
        else:
            await self.log(AuditEventBuilder.login_succeeded(user_id))
    
    async def log_token_rejected(self, reason: str) -> None:
        await self.log(AuditEventBuilder.token_rejected(reason))
    
    async def log_created(
        self,
        entity_type: str,
        entity_id: str,
        user_id: str,
        details: Optional[dict] = None,
    ) -> None:
        await self.log(
            AuditEventBuilder.entity_created(entity_type, entity_id, user_id, details)
        )
    
    async def log_updated(
        self,
        entity_type: str,
        entity_id: str,
        user_id: str,
        fields: list[str],
    ) -> None:
        await self.log(
            AuditEventBuilder.entity_updated(entity_type, entity_id, user_id, fields)
        )
    
    async def log_deleted(self, entity_type: str, entity_id: str, user_id: str) -> None:
        await self.log(AuditEventBuilder.entity_deleted(entity_type, entity_id, user_id))
    
    async def log_salary_upserted(
        self,
        salary_id: str,
        user_id: str,
        period: str,
        amount: str,
        replaced: bool,
    ) -> None:
        await self.log(
            AuditEventBuilder.salary_upserted(salary_id, user_id, period, amount, replaced)
        )
    
    async def log_summary_generated(
        self,
        user_id: str,
        period: str,
        expense_count: int,
    ) -> None:
        await self.log(AuditEventBuilder.summary_generated(user_id, period, expense_count))
    
    async def log_csv_exported(self, user_id: str, period: str, row_count: int) -> None:
        await self.log(AuditEventBuilder.csv_exported(user_id, period, row_count))
