"""
Audit Models for Finance Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Complete traceability of all mutations
2. Debugging information when things go wrong
3. Ability to reconstruct history from the logs

DESIGN DECISION: Audit events are log records. They are never written
to the record store, which holds only the five entity collections.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    
    Every mutating operation has its own event type.
    """
    # Users and authentication
    USER_REGISTERED = "user_registered"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    TOKEN_REJECTED = "token_rejected"
    
    # Entity persistence
    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"
    SALARY_UPSERTED = "salary_upserted"
    
    # Reporting
    SUMMARY_GENERATED = "summary_generated"
    CSV_EXPORTED = "csv_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """
    
    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    
    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    
    # Context - what entity is this about, and whose?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'category', 'expense', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Acting user"
    )
    
    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    
    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.entity_created("category", category.id, user_id)
        event = AuditEventBuilder.login_failed()
    """
    
    @staticmethod
    def user_registered(user_id: str, username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"User registered: {username}",
            details={"username": username},
        )
    
    @staticmethod
    def user_updated(user_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_UPDATED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description="User profile updated",
            details={"fields": fields},
        )
    
    @staticmethod
    def user_deleted(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_DELETED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description="User deleted (owned records are kept)",
        )
    
    @staticmethod
    def login_succeeded(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description="Login succeeded",
        )
    
    @staticmethod
    def login_failed() -> AuditEvent:
        # The attempted username is not recorded
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Login failed",
        )
    
    @staticmethod
    def token_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TOKEN_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Bearer token rejected",
            error_message=reason,
        )
    
    @staticmethod
    def entity_created(
        entity_type: str,
        entity_id: str,
        user_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} created",
            details=details or {},
        )
    
    @staticmethod
    def entity_updated(
        entity_type: str,
        entity_id: str,
        user_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} updated",
            details={"fields": fields},
        )
    
    @staticmethod
    def entity_deleted(
        entity_type: str,
        entity_id: str,
        user_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} deleted",
        )
    
    @staticmethod
    def salary_upserted(
        salary_id: str,
        user_id: str,
        period: str,
        amount: str,
        replaced: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SALARY_UPSERTED,
            entity_type="salary",
            entity_id=salary_id,
            user_id=user_id,
            description=f"Salary {'replaced' if replaced else 'recorded'} for {period}",
            details={
                "period": period,
                "amount": amount,
                "replaced": replaced,
            },
        )
    
    @staticmethod
    def summary_generated(
        user_id: str,
        period: str,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_GENERATED,
            entity_type="report",
            user_id=user_id,
            description=f"Monthly summary generated for {period}",
            details={
                "period": period,
                "expense_count": expense_count,
            },
        )
    
    @staticmethod
    def csv_exported(
        user_id: str,
        period: str,
        row_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type="report",
            user_id=user_id,
            description=f"CSV exported for {period} with {row_count} rows",
            details={
                "period": period,
                "row_count": row_count,
            },
        )
