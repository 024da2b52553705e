"""
Error Taxonomy

Every failure a caller can observe is one of these kinds.
Domain services raise them at their boundary; the record store
only raises the storage kinds (it does not interpret domain meaning).

DESIGN DECISION: NotFoundError never distinguishes "absent" from
"owned by someone else", and AuthenticationFailedError never says
which credential was wrong.
"""

from typing import Optional

from finance_tracker.models.validation import ValidationIssue


class FinanceError(Exception):
    """Base exception for the finance tracker."""
    
    kind = "error"
    default_message = "Unexpected error"
    
    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)
    
    def to_dict(self) -> dict:
        """User-visible representation: the kind and a readable message."""
        return {"kind": self.kind, "message": self.message}


class NotFoundError(FinanceError):
    """Entity absent, or not owned by the caller."""
    
    kind = "not_found"
    default_message = "Not found"


class ConflictError(FinanceError):
    """Uniqueness violation (duplicate category name, username in use)."""
    
    kind = "conflict"
    default_message = "Conflict"


class ValidationFailedError(FinanceError):
    """Malformed input, rejected before reaching domain logic."""
    
    kind = "validation_failed"
    default_message = "Validation failed"
    
    def __init__(
        self,
        issues: list[ValidationIssue],
        message: Optional[str] = None,
    ):
        self.issues = issues
        if message is None:
            fields = ", ".join(issue.field for issue in issues)
            message = f"Validation failed for: {fields}" if fields else None
        super().__init__(message)
    
    def to_dict(self) -> dict:
        data = super().to_dict()
        data["issues"] = [issue.model_dump() for issue in self.issues]
        return data


class AuthenticationFailedError(FinanceError):
    """Bad credentials or an invalid/expired token."""
    
    kind = "authentication_failed"
    default_message = "Invalid credentials"


class StorageError(FinanceError):
    """Base exception for storage operations."""
    
    kind = "storage_error"
    default_message = "Storage failure"


class StorageCorruptionError(StorageError):
    """A persisted collection could not be parsed. Never auto-repaired."""
    
    kind = "storage_corruption"
    default_message = "Stored collection is corrupted"
