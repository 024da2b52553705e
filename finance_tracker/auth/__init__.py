"""Authentication package: password hashing, bearer tokens and login."""

from finance_tracker.auth.passwords import PasswordHasher
from finance_tracker.auth.tokens import TokenService

__all__ = ["PasswordHasher", "TokenService"]
