"""
Password hashing.

A thin wrapper over passlib's CryptContext. The scheme list comes from
configuration; the first scheme hashes new passwords and the others are
still accepted for verification.
"""

from typing import Optional

from passlib.context import CryptContext

from finance_tracker.config import get_settings


class PasswordHasher:
    """Hash and verify passwords."""
    
    def __init__(self, schemes: Optional[list[str]] = None):
        schemes = schemes or get_settings().auth.password_schemes_list
        self._context = CryptContext(schemes=schemes, deprecated="auto")
    
    def hash(self, password: str) -> str:
        return self._context.hash(password)
    
    def verify(self, password: str, password_hash: str) -> bool:
        """False for a wrong password or an unrecognised hash."""
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            return False
