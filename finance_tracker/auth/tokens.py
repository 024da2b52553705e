"""
Bearer tokens.

Signed JWTs (python-jose) carrying the user id as `sub` plus the
username and display name, with an `exp` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from finance_tracker.config import AuthSettings, get_settings
from finance_tracker.errors import AuthenticationFailedError
from finance_tracker.models.records import AuthenticatedUser, User


class TokenService:
    """Issue and verify bearer tokens."""
    
    def __init__(self, settings: Optional[AuthSettings] = None):
        self._settings = settings or get_settings().auth
    
    @property
    def expires_in(self) -> timedelta:
        return timedelta(minutes=self._settings.token_expires_minutes)
    
    def issue(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_in)
        payload = {
            "sub": user.id,
            "username": user.username,
            "name": user.name,
            "exp": expire,
        }
        return jwt.encode(
            payload,
            self._settings.jwt_secret,
            algorithm=self._settings.jwt_algorithm,
        )
    
    def verify(self, token: str) -> AuthenticatedUser:
        """
        Decode a token and return the identity it carries.
        
        Raises:
            AuthenticationFailedError: Bad signature, expired, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
            )
        except JWTError:
            raise AuthenticationFailedError("Invalid token")
        
        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationFailedError("Invalid token")
        
        return AuthenticatedUser(
            id=user_id,
            username=payload.get("username", ""),
            name=payload.get("name", ""),
        )
