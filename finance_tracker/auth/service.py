"""
Authentication Service

Login exchanges credentials for a bearer token; every other operation
identifies the caller by verifying that token.
"""

from typing import Optional

from pydantic import BaseModel

from finance_tracker.audit import AuditLogger
from finance_tracker.auth.tokens import TokenService
from finance_tracker.errors import AuthenticationFailedError
from finance_tracker.models.inputs import LoginInput
from finance_tracker.models.records import AuthenticatedUser, PublicUser
from finance_tracker.services.users import UsersService


class LoginResult(BaseModel):
    token: str
    user: PublicUser


class AuthService:
    def __init__(
        self,
        users_service: UsersService,
        token_service: Optional[TokenService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = users_service
        self._tokens = token_service or TokenService()
        self._audit_logger = audit_logger
    
    async def login(self, credentials: LoginInput) -> LoginResult:
        """
        Raises:
            AuthenticationFailedError: Unknown username or wrong password
                (the two are indistinguishable)
        """
        user = await self._users.validate_credentials(
            credentials.username,
            credentials.password,
        )
        if self._audit_logger:
            await self._audit_logger.log_login(user.id if user else None)
        if user is None:
            raise AuthenticationFailedError("Invalid credentials")
        
        return LoginResult(
            token=self._tokens.issue(user),
            user=self._users.to_public(user),
        )
    
    async def verify_token(self, token: str) -> AuthenticatedUser:
        try:
            return self._tokens.verify(token)
        except AuthenticationFailedError:
            if self._audit_logger:
                await self._audit_logger.log_token_rejected("invalid or expired")
            raise
    
    async def authenticate_header(self, authorization: Optional[str]) -> AuthenticatedUser:
        """Authenticate an `Authorization: Bearer <token>` header value."""
        if not authorization or not authorization.lower().startswith("bearer "):
            raise AuthenticationFailedError("Missing authentication token")
        token = authorization[len("bearer "):].strip()
        if not token:
            raise AuthenticationFailedError("Missing authentication token")
        return await self.verify_token(token)
