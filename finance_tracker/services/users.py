"""
User Service

Manages users globally; self-service operations act on "me" only.
Usernames are trimmed, lowercased and unique. Deleting a user does
not delete the records they own.
"""

import asyncio
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.auth.passwords import PasswordHasher
from finance_tracker.errors import ConflictError, NotFoundError
from finance_tracker.models.inputs import UserCreate, UserUpdate
from finance_tracker.models.records import PublicUser, User
from finance_tracker.services.storage import UsersRepository
from finance_tracker.utils import USER_PREFIX, new_id


def normalize_username(username: str) -> str:
    return username.strip().lower()


class UsersService:
    entity_type = "user"
    
    def __init__(
        self,
        repository: UsersRepository,
        hasher: Optional[PasswordHasher] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._hasher = hasher or PasswordHasher()
        self._audit_logger = audit_logger
    
    @staticmethod
    def to_public(user: User) -> PublicUser:
        return PublicUser(id=user.id, name=user.name, username=user.username)
    
    async def list_users(self) -> list[PublicUser]:
        return [self.to_public(user) for user in await self._repository.find_all()]
    
    async def get_user(self, user_id: str) -> User:
        user = await self._repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
    
    async def get_profile(self, user_id: str) -> PublicUser:
        return self.to_public(await self.get_user(user_id))
    
    async def find_by_username(self, username: str) -> Optional[User]:
        wanted = normalize_username(username)
        for user in await self._repository.find_all():
            if user.username == wanted:
                return user
        return None
    
    async def register(self, data: UserCreate) -> PublicUser:
        username = normalize_username(data.username)
        password_hash = await asyncio.to_thread(self._hasher.hash, data.password)
        
        def mutate(users: list[User]) -> tuple[list[User], User]:
            if any(user.username == username for user in users):
                raise ConflictError("Username already in use")
            user = User(
                id=new_id(USER_PREFIX),
                name=data.name,
                username=username,
                password_hash=password_hash,
            )
            return users + [user], user
        
        user = await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_user_registered(user.id, user.username)
        return self.to_public(user)
    
    async def update_me(self, user_id: str, data: UserUpdate) -> PublicUser:
        """Change the caller's name and/or password."""
        password_hash = None
        if data.password:
            password_hash = await asyncio.to_thread(self._hasher.hash, data.password)
        
        def mutate(users: list[User]) -> tuple[list[User], User]:
            for index, user in enumerate(users):
                if user.id == user_id:
                    updated = user.model_copy(update={
                        "name": data.name or user.name,
                        "password_hash": password_hash or user.password_hash,
                    })
                    users[index] = updated
                    return users, updated
            raise NotFoundError("User not found")
        
        user = await self._repository.modify(mutate)
        if self._audit_logger:
            fields = [f for f in ("name", "password") if getattr(data, f)]
            await self._audit_logger.log_user_updated(user.id, fields)
        return self.to_public(user)
    
    async def delete_me(self, user_id: str) -> None:
        """Remove the caller's account. Owned records are not cascaded."""
        def mutate(users: list[User]) -> tuple[list[User], None]:
            remaining = [user for user in users if user.id != user_id]
            if len(remaining) == len(users):
                raise NotFoundError("User not found")
            return remaining, None
        
        await self._repository.modify(mutate)
        if self._audit_logger:
            await self._audit_logger.log_user_deleted(user_id)
    
    async def validate_credentials(self, username: str, password: str) -> Optional[User]:
        """
        The user if the credentials match, else None.
        
        An unknown username and a wrong password give the same result.
        """
        user = await self.find_by_username(username)
        if user is None:
            return None
        matches = await asyncio.to_thread(self._hasher.verify, password, user.password_hash)
        return user if matches else None
