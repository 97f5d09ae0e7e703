"""
User persistence.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .models import User
from .repository import Repository


class UserRepository:
    """Create and look up users."""

    def __init__(self):
        self._crud = Repository(User)

    async def create(self, session: AsyncSession, user: User) -> User:
        return await self._crud.create(session, user)

    async def find_by_id(self, session: AsyncSession, user_id: int) -> Optional[User]:
        return await self._crud.find_by_id(session, user_id)

    async def find_by_email(self, session: AsyncSession, email: str) -> Optional[User]:
        return await self._crud.find_one_by(session, email=email)
