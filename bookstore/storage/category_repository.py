"""
Category persistence.
"""

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from .models import Category
from .repository import Repository


class CategoryRepository:
    """CRUD, pagination and name lookup over categories."""

    def __init__(self):
        self._crud = Repository(Category)

    async def create(self, session: AsyncSession, category: Category) -> Category:
        return await self._crud.create(session, category)

    async def update(self, session: AsyncSession, category: Category) -> Category:
        return await self._crud.update(session, category)

    async def delete(self, session: AsyncSession, category: Category) -> None:
        await self._crud.delete(session, category)

    async def find_by_id(self, session: AsyncSession, category_id: int) -> Optional[Category]:
        return await self._crud.find_by_id(session, category_id)

    async def find_by_name(self, session: AsyncSession, name: str) -> Optional[Category]:
        return await self._crud.find_one_by(session, name=name)

    async def paginate(
        self,
        session: AsyncSession,
        page: int,
        size: int,
    ) -> tuple[Sequence[Category], int]:
        return await self._crud.paginate(session, page, size)
