"""
Generic data-access helper.

Concrete repositories hold a `Repository` for their model and expose only
the operations they declare, delegating the common ones to it.
"""

from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """Basic CRUD and offset pagination for one mapped class."""

    def __init__(self, model: type[ModelT]):
        self.model = model

    async def create(self, session: AsyncSession, entity: ModelT) -> ModelT:
        session.add(entity)
        await session.flush()
        return entity

    async def update(self, session: AsyncSession, entity: ModelT) -> ModelT:
        entity = await session.merge(entity)
        await session.flush()
        return entity

    async def delete(self, session: AsyncSession, entity: ModelT) -> None:
        await session.delete(entity)
        await session.flush()

    async def find_by_id(self, session: AsyncSession, id: Any) -> Optional[ModelT]:
        return await session.get(self.model, id)

    async def find_one_by(self, session: AsyncSession, **criteria) -> Optional[ModelT]:
        stmt = select(self.model).filter_by(**criteria).limit(1)
        return (await session.execute(stmt)).scalars().first()

    async def count(self, session: AsyncSession, **criteria) -> int:
        stmt = select(func.count()).select_from(self.model).filter_by(**criteria)
        return (await session.execute(stmt)).scalar_one()

    async def paginate(
        self,
        session: AsyncSession,
        page: int,
        size: int,
    ) -> tuple[Sequence[ModelT], int]:
        """
        Fetch one page ordered by primary key.

        Args:
            page: 1-based page number (already normalised)
            size: Page size (already normalised)

        Returns:
            (items, total_count)
        """
        total = await self.count(session)

        stmt = (
            select(self.model)
            .order_by(self.model.id)
            .limit(size)
            .offset((page - 1) * size)
        )
        items = (await session.execute(stmt)).scalars().all()

        return items, total
