"""
Book Repository

Catalog storage for books:
- CRUD and offset pagination
- Title lookup for duplicate checks
- Aggregate statistics computed in the database
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Book, BookOrder
from .repository import Repository


@dataclass
class PriceStats:
    """Result of the price aggregate query. All None on an empty catalog."""

    max_price: Optional[float]
    min_price: Optional[float]
    avg_price: Optional[float]


class BookRepository:
    """
    Repository for book CRUD and catalog statistics.

    Usage:
        repo = BookRepository()
        async with database.transaction() as session:
            book = await repo.find_by_title(session, "Dune")
            stats = await repo.price_stats(session)
    """

    def __init__(self):
        self._crud = Repository(Book)

    async def create(self, session: AsyncSession, book: Book) -> Book:
        return await self._crud.create(session, book)

    async def update(self, session: AsyncSession, book: Book) -> Book:
        return await self._crud.update(session, book)

    async def delete(self, session: AsyncSession, book: Book) -> None:
        await self._crud.delete(session, book)

    async def find_by_id(self, session: AsyncSession, book_id: int) -> Optional[Book]:
        return await self._crud.find_by_id(session, book_id)

    async def find_by_title(self, session: AsyncSession, title: str) -> Optional[Book]:
        return await self._crud.find_one_by(session, title=title)

    async def paginate(
        self,
        session: AsyncSession,
        page: int,
        size: int,
    ) -> tuple[Sequence[Book], int]:
        return await self._crud.paginate(session, page, size)

    async def count_all(self, session: AsyncSession) -> int:
        return await self._crud.count(session)

    async def count_in_category(self, session: AsyncSession, category_id: int) -> int:
        return await self._crud.count(session, category_id=category_id)

    async def is_ordered(self, session: AsyncSession, book_id: int) -> bool:
        """True if any order line references the book."""
        stmt = select(exists().where(BookOrder.book_id == book_id))
        return bool((await session.execute(stmt)).scalar())

    async def price_stats(self, session: AsyncSession) -> PriceStats:
        """MAX/MIN/AVG price in one aggregate query."""
        stmt = select(
            func.max(Book.price),
            func.min(Book.price),
            func.avg(Book.price),
        )
        max_price, min_price, avg_price = (await session.execute(stmt)).one()

        return PriceStats(
            max_price=float(max_price) if max_price is not None else None,
            min_price=float(min_price) if min_price is not None else None,
            avg_price=float(avg_price) if avg_price is not None else None,
        )
