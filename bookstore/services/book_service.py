"""
Book catalog management and statistics.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from bookstore.exceptions import (
    ConflictError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from bookstore.storage import (
    Book,
    BookRepository,
    CategoryRepository,
    Database,
    PriceStats,
)

from .pagination import Page, normalize_paging


@dataclass
class BookChanges:
    """Partial update; None leaves the field untouched."""

    title: Optional[str] = None
    author: Optional[str] = None
    price: Optional[Decimal] = None
    year: Optional[int] = None
    category_id: Optional[int] = None
    image: Optional[str] = None


class BookService:
    """
    Book CRUD and aggregate statistics.

    Only the title is treated as unique. Every write re-reads the book
    afterwards so the returned object carries its current category.
    """

    def __init__(
        self,
        database: Database,
        book_repository: BookRepository,
        category_repository: CategoryRepository,
    ):
        self.database = database
        self.books = book_repository
        self.categories = category_repository

    async def create(
        self,
        title: str,
        author: str,
        price: Decimal,
        category_id: int,
        image: str,
        year: Optional[int] = None,
    ) -> Book:
        if price <= 0:
            raise ValidationError(errors={"price": "price must be greater than 0"})

        try:
            async with self.database.transaction() as session:
                if await self.categories.find_by_id(session, category_id) is None:
                    raise ValidationError(errors={"category_id": "category not found"})

                if await self.books.find_by_title(session, title) is not None:
                    raise ConflictError("title", "book already exists")

                book = Book(
                    title=title,
                    author=author,
                    price=price,
                    year=year,
                    category_id=category_id,
                    image=image,
                )
                await self.books.create(session, book)
                book_id = book.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to create book: {e}")
            raise InfrastructureError("failed to create book") from e

        logger.info(f"Created book {book_id}: {title} by {author}")
        return await self.get(book_id)

    async def list_books(self, page: int, size: int) -> Page[Book]:
        page, size = normalize_paging(page, size)

        try:
            async with self.database.session() as session:
                items, total = await self.books.paginate(session, page, size)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list books: {e}")
            raise InfrastructureError("failed to list books") from e

        return Page(page=page, size=size, total_items=total, items=items)

    async def get(self, book_id: int) -> Book:
        try:
            async with self.database.session() as session:
                book = await self.books.find_by_id(session, book_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get book {book_id}: {e}")
            raise InfrastructureError("failed to get book") from e

        if book is None:
            raise NotFoundError("book")
        return book

    async def update(self, book_id: int, changes: BookChanges) -> Book:
        if changes.price is not None and changes.price <= 0:
            raise ValidationError(errors={"price": "price must be greater than 0"})

        try:
            async with self.database.transaction() as session:
                book = await self.books.find_by_id(session, book_id)
                if book is None:
                    raise NotFoundError("book")

                if changes.title and changes.title != book.title:
                    existing = await self.books.find_by_title(session, changes.title)
                    if existing is not None and existing.id != book_id:
                        raise ConflictError("title", "book title already exists")
                    book.title = changes.title

                if changes.category_id and changes.category_id != book.category_id:
                    if await self.categories.find_by_id(session, changes.category_id) is None:
                        raise ValidationError(errors={"category_id": "category not found"})
                    book.category_id = changes.category_id

                if changes.author:
                    book.author = changes.author
                if changes.price is not None:
                    book.price = changes.price
                if changes.year is not None:
                    book.year = changes.year
                if changes.image is not None:
                    book.image = changes.image

                await self.books.update(session, book)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update book {book_id}: {e}")
            raise InfrastructureError("failed to update book") from e

        return await self.get(book_id)

    async def delete(self, book_id: int) -> None:
        try:
            async with self.database.transaction() as session:
                book = await self.books.find_by_id(session, book_id)
                if book is None:
                    raise NotFoundError("book")

                if await self.books.is_ordered(session, book_id):
                    raise ConflictError("book", "book is referenced by existing orders")

                await self.books.delete(session, book)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete book {book_id}: {e}")
            raise InfrastructureError("failed to delete book") from e

        logger.info(f"Deleted book {book_id}")

    async def total_books(self) -> int:
        try:
            async with self.database.session() as session:
                return await self.books.count_all(session)
        except SQLAlchemyError as e:
            logger.error(f"Failed to count books: {e}")
            raise InfrastructureError("failed to count books") from e

    async def price_stats(self) -> PriceStats:
        """Min/max/avg price; zeros on an empty catalog."""
        try:
            async with self.database.session() as session:
                stats = await self.books.price_stats(session)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get book price stats: {e}")
            raise InfrastructureError("failed to get book price stats") from e

        return PriceStats(
            max_price=stats.max_price or 0.0,
            min_price=stats.min_price or 0.0,
            avg_price=stats.avg_price or 0.0,
        )
