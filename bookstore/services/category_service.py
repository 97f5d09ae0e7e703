"""
Category management.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bookstore.exceptions import ConflictError, InfrastructureError, NotFoundError
from bookstore.storage import BookRepository, Category, CategoryRepository, Database

from .pagination import Page, normalize_paging


class CategoryService:
    """CRUD over categories with name uniqueness checked before writes."""

    def __init__(
        self,
        database: Database,
        category_repository: CategoryRepository,
        book_repository: BookRepository,
    ):
        self.database = database
        self.categories = category_repository
        self.books = book_repository

    async def create(self, name: str) -> Category:
        try:
            async with self.database.transaction() as session:
                if await self.categories.find_by_name(session, name) is not None:
                    raise ConflictError("name", "category already exists")

                category = Category(name=name)
                await self.categories.create(session, category)
        except IntegrityError as e:
            # Lost a race with a concurrent create of the same name
            logger.warning(f"Category name already taken: {name}")
            raise ConflictError("name", "category already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to create category: {e}")
            raise InfrastructureError("failed to create category") from e

        return category

    async def list_categories(self, page: int, size: int) -> Page[Category]:
        page, size = normalize_paging(page, size)

        try:
            async with self.database.session() as session:
                items, total = await self.categories.paginate(session, page, size)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list categories: {e}")
            raise InfrastructureError("failed to list categories") from e

        return Page(page=page, size=size, total_items=total, items=items)

    async def update(self, category_id: int, name: str) -> Category:
        """
        Rename a category.

        Keeping the current name is not a conflict; taking another
        category's name is.
        """
        try:
            async with self.database.transaction() as session:
                category = await self.categories.find_by_id(session, category_id)
                if category is None:
                    raise NotFoundError("category")

                existing = await self.categories.find_by_name(session, name)
                if existing is not None and existing.id != category_id:
                    raise ConflictError("name", "category name already exists")

                category.name = name
                category = await self.categories.update(session, category)
        except IntegrityError as e:
            logger.warning(f"Category name already taken: {name}")
            raise ConflictError("name", "category name already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to update category {category_id}: {e}")
            raise InfrastructureError("failed to update category") from e

        return category

    async def delete(self, category_id: int) -> None:
        try:
            async with self.database.transaction() as session:
                category = await self.categories.find_by_id(session, category_id)
                if category is None:
                    raise NotFoundError("category")

                if await self.books.count_in_category(session, category_id) > 0:
                    raise ConflictError("category", "category still has books")

                await self.categories.delete(session, category)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete category {category_id}: {e}")
            raise InfrastructureError("failed to delete category") from e

        logger.info(f"Deleted category {category_id}")
