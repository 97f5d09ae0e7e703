"""
Unit tests for categories, books and pagination.
"""

import asyncio
from decimal import Decimal

import pytest

from bookstore.exceptions import ConflictError, NotFoundError, ValidationError
from bookstore.services import (
    BookChanges,
    CategoryService,
    LineItem,
    Page,
    normalize_paging,
    total_pages,
)
from bookstore.services.pagination import MAX_PAGE, MAX_PAGE_SIZE
from bookstore.storage import CategoryRepository


class StaleCategoryRepository(CategoryRepository):
    """Name lookup that always misses, leaving the unique index to reject duplicates."""

    async def find_by_name(self, session, name):
        return None


class TestPagination:
    """Tests for paging arithmetic."""

    def test_invalid_input_is_clamped(self):
        assert normalize_paging(0, 0) == (1, 10)
        assert normalize_paging(-3, -1) == (1, 10)
        assert normalize_paging(2, 25) == (2, 25)

    def test_oversized_input_is_capped(self):
        assert normalize_paging(10**20, 10**9) == (MAX_PAGE, MAX_PAGE_SIZE)

    def test_total_pages_rounds_up(self):
        assert total_pages(23, 10) == 3
        assert total_pages(20, 10) == 2
        assert total_pages(1, 10) == 1

    def test_empty_result_has_no_pages(self):
        page = Page(page=1, size=10, total_items=0)

        assert page.total_pages == 0
        assert list(page.items) == []


@pytest.mark.asyncio
class TestCategoryService:
    """Tests for category management."""

    async def test_duplicate_name_conflicts(self, category_service, category):
        with pytest.raises(ConflictError) as exc_info:
            await category_service.create(category.name)

        assert exc_info.value.status_code == 409
        assert exc_info.value.errors == {"name": "category already exists"}

    async def test_rename_to_own_name_succeeds(self, category_service, category):
        updated = await category_service.update(category.id, category.name)

        assert updated.id == category.id
        assert updated.name == category.name

    async def test_rename_to_taken_name_conflicts(self, category_service, category):
        other = await category_service.create("Fantasy")

        with pytest.raises(ConflictError) as exc_info:
            await category_service.update(other.id, category.name)

        assert exc_info.value.errors == {"name": "category name already exists"}

    async def test_concurrent_creates_yield_one_category(self, category_service):
        results = await asyncio.gather(
            *[category_service.create("Fiction") for _ in range(3)],
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(created) == 1
        assert len(conflicts) == 2
        assert all(c.errors == {"name": "category already exists"} for c in conflicts)

        page = await category_service.list_categories(1, 10)
        assert [c.name for c in page.items] == ["Fiction"]

    async def test_unique_index_conflict_on_rename(self, database, book_repository, category_service, category):
        other = await category_service.create("Fantasy")
        service = CategoryService(database, StaleCategoryRepository(), book_repository)

        with pytest.raises(ConflictError) as exc_info:
            await service.update(other.id, category.name)

        assert exc_info.value.status_code == 409
        assert exc_info.value.errors == {"name": "category name already exists"}

    async def test_update_missing_category(self, category_service):
        with pytest.raises(NotFoundError):
            await category_service.update(404, "Anything")

    async def test_list_pages(self, category_service):
        for i in range(23):
            await category_service.create(f"Category {i:02d}")

        page = await category_service.list_categories(3, 10)

        assert page.total_items == 23
        assert page.total_pages == 3
        assert [c.name for c in page.items] == ["Category 20", "Category 21", "Category 22"]

    async def test_list_clamps_paging(self, category_service, category):
        page = await category_service.list_categories(0, 0)

        assert (page.page, page.size) == (1, 10)
        assert page.total_items == 1

    async def test_delete_with_books_conflicts(self, category_service, category, books):
        with pytest.raises(ConflictError):
            await category_service.delete(category.id)

    async def test_delete_empty_category(self, category_service):
        empty = await category_service.create("Poetry")

        await category_service.delete(empty.id)

        with pytest.raises(NotFoundError):
            await category_service.delete(empty.id)


@pytest.mark.asyncio
class TestBookService:
    """Tests for book management and statistics."""

    async def test_get_includes_category(self, book_service, books, category):
        dune, _ = books

        book = await book_service.get(dune.id)

        assert book.category.name == category.name
        assert book.price == Decimal("50.00")

    async def test_missing_category_is_validation_error(self, book_service):
        with pytest.raises(ValidationError) as exc_info:
            await book_service.create(
                title="Orphan",
                author="Nobody",
                price=Decimal("10.00"),
                category_id=999,
                image="aW1hZ2U=",
            )

        assert "category_id" in exc_info.value.errors

    async def test_non_positive_price_rejected(self, book_service, category):
        with pytest.raises(ValidationError) as exc_info:
            await book_service.create(
                title="Free Book",
                author="Nobody",
                price=Decimal("0"),
                category_id=category.id,
                image="aW1hZ2U=",
            )

        assert "price" in exc_info.value.errors

    async def test_duplicate_title_conflicts(self, book_service, books, category):
        with pytest.raises(ConflictError) as exc_info:
            await book_service.create(
                title="Dune",
                author="Someone Else",
                price=Decimal("12.00"),
                category_id=category.id,
                image="aW1hZ2U=",
            )

        assert "title" in exc_info.value.errors

    async def test_same_author_and_price_is_allowed(self, book_service, books, category):
        book = await book_service.create(
            title="Dune Messiah",
            author="Frank Herbert",
            price=Decimal("50.00"),
            category_id=category.id,
            image="aW1hZ2U=",
            year=1965,
        )

        assert book.id is not None

    async def test_partial_update_keeps_other_fields(self, book_service, books):
        dune, _ = books

        updated = await book_service.update(dune.id, BookChanges(author="F. Herbert"))

        assert updated.author == "F. Herbert"
        assert updated.title == "Dune"
        assert updated.price == Decimal("50.00")
        assert updated.year == 1965

    async def test_update_title_to_existing_conflicts(self, book_service, books):
        dune, foundation = books

        with pytest.raises(ConflictError):
            await book_service.update(foundation.id, BookChanges(title=dune.title))

    async def test_update_missing_book(self, book_service):
        with pytest.raises(NotFoundError):
            await book_service.update(999, BookChanges(author="X"))

    async def test_delete_book(self, book_service, books):
        _, foundation = books

        await book_service.delete(foundation.id)

        with pytest.raises(NotFoundError):
            await book_service.get(foundation.id)

    async def test_delete_ordered_book_conflicts(self, book_service, order_service, customer, books):
        dune, _ = books
        await order_service.create_order(customer.id, [LineItem(book_id=dune.id, quantity=1)])

        with pytest.raises(ConflictError):
            await book_service.delete(dune.id)

    async def test_total_books(self, book_service, books):
        assert await book_service.total_books() == 2

    async def test_price_stats(self, book_service, books):
        stats = await book_service.price_stats()

        assert stats.max_price == pytest.approx(50.0)
        assert stats.min_price == pytest.approx(20.0)
        assert stats.avg_price == pytest.approx(35.0)

    async def test_price_stats_on_empty_catalog(self, book_service):
        stats = await book_service.price_stats()

        assert (stats.max_price, stats.min_price, stats.avg_price) == (0.0, 0.0, 0.0)
