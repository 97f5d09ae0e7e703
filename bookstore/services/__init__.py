"""
Services for the bookstore

Business rules on top of the repositories:
- Accounts and tokens
- Category and book catalog
- Order checkout, payment and expiration
"""

from bookstore.services.pagination import Page, normalize_paging, total_pages
from bookstore.services.user_service import UserService, AuthResult
from bookstore.services.category_service import CategoryService
from bookstore.services.book_service import BookService, BookChanges
from bookstore.services.order_service import (
    OrderService,
    LineItem,
    MAX_QUANTITY_PER_ORDER,
)
from bookstore.services.order_sweeper import OrderExpirationSweeper

__all__ = [
    # Pagination
    "Page",
    "normalize_paging",
    "total_pages",
    # Users
    "UserService",
    "AuthResult",
    # Catalog
    "CategoryService",
    "BookService",
    "BookChanges",
    # Orders
    "OrderService",
    "LineItem",
    "MAX_QUANTITY_PER_ORDER",
    "OrderExpirationSweeper",
]
