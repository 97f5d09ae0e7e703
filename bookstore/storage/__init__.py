"""
Storage Module for the bookstore

Relational persistence for users, catalog and orders:
- Async SQLAlchemy engine and scoped transactions
- ORM schema
- One repository per aggregate
"""

from bookstore.storage.database import Database
from bookstore.storage.models import (
    Base,
    Book,
    BookOrder,
    Category,
    Order,
    OrderStatus,
    User,
    utcnow,
)
from bookstore.storage.repository import Repository
from bookstore.storage.user_repository import UserRepository
from bookstore.storage.category_repository import CategoryRepository
from bookstore.storage.book_repository import BookRepository, PriceStats
from bookstore.storage.order_repository import OrderRepository

__all__ = [
    # Database
    "Database",
    # Models
    "Base",
    "Book",
    "BookOrder",
    "Category",
    "Order",
    "OrderStatus",
    "User",
    "utcnow",
    # Repositories
    "Repository",
    "UserRepository",
    "CategoryRepository",
    "BookRepository",
    "PriceStats",
    "OrderRepository",
]
