"""
API Routes for the Bookstore

Route modules:
- auth: Registration and login
- categories: Category CRUD
- books: Book CRUD and statistics
- orders: Checkout, payment and history
"""

from bookstore.api.routes.auth import router as auth_router
from bookstore.api.routes.categories import router as categories_router
from bookstore.api.routes.books import router as books_router
from bookstore.api.routes.orders import router as orders_router

__all__ = [
    "auth_router",
    "categories_router",
    "books_router",
    "orders_router",
]
