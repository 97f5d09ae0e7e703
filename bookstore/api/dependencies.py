"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Service instances (users, catalog, orders)
- Authentication
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Request

from bookstore.config import Settings
from bookstore.exceptions import UnauthorizedError
from bookstore.security import TokenService
from bookstore.services import (
    BookService,
    CategoryService,
    OrderExpirationSweeper,
    OrderService,
    UserService,
)
from bookstore.storage import (
    BookRepository,
    CategoryRepository,
    Database,
    OrderRepository,
    UserRepository,
)


# =============================================================================
# Configuration
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Container for lazily built service instances.

    One container is created per application and kept on `app.state`;
    everything it builds shares the same Database.
    """

    def __init__(self, settings: Settings, database: Optional[Database] = None):
        self.settings = settings
        self._database = database
        self._user_repository = None
        self._category_repository = None
        self._book_repository = None
        self._order_repository = None
        self._token_service = None
        self._user_service = None
        self._category_service = None
        self._book_service = None
        self._order_service = None
        self._order_sweeper = None

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database.from_settings(self.settings)
        return self._database

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    @property
    def user_repository(self) -> UserRepository:
        if self._user_repository is None:
            self._user_repository = UserRepository()
        return self._user_repository

    @property
    def category_repository(self) -> CategoryRepository:
        if self._category_repository is None:
            self._category_repository = CategoryRepository()
        return self._category_repository

    @property
    def book_repository(self) -> BookRepository:
        if self._book_repository is None:
            self._book_repository = BookRepository()
        return self._book_repository

    @property
    def order_repository(self) -> OrderRepository:
        if self._order_repository is None:
            self._order_repository = OrderRepository()
        return self._order_repository

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def token_service(self) -> TokenService:
        if self._token_service is None:
            self._token_service = TokenService(
                secret_key=self.settings.jwt_secret_key,
                issuer=self.settings.jwt_issuer,
                expire_minutes=self.settings.jwt_expire_minutes,
            )
        return self._token_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(
                database=self.database,
                user_repository=self.user_repository,
                token_service=self.token_service,
            )
        return self._user_service

    @property
    def category_service(self) -> CategoryService:
        if self._category_service is None:
            self._category_service = CategoryService(
                database=self.database,
                category_repository=self.category_repository,
                book_repository=self.book_repository,
            )
        return self._category_service

    @property
    def book_service(self) -> BookService:
        if self._book_service is None:
            self._book_service = BookService(
                database=self.database,
                book_repository=self.book_repository,
                category_repository=self.category_repository,
            )
        return self._book_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(
                database=self.database,
                order_repository=self.order_repository,
                book_repository=self.book_repository,
            )
        return self._order_service

    @property
    def order_sweeper(self) -> OrderExpirationSweeper:
        if self._order_sweeper is None:
            self._order_sweeper = OrderExpirationSweeper(
                database=self.database,
                order_repository=self.order_repository,
                expiry=timedelta(minutes=self.settings.order_expiry_minutes),
                interval_seconds=self.settings.order_sweep_interval_seconds,
            )
        return self._order_sweeper


def get_service_container(request: Request) -> ServiceContainer:
    """Get the container built by the application factory."""
    return request.app.state.container


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_user_service(
    container: ServiceContainer = Depends(get_service_container),
) -> UserService:
    """Dependency for user service."""
    return container.user_service


def get_category_service(
    container: ServiceContainer = Depends(get_service_container),
) -> CategoryService:
    """Dependency for category service."""
    return container.category_service


def get_book_service(
    container: ServiceContainer = Depends(get_service_container),
) -> BookService:
    """Dependency for book service."""
    return container.book_service


def get_order_service(
    container: ServiceContainer = Depends(get_service_container),
) -> OrderService:
    """Dependency for order service."""
    return container.order_service


# =============================================================================
# Authentication Dependencies
# =============================================================================

async def get_current_user_id(
    authorization: Optional[str] = Header(None),
    container: ServiceContainer = Depends(get_service_container),
) -> int:
    """
    Resolve the caller from `Authorization: Bearer <token>`.

    Raises:
        UnauthorizedError: Header missing, wrong scheme, or token rejected.
    """
    if not authorization:
        raise UnauthorizedError("missing or invalid authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("missing or invalid authorization header")

    claims = container.token_service.verify_token(token.strip())
    return claims.user_id
