"""
Pytest configuration and fixtures for Bookstore API tests.
"""

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bookstore.api.dependencies import ServiceContainer
from bookstore.api.main import create_app
from bookstore.config import Settings
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


TEST_PASSWORD = "Secret123!"


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file, sweeper off."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bookstore-test.db'}",
        database_echo=False,
        jwt_secret_key="test-secret",
        jwt_issuer="bookstore-test",
        jwt_expire_minutes=5,
        order_sweeper_enabled=False,
        environment="development",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    """Database with all tables created."""
    db = Database.from_settings(settings)
    await db.create_tables()

    yield db

    await db.dispose()


@pytest.fixture
def order_repository() -> OrderRepository:
    return OrderRepository()


@pytest.fixture
def book_repository() -> BookRepository:
    return BookRepository()


@pytest.fixture
def category_repository() -> CategoryRepository:
    return CategoryRepository()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService(
        secret_key=settings.jwt_secret_key,
        issuer=settings.jwt_issuer,
        expire_minutes=settings.jwt_expire_minutes,
    )


@pytest.fixture
def user_service(database, token_service) -> UserService:
    return UserService(database, UserRepository(), token_service)


@pytest.fixture
def category_service(database, category_repository, book_repository) -> CategoryService:
    return CategoryService(database, category_repository, book_repository)


@pytest.fixture
def book_service(database, book_repository, category_repository) -> BookService:
    return BookService(database, book_repository, category_repository)


@pytest.fixture
def order_service(database, order_repository, book_repository) -> OrderService:
    return OrderService(database, order_repository, book_repository)


@pytest.fixture
def sweeper(database, order_repository) -> OrderExpirationSweeper:
    return OrderExpirationSweeper(database, order_repository, interval_seconds=0.05)


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def customer(user_service):
    """A registered user."""
    return await user_service.register("Alice", "alice@example.com", TEST_PASSWORD)


@pytest_asyncio.fixture
async def other_customer(user_service):
    """A second registered user."""
    return await user_service.register("Bob", "bob@example.com", TEST_PASSWORD)


@pytest_asyncio.fixture
async def category(category_service):
    return await category_service.create("Science Fiction")


@pytest_asyncio.fixture
async def books(book_service, category):
    """Two books priced 50.00 and 20.00."""
    dune = await book_service.create(
        title="Dune",
        author="Frank Herbert",
        price=Decimal("50.00"),
        category_id=category.id,
        image="aW1hZ2U=",
        year=1965,
    )
    foundation = await book_service.create(
        title="Foundation",
        author="Isaac Asimov",
        price=Decimal("20.00"),
        category_id=category.id,
        image="aW1hZ2U=",
        year=1951,
    )
    return dune, foundation


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(settings, database):
    """
    FastAPI application wired to the test database.

    ASGITransport does not run the lifespan, so the schema comes from the
    `database` fixture.
    """
    application = create_app(settings)
    application.state.container = ServiceContainer(settings, database=database)
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: AsyncClient, name: str, email: str) -> dict:
    """Register a user over HTTP and return its Authorization header."""
    response = await client.post(
        "/api/register",
        json={"name": name, "email": email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201, response.text

    response = await client.post(
        "/api/login",
        json={"email": email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(client) -> dict:
    return await register_and_login(client, "Alice", "alice@example.com")


@pytest_asyncio.fixture
async def other_auth_headers(client) -> dict:
    return await register_and_login(client, "Bob", "bob@example.com")
