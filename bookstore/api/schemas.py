"""
API Schemas for the Bookstore

Pydantic models for request validation and response serialization:
- Response envelope
- User/auth models
- Category and book models
- Order models

Design Decisions:
1. One envelope: every endpoint answers with WebResponse, None fields dropped
2. Separate Request/Response: inputs never reuse ORM-shaped output models
3. Money is Decimal in storage and float on the wire
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from bookstore.storage import Book, BookOrder, Category, Order, User
from bookstore.utils import validate_password

T = TypeVar("T")


# =============================================================================
# Envelope
# =============================================================================

class WebResponse(BaseModel, Generic[T]):
    """Standard response wrapper. Routes serialize it with exclude_none."""

    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[dict[str, str]] = None
    page: Optional[int] = None
    size: Optional[int] = None
    total_items: Optional[int] = None
    total_pages: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# User Schemas
# =============================================================================

class RegisterRequest(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., max_length=255)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("email must be at most 100 characters")
        return v

    @field_validator("password")
    @classmethod
    def check_password_policy(cls, v: str) -> str:
        return validate_password(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Alice",
                "email": "alice@example.com",
                "password": "Secret123!",
            }
        }
    )


class LoginRequest(BaseModel):
    """Credentials exchanged for a token."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseModel):
    """Public view of a user."""

    id: int
    name: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, created_at=user.created_at)


class AuthResponse(BaseModel):
    """Issued token with its expiry and owner."""

    token: str
    expires_at: datetime
    user: UserResponse


# =============================================================================
# Category Schemas
# =============================================================================

class CategoryRequest(BaseModel):
    """Category create/rename request."""

    name: str = Field(..., min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def from_category(cls, category: Category) -> "CategoryResponse":
        return cls(id=category.id, name=category.name)


# =============================================================================
# Book Schemas
# =============================================================================

class BookResponse(BaseModel):
    """Book response model."""

    id: int
    title: str
    author: str
    price: float
    year: Optional[int] = None
    category_id: int
    category: Optional[CategoryResponse] = None
    image: Optional[str] = None

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            price=float(book.price),
            year=book.year,
            category_id=book.category_id,
            category=CategoryResponse.from_category(book.category) if book.category else None,
            image=book.image,
        )


class BookStatsResponse(BaseModel):
    total_books: int


class BookPriceStatsResponse(BaseModel):
    max_price: float
    min_price: float
    avg_price: float


# =============================================================================
# Order Schemas
# =============================================================================

class OrderItemInput(BaseModel):
    """One requested line."""

    book_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1, le=5)


class CreateOrderRequest(BaseModel):
    """Checkout request."""

    items: list[OrderItemInput] = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [
                    {"book_id": 1, "quantity": 2},
                    {"book_id": 3, "quantity": 1},
                ]
            }
        }
    )


class OrderItemResponse(BaseModel):
    """Order line priced at checkout."""

    book_id: int
    title: str
    price: float
    quantity: int
    sub_total: float

    @classmethod
    def from_line(cls, line: BookOrder) -> "OrderItemResponse":
        return cls(
            book_id=line.book_id,
            title=line.book.title if line.book else "",
            price=float(line.unit_price),
            quantity=line.quantity,
            sub_total=float(line.sub_total),
        )


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total_price: float
    status: str
    created_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            total_price=float(order.total_price),
            status=order.status.value,
            created_at=order.created_at,
            items=[OrderItemResponse.from_line(line) for line in order.lines],
        )
