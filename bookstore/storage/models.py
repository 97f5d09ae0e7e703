"""
Database models for the bookstore.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OrderStatus(str, Enum):
    """Order lifecycle states. PAID and CANCELLED are terminal."""
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class User(Base):
    """Registered customer."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Category(Base):
    """Named grouping of books."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Book(Base):
    """Catalog item."""
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    year = Column(Integer)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    image = Column(Text)

    category = relationship(Category, lazy="selectin")

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_books_price_positive"),
    )


class Order(Base):
    """A purchase and its lifecycle state."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SAEnum(OrderStatus, name="order_status"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    lines = relationship(
        "BookOrder",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookOrder.book_id",
    )


class BookOrder(Base):
    """
    One line of an order.

    `unit_price` is the book price captured when the order was placed, so
    later catalog price changes never alter historical orders.
    """
    __tablename__ = "book_orders"

    book_id = Column(Integer, ForeignKey("books.id"), primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), primary_key=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    book = relationship(Book, lazy="selectin")
    order = relationship(Order, back_populates="lines")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_book_orders_quantity_positive"),
    )

    @property
    def sub_total(self):
        return self.unit_price * self.quantity
