"""
Order Service

Checkout, payment and order history.

Lifecycle:
    PENDING -> PAID        (payment by the owner)
    PENDING -> CANCELLED   (expiration sweep)

PAID and CANCELLED are terminal. Every transition is a conditional update
on the expected prior status, so a payment and a sweep racing on the same
order cannot both win.

Pricing:
    Each line stores the book price at checkout. The order total is the sum
    of quantity x unit price, computed once and never recomputed.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from bookstore.exceptions import (
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    OrderStatusError,
    ValidationError,
)
from bookstore.storage import (
    BookOrder,
    BookRepository,
    Database,
    Order,
    OrderRepository,
    OrderStatus,
)


MAX_QUANTITY_PER_ORDER = 5
MAX_QUANTITY_PER_LINE = 5


@dataclass(frozen=True)
class LineItem:
    """One (book, quantity) pair requested at checkout."""

    book_id: int
    quantity: int


class OrderService:
    """
    Creates, pays and lists orders.

    Usage:
        service = OrderService(database, OrderRepository(), BookRepository())
        order = await service.create_order(user_id, [LineItem(book_id=1, quantity=2)])
        order = await service.pay_order(order.id, user_id)
    """

    def __init__(
        self,
        database: Database,
        order_repository: OrderRepository,
        book_repository: BookRepository,
    ):
        self.database = database
        self.orders = order_repository
        self.books = book_repository

    # =========================================================================
    # Checkout
    # =========================================================================

    def _validate_items(self, items: Sequence[LineItem]) -> None:
        if not items:
            raise ValidationError(errors={"items": "order must contain at least one item"})

        seen = set()
        for item in items:
            if item.quantity < 1 or item.quantity > MAX_QUANTITY_PER_LINE:
                raise ValidationError(
                    errors={"quantity": f"quantity must be between 1 and {MAX_QUANTITY_PER_LINE}"},
                )
            if item.book_id in seen:
                raise ValidationError(errors={"items": f"book {item.book_id} is listed more than once"})
            seen.add(item.book_id)

        total_quantity = sum(item.quantity for item in items)
        if total_quantity > MAX_QUANTITY_PER_ORDER:
            raise ValidationError(
                errors={"items": f"You can order maximum {MAX_QUANTITY_PER_ORDER} books per transaction"},
            )

    async def create_order(self, user_id: int, items: Sequence[LineItem]) -> Order:
        """
        Price and persist a new pending order.

        All lines and the order are written in one transaction; a missing
        book aborts the whole checkout.

        Raises:
            ValidationError: Empty/oversized request or a missing book.
            InfrastructureError: The write failed and was rolled back.
        """
        self._validate_items(items)

        try:
            async with self.database.transaction() as session:
                lines = []
                total_price = Decimal("0")

                for item in items:
                    book = await self.books.find_by_id(session, item.book_id)
                    if book is None:
                        raise ValidationError(errors={"book": f"book not found: {item.book_id}"})

                    lines.append(BookOrder(
                        book=book,
                        quantity=item.quantity,
                        unit_price=book.price,
                    ))
                    total_price += Decimal(item.quantity) * book.price

                order = Order(
                    user_id=user_id,
                    total_price=total_price,
                    status=OrderStatus.PENDING,
                    lines=lines,
                )
                await self.orders.create(session, order)
                order_id = order.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to create order for user {user_id}: {e}")
            raise InfrastructureError("failed to create order") from e

        logger.info(f"Created order {order_id} for user {user_id}: total={total_price}")
        return await self.get_order(order_id)

    # =========================================================================
    # Payment
    # =========================================================================

    def _check_payable(self, order: Order) -> None:
        if order.status == OrderStatus.PAID:
            raise OrderStatusError(
                "order has been paid",
                code="ORDER_ALREADY_PAID",
                detail="order is already paid",
            )
        if order.status == OrderStatus.CANCELLED:
            raise OrderStatusError(
                "order has been cancelled",
                code="ORDER_CANCELLED",
                detail="cancelled orders cannot be paid",
            )
        if order.status != OrderStatus.PENDING:
            raise OrderStatusError(
                "order is not pending",
                code="ORDER_NOT_PENDING",
                detail="only pending orders can be paid",
            )

    async def pay_order(self, order_id: int, user_id: int) -> Order:
        """
        Mark a pending order as paid.

        Raises:
            NotFoundError: Order missing, or it left PENDING between the
                read and the conditional update.
            ForbiddenError: Order belongs to another user.
            OrderStatusError: Order already paid or cancelled.
        """
        try:
            async with self.database.transaction() as session:
                order = await self.orders.find_by_id(session, order_id)
                if order is None:
                    raise NotFoundError("order", order_id)

                if order.user_id != user_id:
                    raise ForbiddenError("you are not allowed to pay this order")

                self._check_payable(order)

                updated = await self.orders.update_status(
                    session,
                    order_id,
                    status=OrderStatus.PAID,
                    expected=OrderStatus.PENDING,
                )
                if updated == 0:
                    raise NotFoundError(
                        "order",
                        order_id,
                        message=f"order not found or no longer pending: {order_id}",
                    )
        except SQLAlchemyError as e:
            logger.error(f"Failed to pay order {order_id}: {e}")
            raise InfrastructureError("failed to update order status") from e

        logger.info(f"Order {order_id} paid by user {user_id}")
        return await self.get_order(order_id)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_order(self, order_id: int) -> Order:
        try:
            async with self.database.session() as session:
                order = await self.orders.find_by_id(session, order_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch order {order_id}: {e}")
            raise InfrastructureError("failed to fetch order") from e

        if order is None:
            raise NotFoundError("order", order_id)
        return order

    async def list_orders_by_user(self, user_id: int) -> Sequence[Order]:
        """Orders of `user_id`, newest first. Empty list when none."""
        try:
            async with self.database.session() as session:
                return await self.orders.find_by_user_id(session, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch orders for user {user_id}: {e}")
            raise InfrastructureError("failed to fetch orders") from e
