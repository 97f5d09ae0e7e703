"""
Order Repository

Orders and their lines. Status changes are conditional updates: a row only
moves when it is still in the expected prior state, so concurrent writers
cannot overwrite each other's transitions.
"""

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order, OrderStatus, utcnow
from .repository import Repository


class OrderRepository:
    """Create, read and transition orders."""

    def __init__(self):
        self._crud = Repository(Order)

    async def create(self, session: AsyncSession, order: Order) -> Order:
        """Insert the order together with its lines (cascade)."""
        return await self._crud.create(session, order)

    async def find_by_id(self, session: AsyncSession, order_id: int) -> Optional[Order]:
        """Order with lines and their books loaded."""
        return await self._crud.find_by_id(session, order_id)

    async def find_by_user_id(self, session: AsyncSession, user_id: int) -> Sequence[Order]:
        """All orders of a user, newest first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return (await session.execute(stmt)).scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus,
    ) -> int:
        """
        Move one order from `expected` to `status`.

        Returns:
            Rows affected: 1 on success, 0 if the order is missing or no
            longer in the expected state.
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(status=status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def cancel_expired(self, session: AsyncSession, cutoff: datetime) -> int:
        """
        Cancel every pending order created before `cutoff` in one statement.

        Returns:
            Number of orders cancelled.
        """
        stmt = (
            update(Order)
            .where(Order.status == OrderStatus.PENDING, Order.created_at < cutoff)
            .values(status=OrderStatus.CANCELLED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount
