"""
Expiration sweep for unpaid orders.

A background asyncio task wakes up on a fixed interval and cancels every
PENDING order older than the grace window in one conditional bulk update.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from bookstore.storage import Database, OrderRepository, utcnow


class OrderExpirationSweeper:
    """
    Periodic job cancelling stale pending orders.

    Usage:
        sweeper = OrderExpirationSweeper(database, OrderRepository())
        sweeper.start()       # inside a running event loop
        ...
        await sweeper.stop()
    """

    def __init__(
        self,
        database: Database,
        order_repository: OrderRepository,
        expiry: timedelta = timedelta(minutes=15),
        interval_seconds: float = 120.0,
    ):
        self.database = database
        self.orders = order_repository
        self.expiry = expiry
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Cancel pending orders created before `now - expiry`.

        Args:
            now: Reference time (naive UTC). Defaults to the current time.

        Returns:
            Number of orders cancelled.
        """
        cutoff = (now or utcnow()) - self.expiry

        async with self.database.transaction() as session:
            cancelled = await self.orders.cancel_expired(session, cutoff)

        if cancelled:
            logger.info(f"Cancelled {cancelled} expired order(s) created before {cutoff.isoformat()}")
        return cancelled

    async def run_once(self) -> int:
        """One scheduled run. Failures are logged and wait for the next tick."""
        logger.debug("Order expiration sweep started")
        try:
            cancelled = await self.sweep()
        except Exception as e:
            logger.error(f"Failed to cancel expired orders: {e}")
            return 0
        logger.debug("Order expiration sweep done")
        return cancelled

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="order-expiration-sweeper")
        logger.info(
            f"Order expiration sweeper started "
            f"(every {self.interval_seconds}s, expiry {self.expiry})"
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Order expiration sweeper stopped")
