"""
Background status sweeper.

Every ``interval`` seconds it loads the non-terminal orders of both variants
and advances each one through ``OrderService.advance``. Each order gets its
own session, so one failing order is logged and skipped without aborting the
rest of the sweep.
"""

from typing import Callable, List
from uuid import UUID
import logging

import anyio
from sqlalchemy.orm import Session

from app.clock import SystemClock
from repositories import OrderRepository
from services.order_service import OrderService

logger = logging.getLogger("puttybox.sweeper")


class OrderSweeper:
    """Periodic driver for time-based order transitions"""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        order_service: OrderService,
        clock=None,
        interval: float = 5.0,
    ):
        self.session_factory = session_factory
        self.order_service = order_service
        self.clock = clock or SystemClock()
        self.interval = interval
        self.running = False

    def _active_order_ids(self) -> List[UUID]:
        db = self.session_factory()
        try:
            return [order.order_id for order in OrderRepository(db).list_active()]
        finally:
            db.close()

    def _advance_one(self, order_id: UUID) -> bool:
        db = self.session_factory()
        try:
            order = OrderRepository(db).get_by_id(order_id)
            if order is None:
                return False
            return self.order_service.advance(db, order, self.clock.now())
        finally:
            db.close()

    def sweep_once(self) -> int:
        """
        Run one sweep synchronously.

        Returns:
            Number of orders whose status changed
        """
        try:
            order_ids = self._active_order_ids()
        except Exception as exc:
            logger.error(f"sweep_load_failed error={exc}")
            return 0

        changed = 0
        for order_id in order_ids:
            try:
                if self._advance_one(order_id):
                    changed += 1
            except Exception as exc:
                logger.error(f"sweep_order_failed order_id={order_id} error={exc}")

        if changed:
            logger.info(f"sweep_completed scanned={len(order_ids)} changed={changed}")
        return changed

    async def run(self) -> None:
        """Sweep forever; cancelled with the surrounding task group"""
        self.running = True
        logger.info(f"sweeper_started interval={self.interval}s")
        try:
            while True:
                try:
                    await anyio.to_thread.run_sync(self.sweep_once)
                except Exception:
                    logger.exception("sweep_crashed")
                await anyio.sleep(self.interval)
        finally:
            self.running = False
            logger.info("sweeper_stopped")
