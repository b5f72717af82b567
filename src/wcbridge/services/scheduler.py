"""Recurring order scheduler.

Each order runs as its own asyncio task that sleeps for the order interval
and then fires one transfer. A firing looks the order and its session up
again by id, so a cancel or a disconnect is observed on the next tick.

Firings have no caller: their failures are logged on the ``wcbridge.orders``
logger, counted on the order record and handed to an optional failure
listener. They are never raised.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from wcbridge.registry.orders import OrderRecord, OrderRegistry
from wcbridge.registry.sessions import SessionRegistry
from wcbridge.services.dispatcher import TransactionDispatcher

logger = logging.getLogger(__name__)
background_logger = logging.getLogger("wcbridge.orders")

DEFAULT_INTERVAL_SECONDS = 12.0

Sleep = Callable[[float], Awaitable[None]]
FailureListener = Callable[[OrderRecord, Exception], None]


class OrderFiringError(Exception):
    """A background firing could not dispatch its transfer."""


class RecurringOrderScheduler:
    """Creates, fires and cancels recurring orders."""

    def __init__(
        self,
        orders: OrderRegistry,
        sessions: SessionRegistry,
        dispatcher: TransactionDispatcher,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        one_order_per_session: bool = False,
        sleep: Sleep = asyncio.sleep,
        on_failure: Optional[FailureListener] = None,
    ):
        self.orders = orders
        self.sessions = sessions
        self.dispatcher = dispatcher
        self.interval = interval
        self.one_order_per_session = one_order_per_session
        self._sleep = sleep
        self._on_failure = on_failure

    def create_order(self, session_id: str, to: str, value: str) -> OrderRecord:
        """Start a recurring transfer for a session.

        With one_order_per_session, earlier orders of the session are
        cancelled before the new one is installed.
        """
        if self.one_order_per_session:
            for previous in self.orders.cancel_where(session_id):
                logger.info(
                    f"Order {previous.order_id} replaced by a new order for session {session_id}"
                )

        record = OrderRecord(
            order_id=str(uuid.uuid4()),
            session_id=session_id,
            to=to,
            value=value,
        )
        record.handle = asyncio.create_task(
            self._run(record.order_id), name=f"order-{record.order_id}"
        )
        self.orders.install(record)

        logger.info(
            f"Creating order {record.order_id} for session {session_id} "
            f"(every {self.interval}s, value {value})"
        )
        return record

    def cancel_order(self, order_id: str) -> OrderRecord:
        """Cancel an order.

        Raises:
            OrderNotFoundError: If the order id is unknown
        """
        record = self.orders.cancel(order_id)
        logger.info(f"Cancelled order {order_id}")
        return record

    def cancel_session_orders(self, session_id: str) -> int:
        cancelled = self.orders.cancel_where(session_id)
        if cancelled:
            logger.info(f"Cancelled {len(cancelled)} orders of session {session_id}")
        return len(cancelled)

    def cancel_all(self) -> int:
        cancelled = self.orders.clear()
        if cancelled:
            logger.info(f"Cancelled all {len(cancelled)} orders")
        return len(cancelled)

    async def _run(self, order_id: str) -> None:
        while True:
            await self._sleep(self.interval)
            if not await self.fire(order_id):
                return

    async def fire(self, order_id: str) -> bool:
        """Fire one transfer for an order.

        Returns:
            False if the order is no longer registered (the loop should stop)
        """
        record = self.orders.find(order_id)
        if record is None:
            background_logger.info(f"Order {order_id} no longer registered, stopping")
            return False

        session = self.sessions.find(record.session_id)
        if session is None:
            self._record_failure(
                record,
                OrderFiringError(
                    f"Cannot send transaction: Session {record.session_id} not found"
                ),
            )
            return True

        try:
            from_address = session.primary_account(self.dispatcher.chain.namespace)
            result = await self.dispatcher.send(session, from_address, record.to, record.value)
        except Exception as e:
            self._record_failure(record, e)
            return True

        record.fires += 1
        record.last_result = result
        record.last_error = None
        record.last_fired_at = datetime.now(timezone.utc)
        background_logger.info(
            f"Transaction sent at {record.last_fired_at.isoformat()} "
            f"for order {order_id}: {result}"
        )
        return True

    def _record_failure(self, record: OrderRecord, error: Exception) -> None:
        record.failures += 1
        record.last_error = str(error)
        record.last_fired_at = datetime.now(timezone.utc)
        background_logger.warning(f"Order {record.order_id} firing failed: {error}")

        if self._on_failure is not None:
            try:
                self._on_failure(record, error)
            except Exception:
                background_logger.exception("Order failure listener raised")
