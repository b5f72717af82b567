"""Recurring order registry."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from wcbridge.errors import OrderNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class OrderRecord:
    """A recurring transfer bound to a session id.

    The session id is resolved again on every firing; it is never checked
    when the order is created.
    """

    order_id: str
    session_id: str
    to: str
    value: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    handle: Optional[asyncio.Task] = None

    # Firing statistics
    fires: int = 0
    failures: int = 0
    last_result: Any = None
    last_error: Optional[str] = None
    last_fired_at: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self.handle is not None and not self.handle.done()

    def cancel(self) -> None:
        if self.handle is not None and not self.handle.done():
            self.handle.cancel()


class OrderRegistry:
    """Orders keyed by order id, each owning at most one live task handle."""

    def __init__(self):
        self._orders: dict[str, OrderRecord] = {}

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._orders

    def install(self, record: OrderRecord) -> None:
        """Register an order, cancelling any previous handle under the same id."""
        previous = self._orders.get(record.order_id)
        if previous is not None and previous is not record:
            previous.cancel()
        self._orders[record.order_id] = record

    def get(self, order_id: str) -> OrderRecord:
        """Get an order.

        Raises:
            OrderNotFoundError: If the order id is unknown
        """
        record = self._orders.get(order_id)
        if record is None:
            raise OrderNotFoundError(order_id)
        return record

    def find(self, order_id: str) -> Optional[OrderRecord]:
        return self._orders.get(order_id)

    def cancel(self, order_id: str) -> OrderRecord:
        """Cancel and remove an order.

        Raises:
            OrderNotFoundError: If the order id is unknown
        """
        record = self._orders.pop(order_id, None)
        if record is None:
            raise OrderNotFoundError(order_id)
        record.cancel()
        return record

    def cancel_where(self, session_id: str) -> list[OrderRecord]:
        """Cancel and remove every order of a session."""
        cancelled = [r for r in self._orders.values() if r.session_id == session_id]
        for record in cancelled:
            del self._orders[record.order_id]
            record.cancel()
        return cancelled

    def clear(self) -> list[OrderRecord]:
        """Cancel and remove every order."""
        cancelled = list(self._orders.values())
        self._orders.clear()
        for record in cancelled:
            record.cancel()
        return cancelled

    def for_session(self, session_id: str) -> list[OrderRecord]:
        return [r for r in self._orders.values() if r.session_id == session_id]

    def all(self) -> list[OrderRecord]:
        return list(self._orders.values())
