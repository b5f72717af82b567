"""Bridge services: transfer dispatch, recurring orders and orchestration."""

from wcbridge.services.bridge import BridgeService, ConnectResult
from wcbridge.services.dispatcher import TransactionDispatcher
from wcbridge.services.scheduler import RecurringOrderScheduler

__all__ = [
    "BridgeService",
    "ConnectResult",
    "RecurringOrderScheduler",
    "TransactionDispatcher",
]
