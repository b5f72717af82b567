"""In-memory registries for sessions, pending approvals and orders."""

from wcbridge.registry.orders import OrderRecord, OrderRegistry
from wcbridge.registry.sessions import PendingApprovalRegistry, SessionRegistry

__all__ = [
    "OrderRecord",
    "OrderRegistry",
    "PendingApprovalRegistry",
    "SessionRegistry",
]
