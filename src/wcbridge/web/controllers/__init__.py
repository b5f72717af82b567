"""HTTP controllers for the bridge API."""

from wcbridge.web.controllers.orders import router as orders_router
from wcbridge.web.controllers.sessions import router as sessions_router

__all__ = [
    "orders_router",
    "sessions_router",
]
