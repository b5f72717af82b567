"""Request and response contracts for the web layer."""

from wcbridge.web.contracts.bridge import (
    AccountResponse,
    ApproveResponse,
    CancelOrderRequest,
    ConnectResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderInfo,
    OrderListResponse,
    SendRequest,
    SendResponse,
    SessionRequest,
    SuccessResponse,
)

__all__ = [
    # Session contracts
    "ConnectResponse",
    "ApproveResponse",
    "SessionRequest",
    "SuccessResponse",
    "AccountResponse",
    # Transfer contracts
    "SendRequest",
    "SendResponse",
    # Order contracts
    "CreateOrderRequest",
    "CreateOrderResponse",
    "CancelOrderRequest",
    "OrderInfo",
    "OrderListResponse",
]
