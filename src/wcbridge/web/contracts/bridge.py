"""Request and response contracts for the bridge endpoints.

Wire names are camelCase (``txHash``, ``orderId``) as the web UI expects;
Python attributes are snake_case. Request fields are all optional so that
missing params are reported as a 400 naming the payload rather than a
schema error.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from wcbridge.pairing.base import PairingSession


class ConnectResponse(BaseModel):
    """Response after proposing a pairing."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Session id (custody connection id)")
    uri: Optional[str] = Field(None, description="Pairing uri (deferred approval only)")
    approval_url: Optional[str] = Field(
        None,
        alias="fbUrl",
        description="Custody console URL for manual approval",
    )


class ApproveResponse(BaseModel):
    session: PairingSession


class SessionRequest(BaseModel):
    """Body carrying only a session id."""

    id: Optional[str] = Field(None, description="Session id")


class SuccessResponse(BaseModel):
    success: bool = True


class SendRequest(BaseModel):
    """Request to send the default amount from a session account."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Session id")
    to: Optional[str] = Field(None, description="Recipient (defaults to DEFAULT_RECIPIENT)")
    from_address: Optional[str] = Field(
        None, alias="from", description="Sender (defaults to the session account)"
    )


class SendResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: Any = Field(..., alias="txHash", description="Wallet result, verbatim")


class AccountResponse(BaseModel):
    account: str = Field(..., description="Session account address")


class CreateOrderRequest(BaseModel):
    """Request to start a recurring transfer."""

    id: Optional[str] = Field(None, description="Session id")
    value: Optional[str] = Field(None, description="Amount in wei, hex encoded")
    to: Optional[str] = Field(None, description="Recipient")


class CreateOrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")


class CancelOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Session id")
    order_id: Optional[str] = Field(None, alias="orderId", description="Order to cancel")


class OrderInfo(BaseModel):
    """Recurring order state, including background firing results."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    session_id: str = Field(..., alias="id")
    to: str
    value: str
    active: bool
    fires: int = 0
    failures: int = 0
    last_result: Any = Field(None, alias="lastResult")
    last_error: Optional[str] = Field(None, alias="lastError")
    created_at: datetime = Field(..., alias="createdAt")
    last_fired_at: Optional[datetime] = Field(None, alias="lastFiredAt")


class OrderListResponse(BaseModel):
    count: int
    orders: list[OrderInfo]
