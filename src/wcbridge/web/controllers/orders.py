"""Recurring order API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from wcbridge.errors import require_params
from wcbridge.registry.orders import OrderRecord
from wcbridge.services.bridge import BridgeService
from wcbridge.web.contracts.bridge import (
    CancelOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderInfo,
    OrderListResponse,
    SuccessResponse,
)
from wcbridge.web.deps import get_bridge_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    request: CreateOrderRequest,
    service: BridgeService = Depends(get_bridge_service),
) -> CreateOrderResponse:
    """Start a transfer that repeats every order interval.

    The session id is not checked here; each firing resolves it again.
    """
    require_params(request.model_dump(), "id", "value", "to")
    record = service.create_order(request.id, to=request.to, value=request.value)
    return CreateOrderResponse(order_id=record.order_id)


@router.post("/cancel-order", response_model=SuccessResponse)
async def cancel_order(
    request: CancelOrderRequest,
    service: BridgeService = Depends(get_bridge_service),
) -> SuccessResponse:
    """Cancel a recurring order."""
    require_params(request.model_dump(by_alias=True), "id", "orderId")
    service.cancel_order(request.order_id)
    return SuccessResponse()


def _order_info(record: OrderRecord) -> OrderInfo:
    return OrderInfo(
        order_id=record.order_id,
        session_id=record.session_id,
        to=record.to,
        value=record.value,
        active=record.active,
        fires=record.fires,
        failures=record.failures,
        last_result=record.last_result,
        last_error=record.last_error,
        created_at=record.created_at,
        last_fired_at=record.last_fired_at,
    )


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    id: Optional[str] = None,
    service: BridgeService = Depends(get_bridge_service),
) -> OrderListResponse:
    """List recurring orders, optionally for one session.

    Includes the outcome of the latest background firing of each order.
    """
    orders = [_order_info(r) for r in service.list_orders(id)]
    return OrderListResponse(count=len(orders), orders=orders)
