"""Pairing session API endpoints.

Connect a custody-held wallet over WalletConnect, approve the pairing,
disconnect it, look up its account and send one-off transfers from it.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from wcbridge.errors import require_params
from wcbridge.services.bridge import BridgeService
from wcbridge.web.contracts.bridge import (
    AccountResponse,
    ApproveResponse,
    ConnectResponse,
    SendRequest,
    SendResponse,
    SessionRequest,
    SuccessResponse,
)
from wcbridge.web.deps import get_bridge_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


@router.get("/connect", response_model=ConnectResponse, response_model_exclude_none=True)
async def connect(service: BridgeService = Depends(get_bridge_service)) -> ConnectResponse:
    """Propose a pairing and register it with the custody platform.

    Returns:
        ``{id}`` when the approval resolves inline, otherwise
        ``{id, uri[, fbUrl]}`` to be followed by /approve
    """
    result = await service.connect()
    return ConnectResponse(id=result.id, uri=result.uri, approval_url=result.approval_url)


@router.get("/approve", response_model=ApproveResponse, response_model_exclude_none=True)
async def approve(
    id: Optional[str] = None,
    service: BridgeService = Depends(get_bridge_service),
) -> ApproveResponse:
    """Wait for a deferred pairing approval and store the session."""
    require_params({"id": id}, "id")
    session = await service.approve(id)
    return ApproveResponse(session=session)


@router.post("/disconnect", response_model=SuccessResponse)
async def disconnect(
    request: SessionRequest,
    service: BridgeService = Depends(get_bridge_service),
) -> SuccessResponse:
    """Disconnect a session and remove its custody connection."""
    require_params(request.model_dump(), "id")
    await service.disconnect(request.id)
    return SuccessResponse()


@router.post("/send", response_model=SendResponse)
async def send(
    request: SendRequest,
    service: BridgeService = Depends(get_bridge_service),
) -> SendResponse:
    """Send the default amount from a session account.

    The wallet's result is returned verbatim as ``txHash``.
    """
    require_params(request.model_dump(by_alias=True), "id")
    result = await service.send(request.id, to=request.to, from_address=request.from_address)
    logger.info(f"Transaction sent for session {request.id}: {result}")
    return SendResponse(tx_hash=result)


@router.get("/get-account", response_model=AccountResponse)
async def get_account(
    id: Optional[str] = None,
    service: BridgeService = Depends(get_bridge_service),
) -> AccountResponse:
    """Get the account address of a session."""
    require_params({"id": id}, "id")
    return AccountResponse(account=service.get_account(id))
