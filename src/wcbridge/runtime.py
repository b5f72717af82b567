"""Runtime container.

Builds the registries, collaborators and services once per application
instance. Nothing here is module-global, so every app (and every test) gets
fresh registries.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from wcbridge.chains import ChainConfig, get_chain
from wcbridge.config import Settings
from wcbridge.custody import CustodyClient, create_custody_client
from wcbridge.pairing import SESSION_EVENTS, PairingClient, create_pairing_client
from wcbridge.registry import OrderRegistry, PendingApprovalRegistry, SessionRegistry
from wcbridge.services import BridgeService, RecurringOrderScheduler, TransactionDispatcher
from wcbridge.services.scheduler import FailureListener, Sleep

logger = logging.getLogger(__name__)


@dataclass
class BridgeRuntime:
    """Everything one bridge instance owns."""

    settings: Settings
    chain: ChainConfig
    pairing: PairingClient
    custody: CustodyClient
    sessions: SessionRegistry
    pending: PendingApprovalRegistry
    orders: OrderRegistry
    dispatcher: TransactionDispatcher
    scheduler: RecurringOrderScheduler
    service: BridgeService

    async def start(self) -> None:
        """Initialize the pairing client and subscribe event loggers."""
        for event in SESSION_EVENTS:
            self.pairing.on(event, _log_event)
        await self.pairing.init()

    async def stop(self) -> None:
        await self.service.shutdown()


def _log_event(event: str, payload: Any) -> None:
    logger.info(f"{event}: {payload}")


def build_runtime(
    settings: Settings,
    pairing: Optional[PairingClient] = None,
    custody: Optional[CustodyClient] = None,
    sleep: Sleep = asyncio.sleep,
    on_order_failure: Optional[FailureListener] = None,
) -> BridgeRuntime:
    """Assemble a runtime, creating collaborators from settings unless given."""
    chain = get_chain(settings.chain_id)
    pairing = pairing or create_pairing_client(settings)
    custody = custody or create_custody_client(settings)

    sessions = SessionRegistry()
    pending = PendingApprovalRegistry(sessions)
    orders = OrderRegistry()
    dispatcher = TransactionDispatcher(pairing, chain)
    scheduler = RecurringOrderScheduler(
        orders=orders,
        sessions=sessions,
        dispatcher=dispatcher,
        interval=settings.order_interval_seconds,
        one_order_per_session=settings.one_order_per_session,
        sleep=sleep,
        on_failure=on_order_failure,
    )
    service = BridgeService(
        settings=settings,
        chain=chain,
        pairing=pairing,
        custody=custody,
        sessions=sessions,
        pending=pending,
        orders=orders,
        dispatcher=dispatcher,
        scheduler=scheduler,
    )

    return BridgeRuntime(
        settings=settings,
        chain=chain,
        pairing=pairing,
        custody=custody,
        sessions=sessions,
        pending=pending,
        orders=orders,
        dispatcher=dispatcher,
        scheduler=scheduler,
        service=service,
    )
