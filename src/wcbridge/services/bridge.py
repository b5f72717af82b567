"""Bridge service: pairing sessions, custody connections and transfers.

Ties the pairing client, the custody client, the registries, the dispatcher
and the order scheduler together. Controllers call this service; it never
touches HTTP concerns.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from wcbridge.chains import ChainConfig, required_namespaces
from wcbridge.config import ApprovalMode, Settings
from wcbridge.custody.base import ConnectionKind, CustodyClient
from wcbridge.errors import MissingParamsError
from wcbridge.pairing.base import (
    USER_DISCONNECTED_CODE,
    USER_DISCONNECTED_MESSAGE,
    PairingClient,
    PairingSession,
)
from wcbridge.registry.orders import OrderRecord, OrderRegistry
from wcbridge.registry.sessions import PendingApprovalRegistry, SessionRegistry
from wcbridge.services.dispatcher import TransactionDispatcher
from wcbridge.services.scheduler import RecurringOrderScheduler

logger = logging.getLogger(__name__)


@dataclass
class ConnectResult:
    """Outcome of a connect call."""

    id: str
    uri: Optional[str] = None
    approval_url: Optional[str] = None


class BridgeService:
    """Operations behind the bridge HTTP API."""

    def __init__(
        self,
        settings: Settings,
        chain: ChainConfig,
        pairing: PairingClient,
        custody: CustodyClient,
        sessions: SessionRegistry,
        pending: PendingApprovalRegistry,
        orders: OrderRegistry,
        dispatcher: TransactionDispatcher,
        scheduler: RecurringOrderScheduler,
    ):
        self.settings = settings
        self.chain = chain
        self.pairing = pairing
        self.custody = custody
        self.sessions = sessions
        self.pending = pending
        self.orders = orders
        self.dispatcher = dispatcher
        self.scheduler = scheduler

    def _custody_payload(self, uri: str) -> dict:
        return {
            "feeLevel": self.settings.fee_level,
            "vaultAccountId": self.settings.vault_account_id,
            "chainIds": self.settings.custody_chains,
            "uri": uri,
        }

    def _approval_url(self, connection_id: str) -> Optional[str]:
        template = self.settings.custody_approval_url
        if self.settings.custody_auto_approve or not template:
            return None
        return template.format(id=connection_id)

    async def connect(self) -> ConnectResult:
        """Propose a pairing and hand its uri to the custody platform.

        The custody connection id becomes the session id. In inline mode the
        call waits for the approval and stores the session; in deferred mode
        the approval is parked until approve() is called.
        """
        proposal = await self.pairing.connect(required_namespaces(self.chain))

        connection_id = await self.custody.create_connection(
            ConnectionKind.WALLET_CONNECT, self._custody_payload(proposal.uri)
        )
        if self.settings.custody_auto_approve:
            await self.custody.submit_connection(
                ConnectionKind.WALLET_CONNECT, connection_id, True
            )
        logger.info(f"Custody connection {connection_id} created")

        if self.settings.approval_mode == ApprovalMode.INLINE:
            session = await proposal.approval()
            self.sessions.put(connection_id, session)
            logger.info(f"Session {connection_id} connected")
            return ConnectResult(id=connection_id)

        self.pending.register(connection_id, proposal.approval)
        return ConnectResult(
            id=connection_id,
            uri=proposal.uri,
            approval_url=self._approval_url(connection_id),
        )

    async def approve(self, session_id: str) -> PairingSession:
        """Resolve a parked approval into a stored session."""
        return await self.pending.resolve(session_id)

    async def disconnect(self, session_id: str) -> None:
        """Disconnect a session, remove its custody connection and its orders.

        An id still waiting for approval is abandoned instead: its pending
        entry is dropped and its custody connection removed.
        """
        if session_id in self.pending and session_id not in self.sessions:
            self.pending.discard(session_id)
            await self.custody.remove_connection(ConnectionKind.WALLET_CONNECT, session_id)
            logger.info(f"Pending session {session_id} abandoned")
            return

        session = self.sessions.get(session_id)

        await self.pairing.disconnect(
            topic=session.topic,
            code=USER_DISCONNECTED_CODE,
            message=USER_DISCONNECTED_MESSAGE,
        )
        # Topic is dead past this point
        try:
            await self.custody.remove_connection(ConnectionKind.WALLET_CONNECT, session_id)
        finally:
            self.sessions.remove(session_id)
            self.pending.discard(session_id)
            if self.settings.clear_all_orders_on_disconnect:
                self.scheduler.cancel_all()
            else:
                self.scheduler.cancel_session_orders(session_id)

        logger.info(f"Session {session_id} disconnected")

    async def send(
        self,
        session_id: str,
        to: Optional[str] = None,
        from_address: Optional[str] = None,
    ) -> Any:
        """Send the fixed default amount from a session account."""
        to = to or self.settings.default_recipient
        if not to:
            payload = {"id": session_id, "from": from_address}
            raise MissingParamsError({k: v for k, v in payload.items() if v})

        session = self.sessions.get(session_id)
        sender = from_address or session.primary_account(self.chain.namespace)
        return await self.dispatcher.send(session, sender, to, self.settings.default_send_amount)

    def get_account(self, session_id: str) -> str:
        session = self.sessions.get(session_id)
        return session.primary_account(self.chain.namespace)

    def create_order(self, session_id: str, to: str, value: str) -> OrderRecord:
        return self.scheduler.create_order(session_id, to, value)

    def cancel_order(self, order_id: str) -> OrderRecord:
        return self.scheduler.cancel_order(order_id)

    def list_orders(self, session_id: Optional[str] = None) -> list[OrderRecord]:
        if session_id:
            return self.orders.for_session(session_id)
        return self.orders.all()

    async def shutdown(self) -> None:
        """Cancel every order and close the collaborators."""
        self.scheduler.cancel_all()
        await self.pairing.close()
        await self.custody.close()
