"""Base interface for wallet pairing clients.

Pairing flow:
1. connect() proposes a session and returns a pairing uri plus an approval
2. The wallet (here: the custody connection) joins the pairing
3. Awaiting the approval yields the settled session
4. request() sends JSON-RPC signing requests over the session topic
5. disconnect() tears the session down
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from wcbridge.chains import account_address
from wcbridge.errors import AccountNotFoundError, ClientNotInitializedError

logger = logging.getLogger(__name__)

SESSION_EVENTS = ("session_update", "session_request", "session_delete")

# Reason sent to the wallet on an explicit disconnect
USER_DISCONNECTED_CODE = 6000
USER_DISCONNECTED_MESSAGE = "User disconnected"


class SessionNamespace(BaseModel):
    """Accounts, methods and events granted for one namespace."""

    accounts: list[str] = Field(default_factory=list, description="CAIP-10 account ids")
    methods: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)


class PairingSession(BaseModel):
    """A settled pairing session."""

    topic: str = Field(..., description="Session topic used for every request")
    namespaces: dict[str, SessionNamespace] = Field(default_factory=dict)
    expiry: Optional[int] = Field(None, description="Unix expiry timestamp")
    peer: Optional[dict] = Field(None, description="Peer wallet metadata")

    def primary_account(self, namespace: str = "eip155") -> str:
        """Address of the first account granted in a namespace."""
        ns = self.namespaces.get(namespace)
        if ns is None or not ns.accounts:
            raise AccountNotFoundError(namespace)
        return account_address(ns.accounts[0])


@dataclass
class PairingProposal:
    """Result of connect(): the uri to hand to a wallet and its approval."""

    uri: str
    approval: Callable[[], Awaitable[PairingSession]]


EventHandler = Callable[[str, Any], None]


class PairingClient(ABC):
    """Abstract base class for pairing clients."""

    def __init__(self):
        self._ready = False
        self._handlers: dict[str, list[EventHandler]] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Client name."""
        raise NotImplementedError()

    @property
    def ready(self) -> bool:
        return self._ready

    async def init(self) -> None:
        """Initialize the client. Calls made before this raise."""
        self._ready = True
        logger.info(f"Pairing client {self.name} initialized")

    async def close(self) -> None:
        """Release resources held by the client."""
        self._ready = False

    def _require_ready(self) -> None:
        if not self._ready:
            raise ClientNotInitializedError("SignClient not initialized")

    def on(self, event: str, handler: EventHandler) -> None:
        """Subscribe to a session event."""
        self._handlers.setdefault(event, []).append(handler)

    def _emit(self, event: str, payload: Any) -> None:
        for handler in self._handlers.get(event, []):
            try:
                handler(event, payload)
            except Exception:
                logger.exception(f"Handler for {event} failed")

    @abstractmethod
    async def connect(self, required_namespaces: dict) -> PairingProposal:
        """Propose a session.

        Args:
            required_namespaces: Namespaces, chains, methods and events requested

        Returns:
            PairingProposal with the pairing uri and an approval awaitable
        """
        raise NotImplementedError()

    @abstractmethod
    async def request(self, topic: str, chain_id: str, method: str, params: list) -> Any:
        """Send a JSON-RPC request to the wallet over a session.

        Returns:
            Whatever the wallet returns, verbatim
        """
        raise NotImplementedError()

    @abstractmethod
    async def disconnect(self, topic: str, code: int, message: str) -> None:
        """Disconnect a session."""
        raise NotImplementedError()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(ready={self._ready})"
