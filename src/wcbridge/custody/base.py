"""Base interface for custody connection clients.

The custody platform joins a wallet pairing as the signing wallet:
1. create_connection() hands it the pairing uri
2. submit_connection() approves (or rejects) the pending connection
3. remove_connection() tears the connection down
"""

from abc import ABC, abstractmethod
from enum import Enum


class ConnectionKind(str, Enum):
    """Type of web3 connection held by the custody platform."""

    WALLET_CONNECT = "WalletConnect"

    @property
    def path(self) -> str:
        return {ConnectionKind.WALLET_CONNECT: "wc"}[self]


class CustodyClient(ABC):
    """Abstract base class for custody connection clients."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Client name."""
        raise NotImplementedError()

    @abstractmethod
    async def create_connection(self, kind: ConnectionKind, payload: dict) -> str:
        """Create a web3 connection.

        Args:
            kind: Connection type
            payload: feeLevel, vaultAccountId, chainIds and uri

        Returns:
            Connection id assigned by the custody platform
        """
        raise NotImplementedError()

    @abstractmethod
    async def submit_connection(self, kind: ConnectionKind, connection_id: str, approve: bool) -> None:
        """Approve or reject a pending connection."""
        raise NotImplementedError()

    @abstractmethod
    async def remove_connection(self, kind: ConnectionKind, connection_id: str) -> None:
        """Remove a connection."""
        raise NotImplementedError()

    async def close(self) -> None:
        """Release resources held by the client."""
