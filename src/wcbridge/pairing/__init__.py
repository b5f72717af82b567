"""Wallet pairing clients (WalletConnect sign-client contract)."""

from wcbridge.pairing.base import (
    SESSION_EVENTS,
    USER_DISCONNECTED_CODE,
    USER_DISCONNECTED_MESSAGE,
    PairingClient,
    PairingProposal,
    PairingSession,
    SessionNamespace,
)
from wcbridge.pairing.factory import create_pairing_client

__all__ = [
    "SESSION_EVENTS",
    "USER_DISCONNECTED_CODE",
    "USER_DISCONNECTED_MESSAGE",
    "PairingClient",
    "PairingProposal",
    "PairingSession",
    "SessionNamespace",
    "create_pairing_client",
]
