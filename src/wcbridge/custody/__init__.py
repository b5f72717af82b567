"""Custody platform clients (web3 connection management)."""

from wcbridge.custody.base import ConnectionKind, CustodyClient
from wcbridge.custody.factory import create_custody_client

__all__ = [
    "ConnectionKind",
    "CustodyClient",
    "create_custody_client",
]
