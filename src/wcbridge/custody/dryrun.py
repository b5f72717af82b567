"""Dry-run custody client (no real custody platform)."""

import logging
import uuid
from dataclasses import dataclass

from wcbridge.custody.base import ConnectionKind, CustodyClient
from wcbridge.errors import CustodyError

logger = logging.getLogger(__name__)


@dataclass
class SimulatedConnection:
    kind: ConnectionKind
    payload: dict
    approved: bool = False


class DryRunCustodyClient(CustodyClient):
    """Keeps simulated connections in memory."""

    def __init__(self):
        self.connections: dict[str, SimulatedConnection] = {}

    @property
    def name(self) -> str:
        return "dryrun"

    async def create_connection(self, kind: ConnectionKind, payload: dict) -> str:
        if not payload.get("uri"):
            raise CustodyError("uri is required", status=400)

        connection_id = str(uuid.uuid4())
        self.connections[connection_id] = SimulatedConnection(kind=kind, payload=dict(payload))
        logger.info(f"Dry-run {kind.value} connection created: {connection_id}")
        return connection_id

    async def submit_connection(self, kind: ConnectionKind, connection_id: str, approve: bool) -> None:
        connection = self.connections.get(connection_id)
        if connection is None:
            raise CustodyError(f"Connection {connection_id} not found", status=404)

        if approve:
            connection.approved = True
        else:
            del self.connections[connection_id]

    async def remove_connection(self, kind: ConnectionKind, connection_id: str) -> None:
        if self.connections.pop(connection_id, None) is None:
            raise CustodyError(f"Connection {connection_id} not found", status=404)
