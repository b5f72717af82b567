"""Dry-run pairing client.

Simulates a wallet in-process: proposals settle immediately and
eth_sendTransaction requests are signed locally with eth_account but never
broadcast. Suitable for development and demos without a relay.
"""

import logging
import secrets
import time
from typing import Any, Optional

from eth_account import Account
from eth_utils import to_checksum_address

from wcbridge.chains import ChainConfig, format_account
from wcbridge.errors import PairingError
from wcbridge.pairing.base import PairingClient, PairingProposal, PairingSession, SessionNamespace

logger = logging.getLogger(__name__)

SESSION_TTL = 7 * 24 * 3600


class DryRunPairingClient(PairingClient):
    """Simulated pairing client backed by a local key."""

    def __init__(self, chain: ChainConfig, private_key: Optional[str] = None):
        super().__init__()
        self.chain = chain
        self._account = Account.from_key(private_key) if private_key else Account.create()
        self._sessions: dict[str, PairingSession] = {}
        self._nonces: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "dryrun"

    @property
    def address(self) -> str:
        return self._account.address

    async def connect(self, required_namespaces: dict) -> PairingProposal:
        self._require_ready()

        topic = secrets.token_hex(32)
        uri = f"wc:{secrets.token_hex(32)}@2?relay-protocol=irn&symKey={secrets.token_hex(32)}"

        namespaces = {}
        for ns, spec in required_namespaces.items():
            namespaces[ns] = SessionNamespace(
                accounts=[
                    f"{caip2}:{self._account.address}" for caip2 in spec.get("chains", [])
                ]
                or [format_account(self.chain, self._account.address)],
                methods=list(spec.get("methods", [])),
                events=list(spec.get("events", [])),
            )

        async def approval() -> PairingSession:
            session = PairingSession(
                topic=topic,
                namespaces=namespaces,
                expiry=int(time.time()) + SESSION_TTL,
                peer={"name": "Dry-run wallet"},
            )
            self._sessions[topic] = session
            logger.info(f"Dry-run session settled: {topic[:10]}...")
            return session

        return PairingProposal(uri=uri, approval=approval)

    async def request(self, topic: str, chain_id: str, method: str, params: list) -> Any:
        self._require_ready()

        if topic not in self._sessions:
            raise PairingError(f"No matching key. session topic doesn't exist: {topic}")

        self._emit("session_request", {"topic": topic, "method": method, "chainId": chain_id})

        if method != "eth_sendTransaction":
            raise PairingError(f"Unsupported method: {method}")

        tx = params[0]
        nonce = self._nonces.get(topic, 0)
        try:
            signed = self._account.sign_transaction(
                {
                    "to": to_checksum_address(tx["to"]),
                    "value": int(tx.get("value", "0x0"), 16),
                    "gas": int(tx["gasLimit"], 16),
                    "gasPrice": int(tx["gasPrice"], 16),
                    "data": tx.get("data", "0x"),
                    "nonce": nonce,
                    "chainId": int(chain_id.split(":", 1)[1]),
                }
            )
        except (KeyError, ValueError, TypeError) as e:
            raise PairingError(f"Wallet rejected transaction: {e}")

        self._nonces[topic] = nonce + 1
        return "0x" + bytes(signed.hash).hex()

    async def disconnect(self, topic: str, code: int, message: str) -> None:
        self._require_ready()

        session = self._sessions.pop(topic, None)
        if session is None:
            raise PairingError(f"No matching key. session topic doesn't exist: {topic}")

        self._nonces.pop(topic, None)
        self._emit("session_delete", {"topic": topic, "code": code, "message": message})
