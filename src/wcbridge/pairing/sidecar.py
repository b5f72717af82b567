"""Pairing client backed by a WalletConnect sign-client sidecar.

The sidecar is a small local process running the WalletConnect sign client
and exposing it over HTTP:

    POST /init         {projectId}          -> {"ready": true}
    POST /connect      {requiredNamespaces} -> {"uri", "pairingId"}
    POST /pairings/{pairingId}/approval   -> {"session"}  (blocks until settled)
    POST /request      {topic, chainId, request: {method, params}} -> {"result"}
    POST /disconnect   {topic, reason: {code, message}} -> {}

Errors are returned as non-2xx responses with an ``error`` field.
"""

import logging
from typing import Any, Optional

import httpx

from wcbridge.errors import PairingError
from wcbridge.pairing.base import PairingClient, PairingProposal, PairingSession

logger = logging.getLogger(__name__)


class SidecarPairingClient(PairingClient):
    """HTTP client for the sign-client sidecar."""

    def __init__(
        self,
        base_url: str,
        project_id: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize sidecar client.

        Args:
            base_url: Sidecar base URL
            project_id: WalletConnect project id forwarded on init
            transport: Optional httpx transport override
        """
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self._transport = transport

    @property
    def name(self) -> str:
        return "sidecar"

    def _client(self, timeout: Optional[float]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=timeout,
        )

    async def _call(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        timeout: Optional[float] = 15.0,
    ) -> dict:
        try:
            async with self._client(timeout) as client:
                response = await client.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise PairingError(f"Pairing sidecar unreachable: {e}")

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise PairingError(message or f"Pairing sidecar returned {response.status_code}")

        return data

    async def init(self) -> None:
        data = await self._call(
            "POST", "/init", {"projectId": self.project_id}, timeout=10.0
        )
        if not data.get("ready"):
            raise PairingError("Pairing sidecar is not ready")
        await super().init()

    async def connect(self, required_namespaces: dict) -> PairingProposal:
        self._require_ready()

        data = await self._call(
            "POST", "/connect", {"requiredNamespaces": required_namespaces}
        )
        uri = data.get("uri")
        pairing_id = data.get("pairingId")
        if not uri or not pairing_id:
            raise PairingError("Pairing sidecar returned no uri")

        async def approval() -> PairingSession:
            # Waits for the wallet with no deadline
            result = await self._call(
                "POST", f"/pairings/{pairing_id}/approval", timeout=None
            )
            if not result.get("session"):
                raise PairingError("Pairing sidecar returned no session")
            session = PairingSession.model_validate(result["session"])
            self._emit("session_update", session.model_dump())
            return session

        return PairingProposal(uri=uri, approval=approval)

    async def request(self, topic: str, chain_id: str, method: str, params: list) -> Any:
        self._require_ready()

        self._emit("session_request", {"topic": topic, "method": method, "chainId": chain_id})
        data = await self._call(
            "POST",
            "/request",
            {
                "topic": topic,
                "chainId": chain_id,
                "request": {"method": method, "params": params},
            },
            timeout=None,
        )
        return data.get("result")

    async def disconnect(self, topic: str, code: int, message: str) -> None:
        self._require_ready()

        await self._call(
            "POST",
            "/disconnect",
            {"topic": topic, "reason": {"code": code, "message": message}},
        )
        self._emit("session_delete", {"topic": topic, "code": code, "message": message})
