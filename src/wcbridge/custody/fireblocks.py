"""Fireblocks custody client.

Talks to the Fireblocks REST API directly. Every request is authenticated
with the API key header and a short-lived RS256 JWT signed with the API
secret key:

    sub       API key
    uri       request path including query string
    nonce     random, unique per request
    iat/exp   issued-at and expiry (at most 30s apart)
    bodyHash  hex SHA-256 of the exact request body bytes

Reference:
- https://developers.fireblocks.com/reference/signing-a-request-jwt-structure
"""

import hashlib
import json
import logging
import time
import uuid
from pathlib import Path
from typing import Optional

import httpx
import jwt

from wcbridge.custody.base import ConnectionKind, CustodyClient
from wcbridge.errors import CustodyError

logger = logging.getLogger(__name__)

TOKEN_TTL_SECONDS = 30


class FireblocksCustodyClient(CustodyClient):
    """Fireblocks web3 connections client.

    Docs: https://developers.fireblocks.com/reference/post_connections-wc
    """

    def __init__(
        self,
        api_key: str,
        private_key: str,
        base_url: str = "https://api.fireblocks.io",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Fireblocks client.

        Args:
            api_key: Fireblocks API key
            private_key: PEM-encoded API secret key
            base_url: API base URL (sandbox or production)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport override
        """
        if not api_key or not private_key:
            raise CustodyError("Fireblocks API key and private key are required")

        self.api_key = api_key.strip()
        self._private_key = private_key.strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_key_file(cls, api_key: str, private_key_path: str, **kwargs) -> "FireblocksCustodyClient":
        """Create a client reading the secret key from a PEM file."""
        try:
            private_key = Path(private_key_path).read_text(encoding="utf-8")
        except OSError as e:
            raise CustodyError(f"Cannot read Fireblocks private key: {e}")
        return cls(api_key=api_key, private_key=private_key, **kwargs)

    @property
    def name(self) -> str:
        return "fireblocks"

    def sign_token(self, path: str, body: bytes) -> str:
        """Create the JWT authorizing one request."""
        now = int(time.time())
        claims = {
            "uri": path,
            "nonce": str(uuid.uuid4()),
            "iat": now,
            "exp": now + TOKEN_TTL_SECONDS,
            "sub": self.api_key,
            "bodyHash": hashlib.sha256(body).hexdigest(),
        }
        return jwt.encode(claims, self._private_key, algorithm="RS256")

    async def _request(self, method: str, path: str, body: Optional[dict] = None) -> dict:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
        headers = {
            "X-API-Key": self.api_key,
            "Authorization": f"Bearer {self.sign_token(path, content)}",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                response = await client.request(method, path, content=content, headers=headers)
        except httpx.HTTPError as e:
            raise CustodyError(f"Fireblocks request failed: {e}")

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            logger.warning(
                "Fireblocks %s %s failed with %d: %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise CustodyError(
                message or f"Fireblocks returned {response.status_code}",
                status=response.status_code,
            )

        return data

    async def create_connection(self, kind: ConnectionKind, payload: dict) -> str:
        data = await self._request("POST", f"/v1/connections/{kind.path}", payload)
        connection_id = data.get("id")
        if not connection_id:
            raise CustodyError("Fireblocks returned no connection id")
        logger.info(f"Fireblocks {kind.value} connection created: {connection_id}")
        return connection_id

    async def submit_connection(self, kind: ConnectionKind, connection_id: str, approve: bool) -> None:
        await self._request(
            "PUT", f"/v1/connections/{kind.path}/{connection_id}", {"approve": approve}
        )

    async def remove_connection(self, kind: ConnectionKind, connection_id: str) -> None:
        await self._request("DELETE", f"/v1/connections/{kind.path}/{connection_id}")
