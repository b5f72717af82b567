"""Tests for pairing and custody clients."""

import hashlib
import json

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from wcbridge.chains import account_address, get_chain, required_namespaces
from wcbridge.custody import ConnectionKind, create_custody_client
from wcbridge.custody.dryrun import DryRunCustodyClient
from wcbridge.custody.fireblocks import FireblocksCustodyClient
from wcbridge.errors import ClientNotInitializedError, CustodyError, PairingError
from wcbridge.pairing import create_pairing_client
from wcbridge.pairing.dryrun import DryRunPairingClient
from wcbridge.pairing.sidecar import SidecarPairingClient
from wcbridge.services.dispatcher import build_transfer

from helpers import RECIPIENT, make_settings

GOERLI = get_chain("goerli")
# Well-known development key, never funded
DEV_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture(scope="module")
def rsa_key():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    return key, pem


class TestDryRunPairingClient:
    """Tests for the in-process simulated wallet."""

    @pytest.fixture
    async def client(self):
        client = DryRunPairingClient(GOERLI, private_key=DEV_KEY)
        await client.init()
        return client

    @pytest.mark.asyncio
    async def test_requires_init(self):
        client = DryRunPairingClient(GOERLI)

        with pytest.raises(ClientNotInitializedError, match="SignClient not initialized"):
            await client.connect(required_namespaces(GOERLI))

    @pytest.mark.asyncio
    async def test_session_grants_configured_chain(self, client):
        proposal = await client.connect(required_namespaces(GOERLI))
        session = await proposal.approval()

        assert proposal.uri.startswith("wc:")
        assert "relay-protocol=irn" in proposal.uri
        assert session.namespaces["eip155"].accounts == [f"eip155:5:{client.address}"]
        assert session.primary_account() == client.address

    @pytest.mark.asyncio
    async def test_send_transaction_returns_hash(self, client):
        session = await (await client.connect(required_namespaces(GOERLI))).approval()
        seen = []
        client.on("session_request", lambda event, payload: seen.append(payload))
        tx = build_transfer(client.address, RECIPIENT, "0x1")

        first = await client.request(session.topic, "eip155:5", "eth_sendTransaction", [tx])
        second = await client.request(session.topic, "eip155:5", "eth_sendTransaction", [tx])

        assert first.startswith("0x") and len(first) == 66
        # Nonce advances per session
        assert first != second
        assert seen[0]["method"] == "eth_sendTransaction"

    @pytest.mark.asyncio
    async def test_unknown_topic(self, client):
        with pytest.raises(PairingError, match="session topic doesn't exist"):
            await client.request("nope", "eip155:5", "eth_sendTransaction", [{}])

    @pytest.mark.asyncio
    async def test_unsupported_method(self, client):
        session = await (await client.connect(required_namespaces(GOERLI))).approval()

        with pytest.raises(PairingError, match="Unsupported method"):
            await client.request(session.topic, "eip155:5", "personal_sign", ["0x00"])

    @pytest.mark.asyncio
    async def test_disconnect_emits_session_delete(self, client):
        session = await (await client.connect(required_namespaces(GOERLI))).approval()
        deleted = []
        client.on("session_delete", lambda event, payload: deleted.append(payload))

        await client.disconnect(session.topic, 6000, "User disconnected")

        assert deleted == [{"topic": session.topic, "code": 6000, "message": "User disconnected"}]
        with pytest.raises(PairingError):
            await client.disconnect(session.topic, 6000, "User disconnected")

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_break_request(self, client):
        session = await (await client.connect(required_namespaces(GOERLI))).approval()

        def boom(event, payload):
            raise RuntimeError("handler failed")

        client.on("session_request", boom)
        tx = build_transfer(client.address, RECIPIENT, "0x1")

        result = await client.request(session.topic, "eip155:5", "eth_sendTransaction", [tx])
        assert result.startswith("0x")


class TestSidecarPairingClient:
    """Tests for the sign-client sidecar over a mock transport."""

    SESSION = {
        "topic": "abc123",
        "namespaces": {
            "eip155": {
                "accounts": ["eip155:5:0x" + "11" * 20],
                "methods": ["eth_sendTransaction"],
                "events": ["connect", "disconnect"],
            }
        },
        "expiry": 1700000000,
    }

    def make_client(self, routes: dict) -> tuple[SidecarPairingClient, list]:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content) if request.content else None
            seen.append((request.method, request.url.path, body))
            status, payload = routes[request.url.path]
            return httpx.Response(status, json=payload)

        client = SidecarPairingClient(
            "http://sidecar.test/",
            project_id="proj-1",
            transport=httpx.MockTransport(handler),
        )
        return client, seen

    @pytest.mark.asyncio
    async def test_full_flow(self):
        client, seen = self.make_client(
            {
                "/init": (200, {"ready": True}),
                "/connect": (200, {"uri": "wc:abc@2?relay-protocol=irn", "pairingId": "p1"}),
                "/pairings/p1/approval": (200, {"session": self.SESSION}),
                "/request": (200, {"result": "0xHASH"}),
                "/disconnect": (200, {}),
            }
        )

        await client.init()
        proposal = await client.connect(required_namespaces(GOERLI))
        session = await proposal.approval()
        result = await client.request(session.topic, "eip155:5", "eth_sendTransaction", [{"to": RECIPIENT}])
        await client.disconnect(session.topic, 6000, "User disconnected")

        assert client.ready
        assert proposal.uri == "wc:abc@2?relay-protocol=irn"
        assert session.topic == "abc123"
        assert account_address(session.namespaces["eip155"].accounts[0]) == "0x" + "11" * 20
        assert result == "0xHASH"
        assert seen[0] == ("POST", "/init", {"projectId": "proj-1"})
        assert seen[3] == (
            "POST",
            "/request",
            {
                "topic": "abc123",
                "chainId": "eip155:5",
                "request": {"method": "eth_sendTransaction", "params": [{"to": RECIPIENT}]},
            },
        )
        assert seen[4][2] == {"topic": "abc123", "reason": {"code": 6000, "message": "User disconnected"}}

    @pytest.mark.asyncio
    async def test_error_message_is_surfaced(self):
        client, _ = self.make_client(
            {
                "/init": (200, {"ready": True}),
                "/request": (500, {"error": "User rejected the request"}),
            }
        )
        await client.init()

        with pytest.raises(PairingError, match="User rejected the request"):
            await client.request("abc123", "eip155:5", "eth_sendTransaction", [{}])

    @pytest.mark.asyncio
    async def test_init_not_ready(self):
        client, _ = self.make_client({"/init": (200, {"ready": False})})

        with pytest.raises(PairingError, match="not ready"):
            await client.init()
        assert not client.ready

    @pytest.mark.asyncio
    async def test_approval_without_session(self):
        client, _ = self.make_client(
            {
                "/init": (200, {"ready": True}),
                "/connect": (200, {"uri": "wc:abc@2", "pairingId": "p1"}),
                "/pairings/p1/approval": (200, {}),
            }
        )
        await client.init()
        proposal = await client.connect(required_namespaces(GOERLI))

        with pytest.raises(PairingError, match="no session"):
            await proposal.approval()

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        client = SidecarPairingClient("http://sidecar.test", transport=httpx.MockTransport(handler))

        with pytest.raises(PairingError, match="unreachable"):
            await client.init()


class TestFireblocksCustodyClient:
    """Tests for Fireblocks request signing and connection calls."""

    @pytest.mark.asyncio
    async def test_create_connection_signs_request(self, rsa_key):
        key, pem = rsa_key
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"id": "conn-42", "sessionMetadata": {}})

        client = FireblocksCustodyClient(
            api_key="key-1",
            private_key=pem,
            base_url="https://sandbox.test",
            transport=httpx.MockTransport(handler),
        )
        payload = {"feeLevel": "MEDIUM", "vaultAccountId": 0, "chainIds": ["ETH"], "uri": "wc:abc@2"}

        connection_id = await client.create_connection(ConnectionKind.WALLET_CONNECT, payload)

        assert connection_id == "conn-42"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/connections/wc"
        assert request.headers["X-API-Key"] == "key-1"
        assert json.loads(request.content) == payload

        token = request.headers["Authorization"].removeprefix("Bearer ")
        claims = jwt.decode(token, key.public_key(), algorithms=["RS256"])
        assert claims["sub"] == "key-1"
        assert claims["uri"] == "/v1/connections/wc"
        assert claims["bodyHash"] == hashlib.sha256(request.content).hexdigest()
        assert claims["exp"] - claims["iat"] <= 30

    @pytest.mark.asyncio
    async def test_submit_and_remove(self, rsa_key):
        _, pem = rsa_key
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path, request.content))
            return httpx.Response(200, json={})

        client = FireblocksCustodyClient("key-1", pem, transport=httpx.MockTransport(handler))

        await client.submit_connection(ConnectionKind.WALLET_CONNECT, "conn-42", True)
        await client.remove_connection(ConnectionKind.WALLET_CONNECT, "conn-42")

        assert seen[0][:2] == ("PUT", "/v1/connections/wc/conn-42")
        assert json.loads(seen[0][2]) == {"approve": True}
        assert seen[1] == ("DELETE", "/v1/connections/wc/conn-42", b"")

    @pytest.mark.asyncio
    async def test_error_carries_message_and_status(self, rsa_key):
        _, pem = rsa_key

        def handler(request):
            return httpx.Response(400, json={"message": "Invalid vault account", "code": 1003})

        client = FireblocksCustodyClient("key-1", pem, transport=httpx.MockTransport(handler))

        with pytest.raises(CustodyError, match="Invalid vault account") as exc_info:
            await client.create_connection(ConnectionKind.WALLET_CONNECT, {"uri": "wc:abc@2"})
        assert exc_info.value.status == 400

    def test_requires_credentials(self):
        with pytest.raises(CustodyError):
            FireblocksCustodyClient(api_key="", private_key="")

    def test_missing_key_file(self, tmp_path):
        with pytest.raises(CustodyError, match="Cannot read"):
            FireblocksCustodyClient.from_key_file("key-1", str(tmp_path / "missing.pem"))

    def test_factory_reads_key_file(self, rsa_key, tmp_path):
        _, pem = rsa_key
        path = tmp_path / "fireblocks_secret.key"
        path.write_text(pem)

        client = create_custody_client(
            make_settings(custody_backend="fireblocks", api_key="key-1", private_key_path=str(path))
        )

        assert isinstance(client, FireblocksCustodyClient)
        assert client.api_key == "key-1"


class TestDryRunCustodyClient:
    """Tests for simulated custody connections."""

    @pytest.mark.asyncio
    async def test_lifecycle(self):
        client = DryRunCustodyClient()

        connection_id = await client.create_connection(ConnectionKind.WALLET_CONNECT, {"uri": "wc:abc@2"})
        await client.submit_connection(ConnectionKind.WALLET_CONNECT, connection_id, True)

        assert client.connections[connection_id].approved
        await client.remove_connection(ConnectionKind.WALLET_CONNECT, connection_id)
        assert connection_id not in client.connections

    @pytest.mark.asyncio
    async def test_reject_removes_connection(self):
        client = DryRunCustodyClient()
        connection_id = await client.create_connection(ConnectionKind.WALLET_CONNECT, {"uri": "wc:abc@2"})

        await client.submit_connection(ConnectionKind.WALLET_CONNECT, connection_id, False)

        assert connection_id not in client.connections

    @pytest.mark.asyncio
    async def test_errors(self):
        client = DryRunCustodyClient()

        with pytest.raises(CustodyError, match="uri is required"):
            await client.create_connection(ConnectionKind.WALLET_CONNECT, {})
        with pytest.raises(CustodyError, match="not found"):
            await client.remove_connection(ConnectionKind.WALLET_CONNECT, "missing")


class TestFactories:
    def test_default_backends_are_dryrun(self):
        settings = make_settings()

        assert isinstance(create_pairing_client(settings), DryRunPairingClient)
        assert isinstance(create_custody_client(settings), DryRunCustodyClient)

    def test_sidecar_backend(self):
        client = create_pairing_client(
            make_settings(pairing_backend="sidecar", pairing_sidecar_url="http://localhost:3100")
        )

        assert isinstance(client, SidecarPairingClient)
        assert client.base_url == "http://localhost:3100"
