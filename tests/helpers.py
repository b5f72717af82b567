"""Fake collaborators and simulated time shared by the tests."""

import asyncio
from typing import Any, Optional

from wcbridge.config import Settings
from wcbridge.custody.base import ConnectionKind, CustodyClient
from wcbridge.pairing.base import PairingClient, PairingProposal, PairingSession, SessionNamespace

SESSION_ADDRESS = "0x" + "ab" * 20
RECIPIENT = "0x" + "cd" * 20


def make_session(topic: str = "topic-1", address: str = SESSION_ADDRESS) -> PairingSession:
    """A settled goerli session for an address."""
    return PairingSession(
        topic=topic,
        namespaces={
            "eip155": SessionNamespace(
                accounts=[f"eip155:5:{address}"],
                methods=["eth_sendTransaction"],
                events=["connect", "disconnect"],
            )
        },
    )


class FakePairingClient(PairingClient):
    """Pairing client that records calls and returns canned results."""

    def __init__(self, result: Any = "0xHASH"):
        super().__init__()
        self.result = result
        self.error: Optional[Exception] = None
        self.requests: list[dict] = []
        self.disconnects: list[dict] = []
        self.proposals = 0

    @property
    def name(self) -> str:
        return "fake"

    async def connect(self, required_namespaces: dict) -> PairingProposal:
        self._require_ready()
        self.proposals += 1
        n = self.proposals

        async def approval() -> PairingSession:
            return make_session(topic=f"topic-{n}")

        return PairingProposal(uri=f"wc:pairing-{n}@2?relay-protocol=irn", approval=approval)

    async def request(self, topic: str, chain_id: str, method: str, params: list) -> Any:
        self._require_ready()
        self.requests.append(
            {"topic": topic, "chain_id": chain_id, "method": method, "params": params}
        )
        if self.error is not None:
            raise self.error
        return self.result

    async def disconnect(self, topic: str, code: int, message: str) -> None:
        self._require_ready()
        self.disconnects.append({"topic": topic, "code": code, "message": message})


class FakeCustodyClient(CustodyClient):
    """Custody client that records calls."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.error: Optional[Exception] = None
        self.remove_error: Optional[Exception] = None
        self._count = 0

    @property
    def name(self) -> str:
        return "fake"

    async def create_connection(self, kind: ConnectionKind, payload: dict) -> str:
        if self.error is not None:
            raise self.error
        self._count += 1
        self.calls.append(("create", kind, payload))
        return f"conn-{self._count}"

    async def submit_connection(self, kind: ConnectionKind, connection_id: str, approve: bool) -> None:
        self.calls.append(("submit", kind, connection_id, approve))

    async def remove_connection(self, kind: ConnectionKind, connection_id: str) -> None:
        self.calls.append(("remove", kind, connection_id))
        if self.remove_error is not None:
            raise self.remove_error


async def settle() -> None:
    """Let ready tasks run until they block."""
    for _ in range(20):
        await asyncio.sleep(0)


class FakeClock:
    """Simulated time for the order scheduler's sleep."""

    def __init__(self):
        self.now = 0.0
        self._waiters: list[tuple[float, asyncio.Future]] = []

    async def sleep(self, delay: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self.now + delay, future))
        await future

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking sleepers in deadline order."""
        target = self.now + seconds
        while True:
            await settle()
            due = sorted(
                (w for w in self._waiters if w[0] <= target), key=lambda w: w[0]
            )
            if not due:
                break
            deadline, future = due[0]
            self._waiters.remove(due[0])
            self.now = deadline
            if not future.done():
                future.set_result(None)
        self.now = target
        await settle()


def make_settings(**overrides) -> Settings:
    values = {"static_dir": "", "debug": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)
