"""Session and pending-approval registries.

Both registries live for the lifetime of the process and are never
persisted. Their operations never suspend, so each one is atomic with
respect to other coroutines.
"""

import logging
from typing import Awaitable, Callable, Optional

from wcbridge.errors import ApprovalNotFoundError, SessionNotFoundError
from wcbridge.pairing.base import PairingSession

logger = logging.getLogger(__name__)

Approval = Callable[[], Awaitable[PairingSession]]


class SessionRegistry:
    """Settled pairing sessions keyed by session id."""

    def __init__(self):
        self._sessions: dict[str, PairingSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def put(self, session_id: str, session: PairingSession) -> None:
        """Store a session, replacing any previous one under the same id."""
        self._sessions[session_id] = session

    def get(self, session_id: str) -> PairingSession:
        """Get a session.

        Raises:
            SessionNotFoundError: If no session is stored under the id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def find(self, session_id: str) -> Optional[PairingSession]:
        """Get a session or None."""
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> None:
        """Remove a session. Removing an absent id is a no-op."""
        self._sessions.pop(session_id, None)

    def first(self) -> Optional[tuple[str, PairingSession]]:
        """The oldest stored (id, session) pair, if any."""
        for item in self._sessions.items():
            return item
        return None


class PendingApprovalRegistry:
    """Unresolved pairing approvals keyed by session id."""

    def __init__(self, sessions: SessionRegistry):
        self._sessions = sessions
        self._pending: dict[str, Approval] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._pending

    def register(self, session_id: str, approval: Approval) -> None:
        self._pending[session_id] = approval

    def discard(self, session_id: str) -> None:
        self._pending.pop(session_id, None)

    async def resolve(self, session_id: str) -> PairingSession:
        """Wait for an approval and store the resulting session.

        The entry is taken out before awaiting, so a second (or concurrent)
        resolve of the same id fails instead of waiting on the same approval.

        Raises:
            ApprovalNotFoundError: If the id is unknown or already resolved
        """
        approval = self._pending.pop(session_id, None)
        if approval is None:
            raise ApprovalNotFoundError(session_id)

        logger.info(f"Waiting for approval of session {session_id}")
        session = await approval()
        self._sessions.put(session_id, session)
        logger.info(f"Session {session_id} approved (topic {session.topic[:10]}...)")
        return session
