"""Error taxonomy for the bridge.

Every error carries the HTTP status the boundary reports it with. The wire
format is the same for all of them: ``{"error": message}``.
"""

import json


class BridgeError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500


# Not-Found

class NotFoundError(BridgeError):
    """A session, approval, order or account id is not registered."""

    status_code = 400


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class ApprovalNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__(f"Approval {session_id} not found")
        self.session_id = session_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class AccountNotFoundError(NotFoundError):
    def __init__(self, namespace: str):
        super().__init__(f"No {namespace} account in session")
        self.namespace = namespace


# Validation

class MissingParamsError(BridgeError):
    """Required body or query params are missing."""

    status_code = 400

    def __init__(self, payload: dict):
        super().__init__(f"Missing body params {json.dumps(payload)}")
        self.payload = payload


# Not-Initialized

class ClientNotInitializedError(BridgeError):
    """The pairing client has not finished initializing."""

    status_code = 500


# Upstream

class UpstreamError(BridgeError):
    """A collaborator call was rejected or failed."""

    status_code = 500


class PairingError(UpstreamError):
    """The pairing (WalletConnect) layer rejected or failed a call."""


class CustodyError(UpstreamError):
    """The custody API rejected or failed a call."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


def require_params(payload: dict, *names: str) -> None:
    """Raise MissingParamsError unless every named param is present and non-empty."""
    if any(not payload.get(name) for name in names):
        raise MissingParamsError({k: v for k, v in payload.items() if v is not None})
