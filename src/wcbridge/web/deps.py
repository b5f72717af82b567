"""FastAPI dependencies for the web layer."""

from fastapi import Request

from wcbridge.runtime import BridgeRuntime
from wcbridge.services.bridge import BridgeService


def get_runtime(request: Request) -> BridgeRuntime:
    """Runtime owned by the application serving the request."""
    return request.app.state.runtime


def get_bridge_service(request: Request) -> BridgeService:
    return get_runtime(request).service
