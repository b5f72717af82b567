"""Health check endpoints."""

from fastapi import APIRouter, Depends

from wcbridge.runtime import BridgeRuntime
from wcbridge.web.deps import get_runtime

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "wcbridge"}


@router.get("/health/detailed")
async def detailed_health(runtime: BridgeRuntime = Depends(get_runtime)):
    """Detailed health check with configuration and registry info."""
    return {
        "status": "healthy" if runtime.pairing.ready else "starting",
        "service": "wcbridge",
        "version": "0.1.0",
        "pairing": {"backend": runtime.pairing.name, "ready": runtime.pairing.ready},
        "custody": {"backend": runtime.custody.name},
        "chain": runtime.chain.caip2,
        "chain_name": runtime.chain.name,
        "sessions": len(runtime.sessions),
        "pending_approvals": len(runtime.pending),
        "orders": len(runtime.orders),
        "config": runtime.settings.get_safe_dict(),
    }
