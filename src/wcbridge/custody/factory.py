"""Custody client factory."""

from wcbridge.config import Settings
from wcbridge.custody.base import CustodyClient
from wcbridge.custody.dryrun import DryRunCustodyClient
from wcbridge.custody.fireblocks import FireblocksCustodyClient
from wcbridge.errors import CustodyError


def create_custody_client(settings: Settings) -> CustodyClient:
    """Create the custody client selected by CUSTODY_BACKEND.

    - dryrun (default): simulated connections
    - fireblocks: Fireblocks REST API (needs API_KEY and PRIVATE_KEY_PATH)
    """
    backend = settings.custody_backend.lower()

    if backend == "fireblocks":
        if not settings.private_key_path:
            raise CustodyError("PRIVATE_KEY_PATH is required for the fireblocks backend")
        return FireblocksCustodyClient.from_key_file(
            api_key=settings.api_key,
            private_key_path=settings.private_key_path,
            base_url=settings.fireblocks_url,
        )

    return DryRunCustodyClient()
