"""Pairing client factory."""

from wcbridge.chains import get_chain
from wcbridge.config import Settings
from wcbridge.pairing.base import PairingClient
from wcbridge.pairing.dryrun import DryRunPairingClient
from wcbridge.pairing.sidecar import SidecarPairingClient


def create_pairing_client(settings: Settings) -> PairingClient:
    """Create the pairing client selected by PAIRING_BACKEND.

    - dryrun (default): in-process simulated wallet
    - sidecar: WalletConnect sign-client sidecar over HTTP
    """
    backend = settings.pairing_backend.lower()

    if backend == "sidecar":
        return SidecarPairingClient(
            base_url=settings.pairing_sidecar_url,
            project_id=settings.project_id,
        )

    return DryRunPairingClient(
        chain=get_chain(settings.chain_id),
        private_key=settings.dryrun_wallet_private_key,
    )
