"""Transaction dispatcher.

Builds fixed-shape native transfers and sends them to the wallet over the
pairing session. Nothing is signed or broadcast here; the wallet (the
custody platform) does both and returns its result.
"""

import logging
from typing import Any

from wcbridge.chains import ChainConfig
from wcbridge.pairing.base import PairingClient, PairingSession

logger = logging.getLogger(__name__)

SEND_TRANSACTION_METHOD = "eth_sendTransaction"

GAS_PRICE = "0x029104e28c"  # 11 gwei
GAS_LIMIT = "0x5208"  # 21000, plain transfer
EMPTY_DATA = "0x"


def build_transfer(from_address: str, to_address: str, value: str) -> dict:
    """Build the eth_sendTransaction params entry for a native transfer.

    Args:
        from_address: Sender (the session account)
        to_address: Recipient
        value: Amount in wei, hex encoded
    """
    return {
        "from": from_address,
        "to": to_address,
        "data": EMPTY_DATA,
        "gasPrice": GAS_PRICE,
        "gasLimit": GAS_LIMIT,
        "value": value,
    }


class TransactionDispatcher:
    """Sends transfer requests over pairing sessions."""

    def __init__(self, pairing: PairingClient, chain: ChainConfig):
        self.pairing = pairing
        self.chain = chain

    async def send(
        self,
        session: PairingSession,
        from_address: str,
        to_address: str,
        value: str,
    ) -> Any:
        """Request a transfer from the wallet.

        Errors from the pairing channel propagate unchanged.

        Returns:
            The wallet's result, verbatim (normally a transaction hash)
        """
        tx = build_transfer(from_address, to_address, value)
        logger.info(
            "Requesting transfer of %s wei %s -> %s on %s",
            value,
            from_address[:10] + "...",
            to_address[:10] + "...",
            self.chain.caip2,
        )
        return await self.pairing.request(
            topic=session.topic,
            chain_id=self.chain.caip2,
            method=SEND_TRANSACTION_METHOD,
            params=[tx],
        )
