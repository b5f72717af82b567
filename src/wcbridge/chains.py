"""Chain identifiers and CAIP-10 account helpers."""

from dataclasses import dataclass, field


@dataclass
class ChainConfig:
    """Configuration for a target chain."""

    name: str
    caip2: str  # namespace:reference, e.g. eip155:5
    methods: list[str] = field(default_factory=lambda: ["eth_sendTransaction"])
    events: list[str] = field(default_factory=lambda: ["connect", "disconnect"])

    @property
    def namespace(self) -> str:
        return self.caip2.split(":", 1)[0]


CHAINS: dict[str, ChainConfig] = {
    "mainnet": ChainConfig(name="Ethereum", caip2="eip155:1"),
    "goerli": ChainConfig(name="Goerli", caip2="eip155:5"),
    "sepolia": ChainConfig(name="Sepolia", caip2="eip155:11155111"),
}


def get_chain(name: str) -> ChainConfig:
    """Look up a chain by name.

    Raises:
        ValueError: If the chain is not supported
    """
    chain = CHAINS.get(name.lower())
    if chain is None:
        raise ValueError(f"Unsupported chain: {name}. Valid chains: {sorted(CHAINS)}")
    return chain


def required_namespaces(chain: ChainConfig) -> dict:
    """Proposal namespaces requested from the wallet for a chain."""
    return {
        chain.namespace: {
            "chains": [chain.caip2],
            "methods": list(chain.methods),
            "events": list(chain.events),
        }
    }


def account_address(account: str) -> str:
    """Extract the address from a CAIP-10 account id.

    ``eip155:5:0xabc`` -> ``0xabc``. The address is whatever follows the last
    colon, so chain references of any length parse the same way.
    """
    parts = account.rsplit(":", 2)
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Invalid CAIP-10 account id: {account}")
    return parts[2]


def format_account(chain: ChainConfig, address: str) -> str:
    """Build a CAIP-10 account id for an address on a chain."""
    return f"{chain.caip2}:{address}"
