"""
config.py - Network configuration for deployments

Module-level constants describing where a FundingLedger can be deployed
and which price feed it reads on each network. Development chains get a
locally created mock feed instead of a configured address.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from .core import UnknownNetwork


# Networks that run against a mock price feed.
DEVELOPMENT_CHAINS = ("hardhat", "localhost")

# Mock feed parameters: 2000.00000000 reference units per native unit.
MOCK_DECIMALS = 8
MOCK_INITIAL_ANSWER = 200_000_000_000


@dataclass(frozen=True, slots=True)
class NetworkConfig:
    """
    Deployment settings for one network.

    Attributes:
        name: Network name (e.g. "goerli").
        chain_id: Numeric chain identifier.
        price_feed_address: Address of the NATIVE/USD feed, None on development chains.
        block_confirmations: Confirmations to wait for after deployment.
    """
    name: str
    chain_id: int
    price_feed_address: Optional[str] = None
    block_confirmations: int = 1

    @property
    def is_development(self) -> bool:
        return self.name in DEVELOPMENT_CHAINS


NETWORK_CONFIG: Dict[int, NetworkConfig] = {
    5: NetworkConfig(
        name="goerli",
        chain_id=5,
        price_feed_address="0xD4a33860578De61DBAbDc8BFdb98FD742fA7028e",
        block_confirmations=6,
    ),
    11155111: NetworkConfig(
        name="sepolia",
        chain_id=11155111,
        price_feed_address="0x694AA1769357215DE4FAC081bf1f309aDC325306",
        block_confirmations=6,
    ),
    31337: NetworkConfig(name="hardhat", chain_id=31337),
}


def get_network_config(name: str) -> NetworkConfig:
    """
    Look up a network by name.

    "localhost" shares the hardhat chain id but is reported under its own name.

    Raises:
        UnknownNetwork: If no configuration exists for name
    """
    if name == "localhost":
        return NetworkConfig(name="localhost", chain_id=31337)
    for config in NETWORK_CONFIG.values():
        if config.name == name:
            return config
    raise UnknownNetwork(f"No configuration for network {name!r}")
