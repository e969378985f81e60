"""
deploy.py - Construct a FundingLedger for a named network

On development chains a fresh AggregatorPriceFeed stands in for the oracle.
On live networks the feed is looked up by its configured address in the
caller-supplied feed registry.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional

from .config import MOCK_DECIMALS, MOCK_INITIAL_ANSWER, NetworkConfig, get_network_config
from .core import OracleUnavailable, PriceFeed, ValueTransfer
from .ledger import FundingLedger
from .price_feed import AggregatorPriceFeed


@dataclass(frozen=True)
class Deployment:
    """Result of deploy_fund_me()."""
    network: NetworkConfig
    ledger: FundingLedger
    price_feed: PriceFeed
    mocked: bool


def deploy_fund_me(
    network: str,
    deployer: str,
    custody: ValueTransfer,
    feeds: Optional[Mapping[str, PriceFeed]] = None,
    verbose: bool = False,
) -> Deployment:
    """
    Deploy a FundingLedger owned by deployer.

    Args:
        network: Network name (see config.NETWORK_CONFIG)
        deployer: Identity that becomes the owner
        custody: Native value transfer primitive
        feeds: Registry of live feeds keyed by address (ignored on development chains)
        verbose: Passed through to the ledger

    Raises:
        UnknownNetwork: If the network has no configuration
        OracleUnavailable: If a live network's feed is not in feeds
    """
    config = get_network_config(network)

    if config.is_development:
        price_feed: PriceFeed = AggregatorPriceFeed(MOCK_DECIMALS, MOCK_INITIAL_ANSWER)
        mocked = True
        if verbose:
            print(f"Local network {config.name} detected! Deploying mock feed...")
    else:
        feeds = feeds or {}
        if config.price_feed_address not in feeds:
            raise OracleUnavailable(
                f"No price feed at {config.price_feed_address} on {config.name}"
            )
        price_feed = feeds[config.price_feed_address]
        mocked = False

    ledger = FundingLedger(deployer, price_feed, custody, verbose=verbose)
    if verbose:
        print(f"✓ Deployed FundingLedger on {config.name} (owner={deployer})")
    return Deployment(config, ledger, price_feed, mocked)
