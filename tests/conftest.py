"""
conftest.py - Shared pytest fixtures for funding ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Custody with funded accounts
- Mock price feed at 2000 reference units per native unit
- FundingLedgers owned by the deployer (empty, single funder, many funders)
"""

import pytest

from fundme import AggregatorPriceFeed, MOCK_DECIMALS, MOCK_INITIAL_ANSWER

from tests.fakes import (
    DEPLOYER, FUNDERS, ATTACKER, SEND_VALUE,
    make_custody, make_ledger,
)


@pytest.fixture
def custody():
    """Custody with the deployer, five funders and an attacker."""
    return make_custody([DEPLOYER] + FUNDERS + [ATTACKER])


@pytest.fixture
def price_feed():
    """Mock aggregator quoting 2000 reference units per native unit."""
    return AggregatorPriceFeed(MOCK_DECIMALS, MOCK_INITIAL_ANSWER)


@pytest.fixture
def fund_me(custody, price_feed):
    """FundingLedger owned by the deployer."""
    return make_ledger(custody, price_feed)


@pytest.fixture
def funded_ledger(fund_me):
    """Ledger after the deployer funded SEND_VALUE."""
    fund_me.fund(DEPLOYER, SEND_VALUE)
    return fund_me


@pytest.fixture
def multi_funded_ledger(fund_me):
    """Ledger after the deployer and five accounts each funded SEND_VALUE."""
    fund_me.fund(DEPLOYER, SEND_VALUE)
    for account in FUNDERS:
        fund_me.fund(account, SEND_VALUE)
    return fund_me
