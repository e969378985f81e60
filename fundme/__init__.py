"""
fundme - Minimal Value-Custody Funding Ledger

Accepts native-unit deposits valued through a price feed, enforces a minimum
contribution, and lets a single owner withdraw the pooled balance.

Usage:
    from fundme import Custody, FundingLedger, StaticPriceFeed

    custody = Custody(test_mode=True)
    custody.register_account("owner")
    custody.register_account("alice")
    custody.issue("alice", 10**18)

    fund_me = FundingLedger("owner", StaticPriceFeed(2000_00000000, decimals=8), custody)

    # 0.1 native units at 2000 -> 200 reference units (minimum is 50)
    fund_me.fund("alice", 10**17)

    # Owner collects everything; all contributor records reset
    fund_me.withdraw("owner")
"""

# Core types
from .core import (
    PriceFeed,
    ValueTransfer,
    PriceQuote,
    RoundData,
    Move,
    FundEvent,
    LedgerError,
    InsufficientContribution,
    Unauthorized,
    IndexOutOfRange,
    TransferFailed,
    OracleUnavailable,
    ReentrantCall,
    AccountNotRegistered,
    UnknownNetwork,
    SYSTEM_ACCOUNT,
    NATIVE_DECIMALS,
    NATIVE_UNIT_SCALE,
    MINIMUM_REFERENCE_AMOUNT,
    EVENT_FUND,
    EVENT_WITHDRAW,
)

# Conversion
from .price_converter import (
    get_conversion_rate,
    get_price,
    normalize_price,
)

# Price feeds
from .price_feed import (
    StaticPriceFeed,
    AggregatorPriceFeed,
)

# Custody
from .custody import Custody

# Ledger
from .ledger import FundingLedger

# Configuration and deployment
from .config import (
    NetworkConfig,
    NETWORK_CONFIG,
    DEVELOPMENT_CHAINS,
    MOCK_DECIMALS,
    MOCK_INITIAL_ANSWER,
    get_network_config,
)
from .deploy import Deployment, deploy_fund_me

__all__ = [
    # Core
    'PriceFeed', 'ValueTransfer', 'PriceQuote', 'RoundData', 'Move', 'FundEvent',
    'LedgerError', 'InsufficientContribution', 'Unauthorized', 'IndexOutOfRange',
    'TransferFailed', 'OracleUnavailable', 'ReentrantCall', 'AccountNotRegistered',
    'UnknownNetwork',
    'SYSTEM_ACCOUNT', 'NATIVE_DECIMALS', 'NATIVE_UNIT_SCALE', 'MINIMUM_REFERENCE_AMOUNT',
    'EVENT_FUND', 'EVENT_WITHDRAW',
    # Conversion
    'get_conversion_rate', 'get_price', 'normalize_price',
    # Price feeds
    'StaticPriceFeed', 'AggregatorPriceFeed',
    # Custody
    'Custody',
    # Ledger
    'FundingLedger',
    # Configuration and deployment
    'NetworkConfig', 'NETWORK_CONFIG', 'DEVELOPMENT_CHAINS',
    'MOCK_DECIMALS', 'MOCK_INITIAL_ANSWER', 'get_network_config',
    'Deployment', 'deploy_fund_me',
]

__version__ = '1.0.0'
