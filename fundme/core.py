"""
Core types and constants for the funding ledger.

This module provides the foundational data structures and protocols:
1. Protocols: PriceFeed (read-only oracle) and ValueTransfer (native payments)
2. Immutable data structures: PriceQuote, RoundData, Move, FundEvent
3. Exceptions: LedgerError and domain-specific error types
4. Type aliases: AmountMap

All amounts are plain ints in the smallest native denomination. The ledger
never uses floating point or Decimal for value accounting.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Account that issues native value in test mode (may hold a negative balance).
SYSTEM_ACCOUNT = "system"

# Native unit precision: 1 whole coin == 10**18 base units.
NATIVE_DECIMALS = 18
NATIVE_UNIT_SCALE = 10 ** NATIVE_DECIMALS

# Minimum contribution, in reference units scaled to native decimals.
MINIMUM_REFERENCE_AMOUNT = 50 * NATIVE_UNIT_SCALE

EVENT_FUND = "fund"
EVENT_WITHDRAW = "withdraw"


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from identity to accumulated native amount.
AmountMap = Dict[str, int]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class InsufficientContribution(LedgerError):
    """Raised when a deposit converts to less than the minimum reference amount."""

    def __init__(self, converted: int, minimum: int):
        self.converted = converted
        self.minimum = minimum
        super().__init__(
            f"You need to spend more: {converted} reference units < minimum {minimum}"
        )


class Unauthorized(LedgerError):
    """Raised when a caller other than the owner attempts a withdrawal."""
    pass


class IndexOutOfRange(LedgerError, IndexError):
    """Raised when a funder index is outside the contributor list."""
    pass


class TransferFailed(LedgerError):
    """Raised when a native value transfer did not succeed."""
    pass


class OracleUnavailable(LedgerError):
    """Raised when the price feed cannot supply a quote."""
    pass


class ReentrantCall(LedgerError):
    """Raised when a state-changing operation is entered while another is in flight."""
    pass


class AccountNotRegistered(LedgerError):
    """Raised when operating on an identity that custody does not know."""
    pass


class UnknownNetwork(LedgerError):
    """Raised when no deployment configuration exists for a network."""
    pass


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class PriceQuote:
    """
    Price of one whole native unit in reference currency.

    Attributes:
        answer: Price scaled by 10**decimals (e.g. 2000_00000000 for 2000.0 at 8 decimals).
        decimals: Number of decimal places encoded in answer.
    """
    answer: int
    decimals: int

    def __post_init__(self):
        if not isinstance(self.answer, int) or isinstance(self.answer, bool):
            raise ValueError(f"PriceQuote answer must be int, got {type(self.answer)}")
        if not isinstance(self.decimals, int) or self.decimals < 0:
            raise ValueError(f"PriceQuote decimals must be a non-negative int, got {self.decimals!r}")

    def __repr__(self) -> str:
        return f"PriceQuote({self.answer}e-{self.decimals})"


@dataclass(frozen=True, slots=True)
class RoundData:
    """
    One oracle round, as reported by an aggregator-style feed.

    Attributes:
        round_id: Monotonic round identifier (starts at 1).
        answer: Price answer for the round.
        started_at: When the round started.
        updated_at: When the answer was last updated.
        answered_in_round: Round in which the answer was computed.
    """
    round_id: int
    answer: int
    started_at: datetime
    updated_at: datetime
    answered_in_round: int


@dataclass(frozen=True, slots=True)
class Move:
    """
    A single native value transfer between two custody accounts.

    Attributes:
        amount: Native amount transferred (positive int).
        source: Account debited.
        dest: Account credited.
        sequence_number: Monotonic sequence within the custody log.
    """
    amount: int
    source: str
    dest: str
    sequence_number: int

    def __post_init__(self):
        if not self.source or not self.source.strip():
            raise ValueError("Move source cannot be empty")
        if not self.dest or not self.dest.strip():
            raise ValueError("Move dest cannot be empty")
        if self.amount <= 0:
            raise ValueError(f"Move amount must be positive, got {self.amount}")
        if self.source == self.dest:
            raise ValueError("Source and dest must be different")

    def __repr__(self) -> str:
        return f"Move({self.amount}: {self.source}→{self.dest})"


@dataclass(frozen=True, slots=True)
class FundEvent:
    """
    Immutable record of an applied ledger operation.

    Attributes:
        kind: EVENT_FUND or EVENT_WITHDRAW.
        operation: Name of the ledger method that produced the event.
        caller: Identity that invoked the operation.
        amount: Native amount deposited or paid out.
        sequence_number: Monotonic sequence within the ledger.
        converted: Reference amount the deposit converted to (fund only).
        funders: Contributor list cleared by a withdrawal (withdraw only).
    """
    kind: str
    operation: str
    caller: str
    amount: int
    sequence_number: int
    converted: Optional[int] = None
    funders: Tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"FundEvent(#{self.sequence_number} {self.operation} {self.amount} by {self.caller})"


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class PriceFeed(Protocol):
    """
    Read-only interface to a price oracle.

    The ledger only ever calls current_price_quote(). Implementations raise
    OracleUnavailable when they cannot produce a quote.
    """

    @property
    def decimals(self) -> int:
        """Decimal places encoded in answers."""
        ...

    @property
    def version(self) -> int:
        """Feed interface version."""
        ...

    @property
    def description(self) -> str:
        """Human readable pair description."""
        ...

    def current_price_quote(self) -> PriceQuote:
        """Return the latest price quote."""
        ...


@runtime_checkable
class ValueTransfer(Protocol):
    """
    Native value transfer primitive supplied by the execution environment.

    transfer() reports failure by returning False and must leave balances
    unchanged in that case.
    """

    def transfer(self, source: str, dest: str, amount: int) -> bool:
        """Move amount from source to dest; True on success."""
        ...

    def get_balance(self, identity: str) -> int:
        """Return the native balance held by identity."""
        ...
