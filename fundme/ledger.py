"""
ledger.py - Stateful funding ledger

The FundingLedger class is the only component that mutates contribution
state. It accepts deposits gated by a minimum reference value, records
per-contributor balances, and lets the owner withdraw the pooled balance.

Key responsibilities:
    - Converts deposits through the injected PriceFeed before accepting them
    - Keeps the balance map and contributor list consistent with custody
    - Executes every operation atomically (all effects apply or none do)
    - Resets state before paying out, and refuses re-entrant calls
    - Always logs - every applied operation is recorded as a FundEvent
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple
import threading

from .core import (
    # Types
    AmountMap, FundEvent, PriceFeed, ValueTransfer,
    # Constants
    MINIMUM_REFERENCE_AMOUNT, EVENT_FUND, EVENT_WITHDRAW, SYSTEM_ACCOUNT,
    # Exceptions
    InsufficientContribution, Unauthorized, IndexOutOfRange,
    TransferFailed, ReentrantCall,
)
from .custody import Custody
from .price_converter import get_conversion_rate


class FundingLedger:
    """
    Pooled contribution ledger with a single withdrawing owner.

    Design Principles:
        - All-or-nothing: a failing operation leaves balances, the
          contributor list, custody and the event log untouched.
        - Effects before interactions: withdrawals reset the records before
          the payout transfer runs, so anything the transfer triggers sees
          the final state.

    Thread Safety:
        State-changing calls are serialised by an internal lock. Re-entry
        from the thread that holds it raises ReentrantCall.

    Example:
        custody = Custody(verbose=False, test_mode=True)
        custody.register_account("owner")
        custody.register_account("alice")
        custody.issue("alice", 10**18)

        fund_me = FundingLedger("owner", StaticPriceFeed(2000_00000000), custody)
        fund_me.fund("alice", 10**17)   # 200 reference units
        fund_me.withdraw("owner")
    """

    def __init__(
        self,
        owner: str,
        price_feed: PriceFeed,
        custody: ValueTransfer,
        address: str = "fund_me",
        minimum_reference_amount: int = MINIMUM_REFERENCE_AMOUNT,
        verbose: bool = True,
    ):
        """
        Create a funding ledger.

        Args:
            owner: Identity allowed to withdraw (immutable)
            price_feed: Oracle used to value deposits
            custody: Native value transfer primitive
            address: Custody account holding the pooled balance
            minimum_reference_amount: Deposit threshold at native precision
            verbose: Enable debug output (default: True)

        Raises:
            ValueError: If owner or address is empty, owner is the ledger's own
                address, or the minimum is negative
        """
        if not owner or not owner.strip():
            raise ValueError("Owner cannot be empty")
        if not address or not address.strip():
            raise ValueError("Ledger address cannot be empty")
        if owner == address:
            raise ValueError(f"Owner cannot be the ledger address {address}")
        if minimum_reference_amount < 0:
            raise ValueError(f"Minimum must be non-negative, got {minimum_reference_amount}")

        self._owner = owner
        self._price_feed = price_feed
        self.custody = custody
        self.address = address
        self.minimum_reference_amount = minimum_reference_amount
        self.verbose = verbose

        self._address_to_amount_funded: AmountMap = {}
        self._funders: List[str] = []
        self._events: List[FundEvent] = []
        self._next_sequence: int = 0

        self._lock = threading.Lock()
        self._active_thread: Optional[int] = None
        self._pending_deposit: Optional[Tuple[str, int]] = None

        if isinstance(custody, Custody):
            if custody.is_registered(address):
                custody.set_receive_hook(address, self._accept_deposit)
            else:
                custody.register_account(address, on_receive=self._accept_deposit)

    # ========================================================================
    # QUERIES (read-only)
    # ========================================================================

    def get_owner(self) -> str:
        return self._owner

    def get_price_feed(self) -> PriceFeed:
        return self._price_feed

    def get_version(self) -> int:
        """Version of the price feed interface."""
        return self._price_feed.version

    def get_address_to_amount_funded(self, identity: str) -> int:
        """Recorded contribution of identity (0 if never funded or withdrawn)."""
        return self._address_to_amount_funded.get(identity, 0)

    def get_funder(self, index: int) -> str:
        """
        Return the contributor at position index.

        Raises:
            IndexOutOfRange: If index is negative or >= get_contributor_count()
        """
        if index < 0 or index >= len(self._funders):
            raise IndexOutOfRange(
                f"Funder index {index} out of range (count={len(self._funders)})"
            )
        return self._funders[index]

    def get_contributor_count(self) -> int:
        return len(self._funders)

    def list_funders(self) -> List[str]:
        return list(self._funders)

    def get_balance(self) -> int:
        """Native balance currently held in custody for this ledger."""
        return self.custody.get_balance(self.address)

    def total_funded(self) -> int:
        """Sum of all recorded contributor balances."""
        return sum(self._address_to_amount_funded.values())

    @property
    def event_log(self) -> Tuple[FundEvent, ...]:
        return tuple(self._events)

    # ========================================================================
    # EXECUTION GUARD
    # ========================================================================

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """
        Serialise a state-changing operation.

        Raises:
            ReentrantCall: If the current thread is already inside an operation
        """
        if self._active_thread == threading.get_ident():
            raise ReentrantCall(f"{operation}() called while another operation is in progress")
        with self._lock:
            self._active_thread = threading.get_ident()
            try:
                yield
            finally:
                self._active_thread = None

    def _accept_deposit(self, account: str, source: str, amount: int) -> None:
        """Custody receive hook: value only enters through fund()."""
        if self._active_thread != threading.get_ident() or self._pending_deposit != (source, amount):
            raise Unauthorized(f"Direct transfer of {amount} from {source} refused; use fund()")

    def _record(self, **fields) -> FundEvent:
        event = FundEvent(sequence_number=self._next_sequence, **fields)
        self._next_sequence += 1
        self._events.append(event)
        return event

    # ========================================================================
    # FUND (Mutating)
    # ========================================================================

    def fund(self, caller: str, native_amount_sent: int) -> FundEvent:
        """
        Deposit native value on behalf of caller.

        Steps:
        1. Value the deposit with the current price quote
        2. Reject if it converts to less than the minimum
        3. Move the value from caller into the ledger's custody account
        4. Record the contribution

        Returns:
            The FundEvent recorded for the deposit

        Raises:
            InsufficientContribution: Converted amount below the minimum
            TransferFailed: Custody could not move the value from caller,
                or caller is SYSTEM_ACCOUNT
            OracleUnavailable: The price feed has no quote
            ReentrantCall: Called from inside another ledger operation
        """
        with self._guard("fund"):
            if caller == SYSTEM_ACCOUNT:
                if self.verbose:
                    print(f"✗ REJECTED fund by {caller}: not a funding account")
                raise TransferFailed(f"{SYSTEM_ACCOUNT} cannot fund")

            quote = self._price_feed.current_price_quote()
            converted = get_conversion_rate(native_amount_sent, quote)
            if converted < self.minimum_reference_amount:
                if self.verbose:
                    print(f"✗ REJECTED fund by {caller}: {converted} < min {self.minimum_reference_amount}")
                raise InsufficientContribution(converted, self.minimum_reference_amount)

            self._pending_deposit = (caller, native_amount_sent)
            try:
                accepted = self.custody.transfer(caller, self.address, native_amount_sent)
            finally:
                self._pending_deposit = None
            if not accepted:
                if self.verbose:
                    print(f"✗ REJECTED fund by {caller}: transfer of {native_amount_sent} failed")
                raise TransferFailed(f"Could not transfer {native_amount_sent} from {caller}")

            self._address_to_amount_funded[caller] = (
                self._address_to_amount_funded.get(caller, 0) + native_amount_sent
            )
            self._funders.append(caller)

            event = self._record(
                kind=EVENT_FUND,
                operation="fund",
                caller=caller,
                amount=native_amount_sent,
                converted=converted,
            )
            if self.verbose:
                print(f"✓ {event!r}")
            return event

    # ========================================================================
    # WITHDRAW (Mutating)
    # ========================================================================

    def withdraw(self, caller: str) -> FundEvent:
        """
        Pay the whole pooled balance to the owner and reset all records.

        Reads the contributor list from ledger state on every iteration.

        Returns:
            The FundEvent recorded for the withdrawal

        Raises:
            Unauthorized: caller is not the owner
            TransferFailed: The payout transfer failed (state is restored)
            ReentrantCall: Called from inside another ledger operation
        """
        with self._guard("withdraw"):
            self._check_owner(caller, "withdraw")
            snapshot = self._snapshot()
            for index in range(len(self._funders)):
                funder = self._funders[index]
                self._address_to_amount_funded[funder] = 0
            self._funders = []
            return self._pay_owner(caller, "withdraw", snapshot)

    def cheaper_withdraw(self, caller: str) -> FundEvent:
        """
        Same contract as withdraw(), iterating a local copy of the contributor list.

        Raises:
            Unauthorized: caller is not the owner
            TransferFailed: The payout transfer failed (state is restored)
            ReentrantCall: Called from inside another ledger operation
        """
        with self._guard("cheaper_withdraw"):
            self._check_owner(caller, "cheaper_withdraw")
            snapshot = self._snapshot()
            funders = list(self._funders)
            amounts = self._address_to_amount_funded
            for funder in funders:
                amounts[funder] = 0
            self._funders = []
            return self._pay_owner(caller, "cheaper_withdraw", snapshot)

    def _check_owner(self, caller: str, operation: str) -> None:
        if caller != self._owner:
            if self.verbose:
                print(f"✗ REJECTED {operation} by {caller}: not owner")
            raise Unauthorized(f"{caller} is not the owner")

    def _snapshot(self) -> Tuple[AmountMap, List[str]]:
        return dict(self._address_to_amount_funded), list(self._funders)

    def _pay_owner(
        self,
        caller: str,
        operation: str,
        snapshot: Tuple[AmountMap, List[str]],
    ) -> FundEvent:
        """Transfer the held balance to the owner, restoring snapshot on failure."""
        cleared = tuple(snapshot[1])
        amount = self.custody.get_balance(self.address)
        if amount > 0 and not self.custody.transfer(self.address, self._owner, amount):
            self._address_to_amount_funded, self._funders = snapshot
            if self.verbose:
                print(f"✗ REJECTED {operation}: payout of {amount} to {self._owner} failed")
            raise TransferFailed(f"Payout of {amount} to {self._owner} failed")

        event = self._record(
            kind=EVENT_WITHDRAW,
            operation=operation,
            caller=caller,
            amount=amount,
            funders=cleared,
        )
        if self.verbose:
            print(f"✓ {event!r}")
        return event

    def __repr__(self):
        return (
            f"FundingLedger(owner={self._owner}, funders={len(self._funders)}, "
            f"events={len(self._events)})"
        )
