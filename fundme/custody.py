"""
custody.py - Native value accounts and the transfer primitive

Custody plays the role of the execution environment's native payment layer:
it holds the native balance of every identity (including the funding
ledger's own account) and moves value between them.

Key responsibilities:
    - Implements the ValueTransfer protocol used by FundingLedger
    - Transfers are all-or-nothing: a failed transfer changes no balance
    - Receive hooks let an account react to incoming value (and fail it)
    - Every applied transfer is logged with a monotonic sequence number
"""

from __future__ import annotations
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Set, Tuple

from .core import (
    AmountMap, Move,
    SYSTEM_ACCOUNT,
    LedgerError, AccountNotRegistered,
)


# Called after an account is credited: (account, source, amount).
# Raising any Exception rejects the transfer.
ReceiveHook = Callable[[str, str, int], None]


class Custody:
    """
    Account-based holder of native value.

    Thread Safety:
        Not thread-safe. FundingLedger serialises its own calls; other
        callers must not transfer concurrently.

    Example:
        custody = Custody(test_mode=True)
        custody.register_account("alice")
        custody.issue("alice", 10**18)
        custody.transfer("alice", "bob", 10**17)  # False: bob unknown
    """

    def __init__(self, verbose: bool = True, test_mode: bool = False):
        """
        Create a custody layer.

        Args:
            verbose: Enable debug output (default: True)
            test_mode: Enable test mode to allow issue() calls (default: False)
        """
        self.balances: AmountMap = defaultdict(int)
        self.registered_accounts: Set[str] = set()
        self.transfer_log: List[Move] = []
        self.verbose = verbose
        self._test_mode = test_mode
        self._hooks: Dict[str, ReceiveHook] = {}
        self._next_sequence: int = 0

        # Auto-register the system account (issuance source)
        self.registered_accounts.add(SYSTEM_ACCOUNT)

    # ========================================================================
    # READ-ONLY
    # ========================================================================

    def get_balance(self, identity: str) -> int:
        """
        Native balance of an account.

        Raises:
            AccountNotRegistered: If identity is not registered
        """
        if identity not in self.registered_accounts:
            raise AccountNotRegistered(f"Account {identity} not registered")
        return self.balances[identity]

    def is_registered(self, identity: str) -> bool:
        return identity in self.registered_accounts

    def list_accounts(self) -> Set[str]:
        return self.registered_accounts.copy()

    def total_supply(self) -> int:
        """
        Sum of all balances, including the system account.

        Issuance debits the system account, so this is always 0 unless a
        balance was corrupted.
        """
        return sum(self.balances[a] for a in sorted(self.registered_accounts))

    # ========================================================================
    # REGISTRATION (Mutating)
    # ========================================================================

    def register_account(self, identity: str, on_receive: Optional[ReceiveHook] = None) -> str:
        """
        Register a new account.

        Args:
            identity: Unique account identifier
            on_receive: Optional hook run after the account is credited

        Raises:
            ValueError: If identity is empty or already registered
        """
        if not identity or not identity.strip():
            raise ValueError("Account identity cannot be empty")
        if identity in self.registered_accounts:
            raise ValueError(f"Account {identity} already registered")
        self.registered_accounts.add(identity)
        if on_receive is not None:
            self._hooks[identity] = on_receive
        if self.verbose:
            print(f"📝 Registered account: {identity}")
        return identity

    def set_receive_hook(self, identity: str, on_receive: Optional[ReceiveHook]) -> None:
        """Install or remove (None) the receive hook of a registered account."""
        if identity not in self.registered_accounts:
            raise AccountNotRegistered(f"Account {identity} not registered")
        if on_receive is None:
            self._hooks.pop(identity, None)
        else:
            self._hooks[identity] = on_receive

    def issue(self, identity: str, amount: int) -> None:
        """
        Mint native value to an account from SYSTEM_ACCOUNT.

        WARNING: Only available in test mode; a live environment has no
        issuance path.

        Raises:
            LedgerError: If called when test_mode is False
            AccountNotRegistered: If identity is not registered
            ValueError: If amount is not positive
        """
        if not self._test_mode:
            raise LedgerError(
                "issue() is disabled in production mode. "
                "Set test_mode=True when creating Custody for testing."
            )
        if identity not in self.registered_accounts:
            raise AccountNotRegistered(f"Account {identity} not registered")
        if amount <= 0:
            raise ValueError(f"Issued amount must be positive, got {amount}")
        self._apply(SYSTEM_ACCOUNT, identity, amount)

    # ========================================================================
    # TRANSFER (Mutating)
    # ========================================================================

    def transfer(self, source: str, dest: str, amount: int) -> bool:
        """
        Move native value between two accounts atomically.

        Validation order:
        1. Both accounts registered, amount non-negative int
        2. Source holds at least amount; SYSTEM_ACCOUNT never sends (issue only)
        3. Destination receive hook accepts the credit

        Returns:
            True if applied (zero amounts are a no-op success), False otherwise.
            On False no balance has changed.
        """
        reason = self._validate(source, dest, amount)
        if reason:
            if self.verbose:
                print(f"✗ TRANSFER REJECTED: {reason}")
            return False
        if amount == 0:
            return True

        # Hooks may transfer further; a rejection unwinds those too
        snapshot = self._snapshot()
        move = self._apply(source, dest, amount)

        hook = self._hooks.get(dest)
        if hook is not None:
            try:
                hook(dest, source, amount)
            except Exception as e:
                self._restore(snapshot)
                if self.verbose:
                    print(f"✗ TRANSFER REVERTED by {dest}: {e}")
                return False

        if self.verbose:
            print(f"✓ {move!r}")
        return True

    def _validate(self, source: str, dest: str, amount: int) -> str:
        if not isinstance(amount, int) or isinstance(amount, bool):
            return f"amount must be int, got {type(amount).__name__}"
        if amount < 0:
            return f"negative amount {amount}"
        if source not in self.registered_accounts:
            return f"account not registered: {source}"
        if dest not in self.registered_accounts:
            return f"account not registered: {dest}"
        if source == SYSTEM_ACCOUNT:
            return f"{SYSTEM_ACCOUNT} can only send through issue()"
        if source == dest:
            return "source and dest must be different"
        if self.balances[source] < amount:
            return f"{source}: balance {self.balances[source]} < {amount}"
        return ""

    def _apply(self, source: str, dest: str, amount: int) -> Move:
        move = Move(amount, source, dest, self._next_sequence)
        self._next_sequence += 1
        self.balances[source] -= amount
        self.balances[dest] += amount
        self.transfer_log.append(move)
        return move

    def _snapshot(self) -> Tuple[AmountMap, int, int]:
        return dict(self.balances), len(self.transfer_log), self._next_sequence

    def _restore(self, snapshot: Tuple[AmountMap, int, int]) -> None:
        balances, log_length, sequence = snapshot
        self.balances = defaultdict(int, balances)
        del self.transfer_log[log_length:]
        self._next_sequence = sequence

    def __repr__(self):
        return f"Custody({len(self.registered_accounts)} accounts, {len(self.transfer_log)} transfers)"
