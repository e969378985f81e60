"""
test_custody.py - Unit tests for Custody

Tests:
- Account registration and the system account
- Issuance (test mode only)
- Transfers: success, rejection, zero amounts
- Receive hooks and rollback of nested transfers
- Transfer log and supply conservation
"""

import pytest
from fundme import (
    Custody, Move, ValueTransfer,
    SYSTEM_ACCOUNT,
    LedgerError, AccountNotRegistered,
)


@pytest.fixture
def bank():
    custody = Custody(verbose=False, test_mode=True)
    custody.register_account("alice")
    custody.register_account("bob")
    custody.issue("alice", 1000)
    return custody


class TestRegistration:
    """Tests for account registration."""

    def test_system_account_registered(self):
        custody = Custody(verbose=False)
        assert custody.is_registered(SYSTEM_ACCOUNT)
        assert SYSTEM_ACCOUNT == "system"

    def test_register_account(self):
        custody = Custody(verbose=False)
        assert custody.register_account("alice") == "alice"
        assert custody.get_balance("alice") == 0

    def test_register_duplicate_raises(self, bank):
        with pytest.raises(ValueError):
            bank.register_account("alice")

    def test_register_empty_raises(self):
        with pytest.raises(ValueError):
            Custody(verbose=False).register_account("  ")

    def test_unknown_balance_raises(self, bank):
        with pytest.raises(AccountNotRegistered):
            bank.get_balance("nobody")

    def test_implements_protocol(self, bank):
        assert isinstance(bank, ValueTransfer)


class TestIssue:
    """Tests for issue()."""

    def test_issue_debits_system(self, bank):
        assert bank.get_balance("alice") == 1000
        assert bank.get_balance(SYSTEM_ACCOUNT) == -1000

    def test_issue_requires_test_mode(self):
        custody = Custody(verbose=False)
        custody.register_account("alice")
        with pytest.raises(LedgerError):
            custody.issue("alice", 1)

    def test_system_account_cannot_transfer(self):
        """Outside test mode there is no way to create value."""
        custody = Custody(verbose=False)
        custody.register_account("alice")
        assert custody.transfer(SYSTEM_ACCOUNT, "alice", 10**24) is False
        assert custody.get_balance("alice") == 0
        assert custody.get_balance(SYSTEM_ACCOUNT) == 0
        assert custody.transfer_log == []

    def test_system_account_cannot_transfer_in_test_mode(self, bank):
        assert bank.transfer(SYSTEM_ACCOUNT, "bob", 1) is False
        assert bank.get_balance("bob") == 0
        assert bank.total_supply() == 0

    def test_issue_unknown_account(self, bank):
        with pytest.raises(AccountNotRegistered):
            bank.issue("nobody", 1)

    def test_issue_non_positive(self, bank):
        with pytest.raises(ValueError):
            bank.issue("alice", 0)


class TestTransfer:
    """Tests for transfer()."""

    def test_transfer_moves_value(self, bank):
        assert bank.transfer("alice", "bob", 300) is True
        assert bank.get_balance("alice") == 700
        assert bank.get_balance("bob") == 300

    def test_insufficient_funds_rejected(self, bank):
        assert bank.transfer("alice", "bob", 1001) is False
        assert bank.get_balance("alice") == 1000
        assert bank.get_balance("bob") == 0

    def test_unknown_account_rejected(self, bank):
        assert bank.transfer("alice", "nobody", 1) is False
        assert bank.transfer("nobody", "alice", 1) is False
        assert bank.get_balance("alice") == 1000

    def test_negative_amount_rejected(self, bank):
        assert bank.transfer("alice", "bob", -1) is False

    def test_non_int_amount_rejected(self, bank):
        assert bank.transfer("alice", "bob", 1.0) is False

    def test_self_transfer_rejected(self, bank):
        assert bank.transfer("alice", "alice", 1) is False

    def test_zero_amount_is_noop(self, bank):
        assert bank.transfer("alice", "bob", 0) is True
        assert bank.transfer_log[-1].dest == "alice"  # still the issuance

    def test_transfer_logged(self, bank):
        bank.transfer("alice", "bob", 5)
        last = bank.transfer_log[-1]
        assert isinstance(last, Move)
        assert (last.amount, last.source, last.dest) == (5, "alice", "bob")
        assert [m.sequence_number for m in bank.transfer_log] == [0, 1]

    def test_supply_conserved(self, bank):
        bank.transfer("alice", "bob", 250)
        bank.transfer("bob", "alice", 50)
        assert bank.total_supply() == 0


class TestReceiveHooks:
    """Tests for receive hooks."""

    def test_hook_called_after_credit(self, bank):
        seen = []

        def hook(account, source, amount):
            seen.append((account, source, amount, bank.get_balance(account)))

        bank.set_receive_hook("bob", hook)
        bank.transfer("alice", "bob", 10)
        assert seen == [("bob", "alice", 10, 10)]

    def test_raising_hook_rejects_transfer(self, bank):
        def refuse(account, source, amount):
            raise RuntimeError("no thanks")

        bank.set_receive_hook("bob", refuse)
        assert bank.transfer("alice", "bob", 10) is False
        assert bank.get_balance("alice") == 1000
        assert bank.get_balance("bob") == 0
        assert len(bank.transfer_log) == 1

    def test_rejection_unwinds_nested_transfers(self, bank):
        bank.register_account("carol")

        def forward_then_fail(account, source, amount):
            bank.transfer(account, "carol", amount)
            raise RuntimeError("fail after forwarding")

        bank.set_receive_hook("bob", forward_then_fail)
        assert bank.transfer("alice", "bob", 10) is False
        assert bank.get_balance("alice") == 1000
        assert bank.get_balance("bob") == 0
        assert bank.get_balance("carol") == 0
        assert len(bank.transfer_log) == 1

    def test_hook_at_registration(self):
        calls = []
        custody = Custody(verbose=False, test_mode=True)
        custody.register_account("alice", on_receive=lambda *args: calls.append(args))
        custody.issue("alice", 5)
        # issue() bypasses hooks
        assert calls == []
        custody.register_account("bob")
        custody.issue("bob", 5)
        custody.transfer("bob", "alice", 5)
        assert calls == [("alice", "bob", 5)]

    def test_remove_hook(self, bank):
        bank.set_receive_hook("bob", lambda *args: (_ for _ in ()).throw(RuntimeError()))
        bank.set_receive_hook("bob", None)
        assert bank.transfer("alice", "bob", 1) is True

    def test_set_hook_unknown_account(self, bank):
        with pytest.raises(AccountNotRegistered):
            bank.set_receive_hook("nobody", None)


class TestVerbose:
    """Verbose output."""

    def test_rejection_printed(self, capsys):
        custody = Custody(verbose=True, test_mode=True)
        custody.register_account("alice")
        custody.transfer("alice", SYSTEM_ACCOUNT, 1)
        assert "REJECTED" in capsys.readouterr().out
