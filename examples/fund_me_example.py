"""
Example: Funding and withdrawing with a FundingLedger.

Deploys a ledger on a development chain (mock feed at 2000 reference units
per native unit), takes deposits from several accounts, shows a rejected
deposit and an unauthorized withdrawal, then withdraws as the owner.
"""

from fundme import (
    Custody, deploy_fund_me,
    InsufficientContribution, Unauthorized,
    NATIVE_UNIT_SCALE,
)


def fmt(amount: int) -> str:
    return f"{amount / NATIVE_UNIT_SCALE:,.4f}"


def main():
    print("=" * 80)
    print("FUND ME - Deposits and Owner Withdrawal")
    print("=" * 80)
    print()

    custody = Custody(verbose=False, test_mode=True)
    for account in ["deployer", "alice", "bob", "mallory"]:
        custody.register_account(account)
        custody.issue(account, 10 * NATIVE_UNIT_SCALE)

    deployment = deploy_fund_me("hardhat", "deployer", custody, verbose=True)
    fund_me = deployment.ledger

    print()
    print("Example 1: Deposits")
    print("-" * 80)
    fund_me.fund("alice", NATIVE_UNIT_SCALE)
    fund_me.fund("bob", NATIVE_UNIT_SCALE // 2)
    fund_me.fund("alice", NATIVE_UNIT_SCALE // 4)
    print(f"Funders: {fund_me.list_funders()}")
    print(f"Held balance: {fmt(fund_me.get_balance())}")

    print()
    print("Example 2: Deposit below the 50 reference unit minimum")
    print("-" * 80)
    try:
        fund_me.fund("bob", NATIVE_UNIT_SCALE // 100)
    except InsufficientContribution as e:
        print(f"Rejected: {e}")

    print()
    print("Example 3: Withdrawal by a non-owner")
    print("-" * 80)
    try:
        fund_me.withdraw("mallory")
    except Unauthorized as e:
        print(f"Rejected: {e}")

    print()
    print("Example 4: Owner withdrawal")
    print("-" * 80)
    before = custody.get_balance("deployer")
    event = fund_me.cheaper_withdraw("deployer")
    print(f"Paid out: {fmt(event.amount)} to deployer "
          f"({fmt(before)} -> {fmt(custody.get_balance('deployer'))})")
    print(f"Funders after withdrawal: {fund_me.get_contributor_count()}")
    print(f"alice recorded balance: {fund_me.get_address_to_amount_funded('alice')}")


if __name__ == "__main__":
    main()
