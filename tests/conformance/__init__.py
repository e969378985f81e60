"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the funding ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Recorded contributions always equal held value
2. atomicity.py - Failed operations change nothing
3. withdraw_equivalence.py - withdraw and cheaper_withdraw are indistinguishable

These tests use hypothesis for property-based testing.
"""
