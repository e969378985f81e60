"""Test suite for the fundme funding ledger."""
