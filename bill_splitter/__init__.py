"""Shared expense ledger with balance and settlement calculation."""
