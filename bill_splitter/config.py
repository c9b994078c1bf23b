"""
Configuration Module

Environment-driven settings for the bill splitter.

Settings:
    SETTLED_THRESHOLD: Balances within this distance of zero count as settled.
    CURRENCY_PRECISION: Quantum used when rounding settlement amounts.
    MAX_EXPENSE_AMOUNT: Largest accepted expense amount.
    CURRENCY_SYMBOL: Symbol used by the display helpers.
    LOG_LEVEL: Level passed to configure_logging().

Functions:
    get_store: Return the process-wide ledger store.
    configure_logging: Set up root logging for the API runner.
"""

import logging
import os
from decimal import Decimal
from typing import Optional

# Environment
SETTLED_THRESHOLD = Decimal(os.getenv("BILL_SPLITTER_SETTLED_THRESHOLD", "0.01"))
CURRENCY_PRECISION = Decimal("0.01")
MAX_EXPENSE_AMOUNT = Decimal("1000000000000")
CURRENCY_SYMBOL = os.getenv("BILL_SPLITTER_CURRENCY_SYMBOL", "₹")
LOG_LEVEL = os.getenv("BILL_SPLITTER_LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_store = None


def get_store():
    """
    Get the shared in-memory ledger store, creating it on first use.

    Returns:
        LedgerStore: The store used by the API process.
    """
    global _store
    if _store is None:
        # store -> settlement -> config, so import here
        from bill_splitter.store import LedgerStore
        _store = LedgerStore()
    return _store


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT
    )
