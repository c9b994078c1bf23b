"""
Ledger Store Module

This module holds the in-memory registries and the last computed results
for the bill splitter.

Features:
    - Participant and expense collections, replaced wholesale on every write
    - Computed balances and settlements, replaced atomically on recompute
    - Single re-entrant lock serializing every mutation and recompute
    - Change notifications for subscribers

Store Structure:
    participants: list of Person (registration order)
    expenses: list of Expense (insertion order)
    results: LedgerResults or None
        - balances: tuple of BalanceRecord
        - settlements: tuple of Settlement
        - updated_at: timestamp

Functions:
    recompute_results: Run the balance calculator and settlement reducer.
    clear_all: Drop every participant, expense and result.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from bill_splitter.settlement import optimize_settlements
from bill_splitter.splitter import calculate_balances

logger = logging.getLogger(__name__)


def _get_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        str: ISO formatted timestamp.
    """
    return datetime.now(timezone.utc).isoformat()


class LedgerResults:
    """
    Balances and settlements from one recompute.

    Attributes:
        balances (tuple[BalanceRecord]): Largest balance first.
        settlements (tuple[Settlement]): In matching order.
        updated_at (str): When the results were computed.
    """

    def __init__(self, balances, settlements, updated_at: Optional[str] = None):
        self.balances = tuple(balances)
        self.settlements = tuple(settlements)
        self.updated_at = updated_at or _get_timestamp()

    def to_dict(self) -> dict:
        return {
            "balances": [b.to_dict() for b in self.balances],
            "settlements": [s.to_dict() for s in self.settlements],
            "updated_at": self.updated_at
        }


class LedgerStore:
    """
    In-memory home of the participant and expense registries.

    Reads return copies. Writes go through commit(), which swaps in whole
    new collections, discards stale results and notifies subscribers.
    Callers doing read-modify-write hold ``lock`` across the sequence.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._participants = []
        self._expenses = []
        self._results = None
        self._listeners = []

    @property
    def participants(self) -> list:
        with self.lock:
            return list(self._participants)

    @property
    def expenses(self) -> list:
        with self.lock:
            return list(self._expenses)

    @property
    def results(self) -> Optional[LedgerResults]:
        """Last computed results, or None if invalidated since."""
        with self.lock:
            return self._results

    def commit(self, participants: Optional[list] = None, expenses: Optional[list] = None) -> None:
        """
        Replace one or both registries in a single step.

        Args:
            participants: New participant list, or None to keep the current one.
            expenses: New expense list, or None to keep the current one.
        """
        with self.lock:
            if participants is not None:
                self._participants = list(participants)
            if expenses is not None:
                self._expenses = list(expenses)
            self._results = None
            self._notify()

    def save_results(self, balances, settlements) -> LedgerResults:
        """
        Store freshly computed results, replacing any previous ones.

        Returns:
            LedgerResults: The stored results.
        """
        with self.lock:
            self._results = LedgerResults(balances, settlements)
            self._notify()
            return self._results

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        """
        Register a callback fired after every commit and every save.

        The callback receives the store and runs while the lock is held.

        Returns:
            Callable: Call it to unsubscribe.
        """
        with self.lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self.lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)


def recompute_results(store: LedgerStore) -> tuple:
    """
    Recompute balances and settlements from the current registries.

    Request flow:
        1. Snapshot participants and expenses under the store lock
        2. Calculate balances (splitter.py)
        3. Optimize settlements (settlement.py)
        4. Replace the stored results

    Args:
        store: The LedgerStore to read from and write results to.

    Returns:
        tuple: (balances, settlements) as lists. Both are empty when there
            are no participants or no expenses.
    """
    with store.lock:
        participants = store.participants
        expenses = store.expenses

        balances = calculate_balances(participants, expenses)
        settlements = optimize_settlements(balances)

        store.save_results(balances, settlements)

    logger.info(
        "Recomputed %d balance(s), %d settlement(s) from %d expense(s)",
        len(balances), len(settlements), len(expenses)
    )
    return balances, settlements


def clear_all(store: LedgerStore) -> None:
    """Drop every participant, expense and computed result."""
    store.commit(participants=[], expenses=[])
    logger.info("Cleared ledger")
