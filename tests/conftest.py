import pytest

from bill_splitter.participants import add_participant
from bill_splitter.store import LedgerStore


@pytest.fixture
def store():
    """A fresh, empty ledger."""
    return LedgerStore()


@pytest.fixture
def trio(store):
    """Store with Alice, Bob and Carol registered, in that order."""
    alice = add_participant(store, "Alice")
    bob = add_participant(store, "Bob")
    carol = add_participant(store, "Carol")
    return store, alice, bob, carol
