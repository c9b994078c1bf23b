"""
Tests for the transparency and display helpers.
"""

from decimal import Decimal

from bill_splitter.expenses import upsert_expense
from bill_splitter.settlement import Settlement
from bill_splitter.store import recompute_results
from bill_splitter.utils import (
    explain_all_participants,
    explain_participant_share,
    format_currency,
    format_settlement
)


def test_explain_participant_share(trio):
    store, alice, bob, carol = trio
    everyone = [alice.participant_id, bob.participant_id, carol.participant_id]
    upsert_expense(store, "Dinner", 100, alice.participant_id, everyone)
    upsert_expense(store, "Taxi", 12, carol.participant_id, [alice.participant_id, carol.participant_id])
    balances, _ = recompute_results(store)

    explanation = explain_participant_share(
        bob.participant_id, store.participants, store.expenses, balances
    )

    assert explanation["name"] == "Bob"
    assert len(explanation["expense_contributions"]) == 1
    contribution = explanation["expense_contributions"][0]
    assert contribution["description"] == "Dinner"
    assert contribution["paid_by"] == "Alice"
    assert contribution["sharers"] == ["Alice", "Bob", "Carol"]
    assert contribution["participant_share"] == Decimal("33.33")
    assert explanation["total_paid"] == Decimal("0")
    assert explanation["balance"] < 0


def test_explain_unknown_participant(trio):
    store, _, _, _ = trio

    explanation = explain_participant_share("ghost", store.participants, store.expenses, [])

    assert explanation["expense_contributions"] == []
    assert "error" in explanation


def test_explain_all_participants_follows_registration_order(trio):
    store, alice, bob, carol = trio
    upsert_expense(store, "Snacks", 9, bob.participant_id, [bob.participant_id])
    balances, _ = recompute_results(store)

    explanations = explain_all_participants(store.participants, store.expenses, balances)

    assert [e["name"] for e in explanations] == ["Alice", "Bob", "Carol"]


def test_format_currency():
    assert format_currency(1234.5, symbol="$") == "$1,234.50"
    assert format_currency(Decimal("0.005"), symbol="€") == "€0.01"


def test_format_settlement():
    settlement = Settlement("b", "a", Decimal("30.00"), "Bob", "Alice")

    assert format_settlement(settlement, symbol="$") == "Bob pays Alice $30.00"
