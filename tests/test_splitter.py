"""
Unit tests for splitter.calculate_balances.

No store involved: the calculator takes plain Person and Expense lists.
"""

from decimal import Decimal

import pytest

from bill_splitter.errors import ReferentialError
from bill_splitter.expenses import Expense
from bill_splitter.participants import Person
from bill_splitter.splitter import calculate_balances


# ── Helpers ────────────────────────────────────────────────────────────────

def _people(*names):
    return [Person(name=n, participant_id=n) for n in names]


def _expense(amount, payer, sharers, expense_id="E1"):
    return Expense(
        expense_id=expense_id,
        description="test",
        amount=Decimal(str(amount)),
        payer_id=payer,
        sharer_ids=sharers
    )


def _by_id(records):
    return {r.participant_id: r for r in records}


# ── Tests ──────────────────────────────────────────────────────────────────

def test_dinner_split_three_ways():
    people = _people("A", "B", "C")
    records = calculate_balances(people, [_expense(90, "A", ["A", "B", "C"])])

    balances = _by_id(records)
    assert balances["A"].total_paid == Decimal("90")
    assert balances["A"].total_owed == Decimal("30")
    assert balances["A"].balance == Decimal("60")
    assert balances["B"].balance == Decimal("-30")
    assert balances["C"].balance == Decimal("-30")


def test_sorted_by_balance_descending():
    people = _people("A", "B", "C")
    expenses = [
        _expense(30, "C", ["A", "B", "C"], "E1"),
        _expense(60, "B", ["A", "B", "C"], "E2"),
    ]

    records = calculate_balances(people, expenses)

    assert [r.participant_id for r in records] == ["B", "C", "A"]


def test_ties_keep_registration_order():
    people = _people("A", "B", "C", "D")
    records = calculate_balances(people, [_expense(40, "D", ["A", "B", "C", "D"])])

    assert [r.participant_id for r in records] == ["D", "A", "B", "C"]


def test_participant_without_expenses_gets_zero_record():
    people = _people("A", "B", "Z")
    records = calculate_balances(people, [_expense(50, "A", ["A", "B"])])

    zero = _by_id(records)["Z"]
    assert len(records) == 3
    assert zero.total_paid == 0
    assert zero.total_owed == 0
    assert zero.balance == 0


def test_payer_need_not_share():
    people = _people("A", "B")
    records = _by_id(calculate_balances(people, [_expense(20, "A", ["B"])]))

    assert records["A"].balance == Decimal("20")
    assert records["B"].balance == Decimal("-20")


@pytest.mark.parametrize("participants, expenses", [
    ([], []),
    (_people("A"), []),
    ([], [_expense(10, "A", ["A"])]),
])
def test_empty_input_short_circuits(participants, expenses):
    assert calculate_balances(participants, expenses) == []


def test_balances_sum_to_zero():
    people = _people("A", "B", "C", "D")
    expenses = [
        _expense(100, "A", ["A", "B", "C"], "E1"),
        _expense(17.35, "B", ["C", "D"], "E2"),
        _expense(9.99, "D", ["A", "B", "C", "D"], "E3"),
        _expense(250, "C", ["A", "D"], "E4"),
    ]

    records = calculate_balances(people, expenses)

    assert abs(sum(r.balance for r in records)) < Decimal("1e-9")


def test_uneven_split_shares_resum_to_amount():
    people = _people("A", "B", "C")
    records = _by_id(calculate_balances(people, [_expense(100, "A", ["A", "B", "C"])]))

    shares = sum(records[p].total_owed for p in ("A", "B", "C"))

    assert abs(shares - records["A"].total_paid) < Decimal("0.01")
    # No remainder redistribution: every sharer owes the same amount
    assert records["A"].total_owed == records["B"].total_owed == records["C"].total_owed


def test_unknown_sharer_fails_fast():
    people = _people("A", "B")

    with pytest.raises(ReferentialError):
        calculate_balances(people, [_expense(10, "A", ["A", "ghost"])])


def test_unknown_payer_fails_fast():
    people = _people("A", "B")

    with pytest.raises(ReferentialError):
        calculate_balances(people, [_expense(10, "ghost", ["A"])])


def test_pure_function_does_not_touch_inputs():
    people = _people("A", "B")
    expenses = [_expense(10, "A", ["A", "B"])]
    before = [e.to_dict() for e in expenses]

    calculate_balances(people, expenses)

    assert [e.to_dict() for e in expenses] == before
    assert [p.participant_id for p in people] == ["A", "B"]
