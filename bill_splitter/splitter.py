"""
Splitter Module

This module handles the expense splitting logic for the bill splitter.

Features:
    - Equal splitting among sharers
    - Per-participant balance calculation
    - Decimal arithmetic, no remainder redistribution

Data Model:
    Input - participants (list of Person):
        - participant_id: string
        - name: string

    Input - expenses (list of Expense):
        - payer_id: string
        - amount: Decimal
        - sharer_ids: list of participant_ids

    Output - balances (list of BalanceRecord, largest balance first):
        - total_paid: Decimal (sum of expenses paid by this participant)
        - total_owed: Decimal (sum of shares owed by this participant)
        - balance: Decimal (total_paid - total_owed)

Functions:
    calculate_balances: Calculate per-participant financial balances.
"""

from decimal import Decimal

from bill_splitter.errors import ReferentialError


class BalanceRecord:
    """
    Derived balance for one participant.

    Attributes:
        participant_id (str): Participant the record belongs to.
        name (str): Participant display name at computation time.
        total_paid (Decimal): Sum of amounts this participant paid.
        total_owed (Decimal): Sum of this participant's shares.
        balance (Decimal): total_paid - total_owed. Positive = is owed money.
    """

    def __init__(
        self,
        participant_id: str,
        name: str,
        total_paid: Decimal,
        total_owed: Decimal
    ):
        self.participant_id = participant_id
        self.name = name
        self.total_paid = total_paid
        self.total_owed = total_owed
        self.balance = total_paid - total_owed

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "total_paid": self.total_paid,
            "total_owed": self.total_owed,
            "balance": self.balance
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, BalanceRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"BalanceRecord(id='{self.participant_id}', balance={self.balance})"


def calculate_balances(participants: list, expenses: list) -> list[BalanceRecord]:
    """
    Calculate per-participant financial balances from expenses.

    For each expense:
        1. The payer's total_paid increases by the expense amount
        2. Each sharer's total_owed increases by (amount / num_sharers)

    Args:
        participants: List of Person objects with unique participant_ids.
        expenses: List of Expense objects whose payer and sharers are all
            in participants.

    Returns:
        list[BalanceRecord]: One record per participant, sorted by balance
            descending. Participants with equal balances keep their
            registration order. Empty when there are no participants or
            no expenses.

    Raises:
        ReferentialError: If an expense names a payer or sharer that is not
            in participants.

    Notes:
        - Payer does NOT need to be a sharer
        - Shares are not rounded; a 100 / 3 split leaves each sharer with
          33.333..., and the sum of balances stays at zero up to Decimal
          precision
    """
    if not participants or not expenses:
        return []

    total_paid = {p.participant_id: Decimal("0") for p in participants}
    total_owed = {p.participant_id: Decimal("0") for p in participants}

    for expense in expenses:
        if expense.payer_id not in total_paid:
            raise ReferentialError(
                f"expense {expense.expense_id} payer '{expense.payer_id}' is not a participant"
            )
        total_paid[expense.payer_id] += expense.amount

        share_per_person = expense.amount / Decimal(len(expense.sharer_ids))

        for sharer_id in expense.sharer_ids:
            if sharer_id not in total_owed:
                raise ReferentialError(
                    f"expense {expense.expense_id} sharer '{sharer_id}' is not a participant"
                )
            total_owed[sharer_id] += share_per_person

    records = [
        BalanceRecord(
            participant_id=p.participant_id,
            name=p.name,
            total_paid=total_paid[p.participant_id],
            total_owed=total_owed[p.participant_id]
        )
        for p in participants
    ]

    # sorted() is stable with reverse=True, ties keep registration order
    return sorted(records, key=lambda r: r.balance, reverse=True)
