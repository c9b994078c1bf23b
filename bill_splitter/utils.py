"""
Utilities Module

This module provides display and transparency helpers for the bill
splitter.

Features:
    - Per-participant expense breakdown explanations
    - Human-readable settlement lines
    - Currency formatting

Data Model:
    Input - participants: list of Person
    Input - expenses: list of Expense
    Input - balances: list of BalanceRecord from calculate_balances()

Functions:
    explain_participant_share: Get detailed breakdown for one participant.
    explain_all_participants: Get detailed breakdown for all participants.
    format_currency: Format amount with currency symbol.
    format_settlement: Describe one settlement as a sentence.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from bill_splitter.config import CURRENCY_PRECISION, CURRENCY_SYMBOL


def _round_decimal(value: Decimal) -> Decimal:
    """Round a Decimal to currency precision for display."""
    return value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def explain_participant_share(
    participant_id: str,
    participants: list,
    expenses: list,
    balances: list
) -> dict:
    """
    Generate detailed explanation of how a participant's share was calculated.

    For each expense the participant shares:
        - Shows expense details (id, description, total amount, payer)
        - Shows all sharers for that expense
        - Shows the participant's share (amount / num_sharers)

    Args:
        participant_id: ID of the participant to explain.
        participants: List of Person objects.
        expenses: List of Expense objects.
        balances: Output from calculate_balances().

    Returns:
        dict: Explanation containing:
            - participant_id: string
            - name: string
            - expense_contributions: list of dicts with expense breakdown
            - total_owed: Decimal (from balances)
            - total_paid: Decimal (from balances)
            - balance: Decimal (from balances)

    Notes:
        - Per-expense shares are rounded for display only; the totals come
          straight from balances
    """
    names = {p.participant_id: p.name for p in participants}

    if participant_id not in names:
        return {
            "participant_id": participant_id,
            "name": None,
            "expense_contributions": [],
            "total_owed": Decimal("0"),
            "total_paid": Decimal("0"),
            "balance": Decimal("0"),
            "error": f"Participant {participant_id} not found"
        }

    record = next((b for b in balances if b.participant_id == participant_id), None)

    expense_contributions = []
    for expense in expenses:
        if participant_id not in expense.sharer_ids:
            continue

        share_per_person = expense.amount / Decimal(len(expense.sharer_ids))

        expense_contributions.append({
            "expense_id": expense.expense_id,
            "description": expense.description,
            "total_expense_amount": _round_decimal(expense.amount),
            "paid_by": names.get(expense.payer_id, expense.payer_id),
            "sharers": [names.get(s, s) for s in expense.sharer_ids],
            "num_sharers": len(expense.sharer_ids),
            "participant_share": _round_decimal(share_per_person)
        })

    return {
        "participant_id": participant_id,
        "name": names[participant_id],
        "expense_contributions": expense_contributions,
        "total_owed": record.total_owed if record else Decimal("0"),
        "total_paid": record.total_paid if record else Decimal("0"),
        "balance": record.balance if record else Decimal("0")
    }


def explain_all_participants(
    participants: list,
    expenses: list,
    balances: list
) -> list[dict]:
    """
    Generate detailed explanations for all participants.

    Returns:
        list[dict]: One explanation per participant, in registration order.
    """
    return [
        explain_participant_share(
            participant_id=p.participant_id,
            participants=participants,
            expenses=expenses,
            balances=balances
        )
        for p in participants
    ]


def format_currency(amount, symbol: Optional[str] = None) -> str:
    """
    Format a monetary amount with the appropriate currency symbol.

    Args:
        amount: The amount to format.
        symbol: Currency symbol (default: CURRENCY_SYMBOL).

    Returns:
        str: Formatted string like "₹1,234.56".
    """
    if symbol is None:
        symbol = CURRENCY_SYMBOL
    return f"{symbol}{_round_decimal(Decimal(str(amount))):,.2f}"


def format_settlement(settlement, symbol: Optional[str] = None) -> str:
    """Describe a settlement, e.g. "Bob pays Alice ₹30.00"."""
    return f"{settlement.from_name} pays {settlement.to_name} {format_currency(settlement.amount, symbol)}"
