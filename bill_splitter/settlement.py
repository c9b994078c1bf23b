"""
Settlement Module

This module handles the settlement calculations for the bill splitter.

Features:
    - Convert net balances into settlement transactions
    - Reduce the number of transactions using a greedy algorithm
    - Exact amounts, rounded to currency precision only for display

Data Model:
    Input - balances (list of BalanceRecord, largest balance first):
        - participant_id: string
        - name: string
        - balance: Decimal (positive = owed money, negative = owes money)

    Output - list of Settlement:
        - from_participant: string (debtor who pays)
        - to_participant: string (creditor who receives)
        - amount: Decimal (exact; rounded_amount for display)

Functions:
    optimize_settlements: Convert balances into settlement transactions.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from bill_splitter.config import CURRENCY_PRECISION, SETTLED_THRESHOLD

logger = logging.getLogger(__name__)


class Settlement:
    """
    A single point-to-point payment.

    Attributes:
        from_participant (str): Debtor participant ID.
        to_participant (str): Creditor participant ID.
        amount (Decimal): Exact positive amount; see rounded_amount for display.
        from_name (str): Debtor display name.
        to_name (str): Creditor display name.
    """

    def __init__(
        self,
        from_participant: str,
        to_participant: str,
        amount: Decimal,
        from_name: Optional[str] = None,
        to_name: Optional[str] = None
    ):
        self.from_participant = from_participant
        self.to_participant = to_participant
        self.amount = amount
        self.from_name = from_name or from_participant
        self.to_name = to_name or to_participant

    @property
    def rounded_amount(self) -> Decimal:
        """Amount rounded to currency precision, for display."""
        return _round_decimal(self.amount)

    def to_dict(self) -> dict:
        return {
            "from_participant": self.from_participant,
            "to_participant": self.to_participant,
            "from_name": self.from_name,
            "to_name": self.to_name,
            "amount": self.rounded_amount
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Settlement):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"Settlement(from='{self.from_participant}', "
            f"to='{self.to_participant}', amount={self.amount})"
        )


def _round_decimal(value: Decimal) -> Decimal:
    """
    Round a Decimal to currency precision.

    Args:
        value: Decimal value to round.

    Returns:
        Decimal: Value quantized to CURRENCY_PRECISION, half up.
    """
    return value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def optimize_settlements(balances: list, threshold: Optional[Decimal] = None) -> list[Settlement]:
    """
    Convert net balances into settlement transactions.

    Uses a greedy algorithm:
        1. Separate participants into creditors (balance > threshold) and
           debtors (balance < -threshold), keeping the input order
        2. Take the creditor and debtor at the front of each list (the
           largest creditor, and the debtor closest to zero)
        3. Settle the smaller of the two magnitudes exactly, so one side
           always reaches zero
        4. Drop whichever side is now within the threshold of zero
        5. Repeat until either list is empty

    Args:
        balances: Output of calculate_balances(), largest balance first.
        threshold: Distance from zero treated as settled. Defaults to
            SETTLED_THRESHOLD.

    Returns:
        list[Settlement]: Transactions in the order they were matched.
            At most len(creditors) + len(debtors) - 1 entries.

    Notes:
        - Not guaranteed to be the global minimum number of transactions
        - Does NOT modify input balances
        - Amounts are not rounded here; rounding each transfer would leave
          the dropped fractions of a cent on the creditor
    """
    epsilon = SETTLED_THRESHOLD if threshold is None else Decimal(str(threshold))

    # Working copies as [record, remaining]; debtor remainders stay negative
    creditors = [[r, r.balance] for r in balances if r.balance > epsilon]
    debtors = [[r, r.balance] for r in balances if r.balance < -epsilon]

    settlements = []

    while creditors and debtors:
        creditor, credit_left = creditors[0]
        debtor, debt_left = debtors[0]

        amount = min(credit_left, -debt_left)

        settlements.append(Settlement(
            from_participant=debtor.participant_id,
            to_participant=creditor.participant_id,
            amount=amount,
            from_name=debtor.name,
            to_name=creditor.name
        ))
        logger.debug("%s pays %s %s", debtor.participant_id, creditor.participant_id, amount)

        creditors[0][1] = credit_left - amount
        debtors[0][1] = debt_left + amount

        if creditors[0][1] < epsilon:
            creditors.pop(0)
        if debtors[0][1] > -epsilon:
            debtors.pop(0)

    return settlements
