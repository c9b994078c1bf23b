"""
Expenses Module

This module handles all expense-related operations for the bill splitter.

Features:
    - Add/edit expenses through a single upsert keyed by expense_id
    - Delete expenses
    - Track who paid and who shares the cost
    - Running total of all recorded expenses

Data Model:
    Expense held in LedgerStore.expenses
    Fields:
        - expense_id: string (uuid4 hex unless supplied by the caller)
        - description: string
        - amount: Decimal (must be > 0)
        - payer_id: string (participant_id who paid)
        - sharer_ids: list of participant_ids (non-empty, insertion order kept)

Functions:
    upsert_expense: Create a new expense or replace an existing one.
    delete_expense: Remove an expense.
    get_expense: Look up one expense by id.
    get_expenses: Get all expenses.
    total_expenses: Sum of all expense amounts.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from bill_splitter.config import MAX_EXPENSE_AMOUNT
from bill_splitter.errors import ReferentialError, ValidationError

logger = logging.getLogger(__name__)


class Expense:
    """
    Represents a single shared expense.

    Attributes:
        expense_id (str): Unique identifier.
        description (str): What the money was spent on.
        amount (Decimal): Amount of the expense (must be > 0).
        payer_id (str): Participant ID of who paid.
        sharer_ids (list[str]): Participant IDs who split the cost evenly.
    """

    def __init__(
        self,
        expense_id: str,
        description: str,
        amount: Decimal,
        payer_id: str,
        sharer_ids: list[str]
    ):
        self.expense_id = expense_id
        self.description = description
        self.amount = amount
        self.payer_id = payer_id
        self.sharer_ids = list(sharer_ids)

    def with_sharers(self, sharer_ids: list[str]) -> "Expense":
        """Return a copy of this expense with a different sharer list."""
        return Expense(
            expense_id=self.expense_id,
            description=self.description,
            amount=self.amount,
            payer_id=self.payer_id,
            sharer_ids=sharer_ids
        )

    def to_dict(self) -> dict:
        """Convert expense to a plain dictionary."""
        return {
            "expense_id": self.expense_id,
            "description": self.description,
            "amount": self.amount,
            "payer_id": self.payer_id,
            "sharer_ids": list(self.sharer_ids)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        """Create an Expense instance from a dictionary."""
        return cls(
            expense_id=data.get("expense_id"),
            description=data.get("description"),
            amount=Decimal(str(data.get("amount"))),
            payer_id=data.get("payer_id"),
            sharer_ids=data.get("sharer_ids", [])
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Expense):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        """Return string representation of expense."""
        return (
            f"Expense(id='{self.expense_id}', payer='{self.payer_id}', "
            f"amount={self.amount}, sharers={len(self.sharer_ids)})"
        )


def _generate_expense_id() -> str:
    """Generate an opaque, process-unique expense ID."""
    return uuid.uuid4().hex


def _validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Raises:
        ValidationError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return True


def _validate_amount(amount) -> Decimal:
    """
    Validate an expense amount and convert it to Decimal.

    Args:
        amount: int, float, Decimal or numeric string.

    Returns:
        Decimal: The amount, converted via str() so 0.1 stays 0.1.

    Raises:
        ValidationError: If the amount is not a finite positive number or
            exceeds MAX_EXPENSE_AMOUNT.
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal, str)):
        raise ValidationError(f"amount must be a positive number, got: {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except ArithmeticError:
        raise ValidationError(f"amount must be a positive number, got: {amount!r}")
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"amount must be a positive number, got: {amount!r}")
    if value > MAX_EXPENSE_AMOUNT:
        raise ValidationError(f"amount must not exceed {MAX_EXPENSE_AMOUNT}, got: {amount!r}")
    return value


def _validate_sharers(sharer_ids) -> list[str]:
    """
    Validate the sharer list: non-empty, no blanks, no duplicates.

    Raises:
        ValidationError: If the list is empty or malformed.
    """
    if isinstance(sharer_ids, str) or not sharer_ids:
        raise ValidationError("sharer_ids must be a non-empty list of participant IDs")
    sharers = list(sharer_ids)
    for sharer_id in sharers:
        _validate_non_empty_string(sharer_id, "sharer_id")
    if len(set(sharers)) != len(sharers):
        raise ValidationError("sharer_ids must not contain duplicates")
    return sharers


def upsert_expense(
    store,
    description: str,
    amount,
    payer_id: str,
    sharer_ids: list[str],
    expense_id: Optional[str] = None
) -> Expense:
    """
    Create a new expense or replace an existing one.

    Args:
        store: The LedgerStore holding the registries.
        description: What the expense was for.
        amount: Amount of the expense (must be > 0).
        payer_id: Participant ID of who paid the expense.
        sharer_ids: Participant IDs who split the expense evenly.
        expense_id: ID of the expense to replace. When it is None a new ID
            is generated; when it matches nothing the expense is added under
            that ID.

    Returns:
        Expense: The stored expense.

    Raises:
        ValidationError: If input validation fails.
        ReferentialError: If payer or a sharer is not a current participant.

    Notes:
        - Payer does NOT have to be a sharer
        - Replacing keeps the expense at its original position
    """
    _validate_non_empty_string(description, "description")
    _validate_non_empty_string(payer_id, "payer_id")
    value = _validate_amount(amount)
    sharers = _validate_sharers(sharer_ids)

    with store.lock:
        existing_participants = {p.participant_id for p in store.participants}

        if payer_id not in existing_participants:
            raise ReferentialError(f"payer_id '{payer_id}' is not a participant")
        for sharer_id in sharers:
            if sharer_id not in existing_participants:
                raise ReferentialError(f"sharer '{sharer_id}' is not a participant")

        expense = Expense(
            expense_id=expense_id or _generate_expense_id(),
            description=description.strip(),
            amount=value,
            payer_id=payer_id,
            sharer_ids=sharers
        )

        expenses = store.expenses
        for index, current in enumerate(expenses):
            if current.expense_id == expense.expense_id:
                expenses[index] = expense
                action = "Updated"
                break
        else:
            expenses.append(expense)
            action = "Added"

        store.commit(expenses=expenses)

    logger.info("%s expense %s (%s)", action, expense.expense_id, expense.amount)
    return expense


def delete_expense(store, expense_id: str) -> None:
    """
    Delete an expense by ID.

    Notes:
        - Unknown IDs are a no-op
    """
    with store.lock:
        expenses = store.expenses
        remaining = [e for e in expenses if e.expense_id != expense_id]
        if len(remaining) == len(expenses):
            return
        store.commit(expenses=remaining)

    logger.info("Deleted expense %s", expense_id)


def get_expense(store, expense_id: str) -> Optional[Expense]:
    """Look up an expense by ID, returning None when absent."""
    for expense in store.expenses:
        if expense.expense_id == expense_id:
            return expense
    return None


def get_expenses(store) -> list[Expense]:
    """
    Get all expenses in insertion order.

    Args:
        store: The LedgerStore holding the registries.

    Returns:
        list[Expense]: A copy of the expense list.
    """
    return store.expenses


def total_expenses(store) -> Decimal:
    """
    Sum of all expense amounts, for display.

    Returns:
        Decimal: Total amount recorded; Decimal("0") when there are none.
    """
    return sum((e.amount for e in store.expenses), Decimal("0"))
