"""
Participants Module

This module handles all participant-related operations for the bill
splitter.

Features:
    - Add participants (duplicate names allowed, identity is the id)
    - Remove participants, cascading into the expense registry
    - Retrieve participant details

Data Model:
    Participant held in LedgerStore.participants
    Fields:
        - participant_id: string (uuid4 hex, generated on registration)
        - name: string (trimmed display name)

Functions:
    add_participant: Register a new participant.
    remove_participant: Remove a participant and cascade into expenses.
    get_participants: Get all participants in registration order.
    get_participant: Look up one participant by id.
"""

import logging
import uuid
from typing import Optional

from bill_splitter.errors import ValidationError

logger = logging.getLogger(__name__)


def _generate_participant_id() -> str:
    """Generate an opaque, process-unique participant ID."""
    return uuid.uuid4().hex


class Person:
    """
    Represents a participant in the shared ledger.

    Equality and hashing use participant_id only; two people may share a name.

    Attributes:
        participant_id (str): Unique identifier for the participant.
        name (str): Display name of the participant.
    """

    def __init__(self, name: str, participant_id: Optional[str] = None):
        self.participant_id = participant_id or _generate_participant_id()
        self.name = name

    def to_dict(self) -> dict:
        """Convert participant to a plain dictionary."""
        return {
            "participant_id": self.participant_id,
            "name": self.name
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Person":
        """Create a Person instance from a dictionary."""
        return cls(
            participant_id=data.get("participant_id"),
            name=data.get("name")
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return self.participant_id == other.participant_id

    def __hash__(self) -> int:
        return hash(self.participant_id)

    def __repr__(self) -> str:
        """Return string representation of participant."""
        return f"Person(id='{self.participant_id}', name='{self.name}')"


def _validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Args:
        value: String to validate.
        field_name: Name of the field for error messages.

    Returns:
        bool: True if valid.

    Raises:
        ValidationError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return True


def add_participant(store, name: str) -> Person:
    """
    Add a new participant to the ledger.

    Args:
        store: The LedgerStore holding the registries.
        name: Name of the participant (surrounding whitespace is trimmed).

    Returns:
        Person: The created participant, always with a fresh ID.

    Raises:
        ValidationError: If the name is blank.
    """
    _validate_non_empty_string(name, "name")

    person = Person(name=name.strip())

    with store.lock:
        store.commit(participants=store.participants + [person])

    logger.info("Added participant %s (%s)", person.name, person.participant_id)
    return person


def remove_participant(store, participant_id: str) -> None:
    """
    Remove a participant and every dangling reference to them.

    Cascade rules, applied in the same commit as the removal:
        - The participant is dropped from every expense's sharer list
        - Expenses left with no sharers are deleted
        - Expenses paid by the participant are deleted, even when other
          sharers remain, so no expense is left with a missing payer

    Args:
        store: The LedgerStore holding the registries.
        participant_id: ID of the participant to remove.

    Notes:
        - Unknown IDs are a no-op
    """
    with store.lock:
        participants = store.participants
        remaining = [p for p in participants if p.participant_id != participant_id]
        if len(remaining) == len(participants):
            return

        expenses = []
        dropped = 0
        for expense in store.expenses:
            sharers = [s for s in expense.sharer_ids if s != participant_id]
            if not sharers or expense.payer_id == participant_id:
                dropped += 1
                continue
            if len(sharers) != len(expense.sharer_ids):
                expense = expense.with_sharers(sharers)
            expenses.append(expense)

        store.commit(participants=remaining, expenses=expenses)

    logger.info(
        "Removed participant %s, dropped %d expense(s)", participant_id, dropped
    )


def get_participants(store) -> list[Person]:
    """
    Get all participants in registration order.

    Args:
        store: The LedgerStore holding the registries.

    Returns:
        list[Person]: A copy of the participant list.
    """
    return store.participants


def get_participant(store, participant_id: str) -> Optional[Person]:
    """Look up a participant by ID, returning None when absent."""
    for person in store.participants:
        if person.participant_id == participant_id:
            return person
    return None
