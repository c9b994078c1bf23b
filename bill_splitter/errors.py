"""
Errors Module

Exception types raised by the bill splitter core.

Both errors subclass ValueError so callers that already treat ValueError as
"bad input" (the HTTP layer maps it to 400) keep working unchanged.

Classes:
    ValidationError: Input rejected before it reaches the ledger.
    ReferentialError: Payer or sharer does not exist in the participant set.
"""


class ValidationError(ValueError):
    """Raised when an expense or participant fails input validation."""


class ReferentialError(ValueError):
    """Raised when an expense references a participant that does not exist."""
