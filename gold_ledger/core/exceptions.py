# gold_ledger/core/exceptions.py

from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""
    pass


class OverdraftError(LedgerError):
    """A sale would take a lot below zero remaining quantity."""

    def __init__(self, lot_id: str, requested: Decimal, available: Decimal, message: Optional[str] = None):
        self.lot_id = lot_id
        self.requested = requested
        self.available = available
        super().__init__(
            message or f"Sale quantity ({requested}) exceeds remaining quantity ({available}) of lot '{lot_id}'."
        )


class NotFoundError(LedgerError):
    """A referenced lot, sale or batch does not exist."""

    def __init__(self, kind: str, identifier: str, parent_id: Optional[str] = None):
        self.kind = kind
        self.identifier = identifier
        self.parent_id = parent_id
        location = f" in lot '{parent_id}'" if parent_id else ""
        super().__init__(f"{kind.capitalize()} '{identifier}' not found{location}.")


class MalformedRecordError(LedgerError):
    """Persisted ledger payload could not be parsed."""
    pass


class BatchMemberError(LedgerError):
    """A batch member sale was targeted by an individual edit."""
    pass


class SelectionStateError(LedgerError):
    """The requested selection transition is not allowed in the current state."""
    pass
