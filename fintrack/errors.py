"""Mini README: Error types shared by the ledger core and its adapters.

Structure:
    * LedgerError - base class for every expected ledger failure.
    * ValidationError - bad description, amount or type on add/update.
    * NotFoundError - no transaction carries the requested identifier.
    * OutOfRangeError - a displayed position falls outside the ledger.
    * StorageError - the store could not load or save the ledger.

Adapters translate these into console messages or HTTP status codes; the
core only raises them.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for ledger operations."""


class ValidationError(LedgerError):
    """Raised when a transaction field fails validation."""


class NotFoundError(LedgerError):
    """Raised when an operation addresses a transaction id that does not exist."""


class OutOfRangeError(LedgerError):
    """Raised when a 1-based position is outside ``[1, len(ledger)]``."""


class StorageError(LedgerError):
    """Raised when the persisted ledger cannot be read or written."""
