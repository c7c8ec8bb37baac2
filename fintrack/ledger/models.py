"""Mini README: Transaction data model and field validation.

Structure:
    * TransactionType - enum representing income versus expense entries.
    * Transaction - frozen dataclass storing one ledger entry.
    * Snapshot - alias for the immutable tuple of transactions handed around.
    * validate_description / validate_amount - field rules shared by add and update.

Transactions are immutable: updates produce a new record through
``dataclasses.replace`` so snapshots handed to the engine never change under
the caller. ``as_dict``/``from_dict`` translate to the external JSON shape
``{id, description, amount, type, createdAt}`` used by the store and the API.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Mapping, Tuple

from ..errors import ValidationError


class TransactionType(str, Enum):
    """Enumerate the supported transaction categories."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: object) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().lower()
            return cls(normalised)
        except ValueError as error:
            raise ValidationError(
                f"Unsupported transaction type: {value!r} (expected income or expense)"
            ) from error


@dataclass(frozen=True, slots=True)
class Transaction:
    """Represent a single income or expense entry."""

    id: int
    description: str
    amount: float
    type: TransactionType
    created_at: datetime

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "Transaction":
        """Rebuild a transaction from its external shape, validating every field."""

        try:
            identifier = payload["id"]
            created_raw = payload["createdAt"]
        except KeyError as error:
            raise ValidationError(f"Transaction record is missing field {error.args[0]!r}") from error
        if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
            raise ValidationError(f"Transaction id must be an integer, got {identifier!r}")
        try:
            identifier = int(identifier)
        except ValueError as error:
            raise ValidationError(f"Transaction id must be an integer, got {identifier!r}") from error
        return cls(
            id=identifier,
            description=validate_description(payload.get("description")),
            amount=validate_amount(payload.get("amount")),
            type=TransactionType.from_str(payload.get("type")),
            created_at=parse_timestamp(created_raw),
        )


Snapshot = Tuple[Transaction, ...]


def validate_description(value: object) -> str:
    """Return the stripped description, rejecting blank values."""

    if not isinstance(value, str):
        raise ValidationError("Description must be text.")
    stripped = value.strip()
    if not stripped:
        raise ValidationError("Description must not be empty.")
    return stripped


def validate_amount(value: object) -> float:
    """Return the amount as a float, rejecting non-numeric, non-finite or non-positive values."""

    if isinstance(value, bool):
        raise ValidationError("Amount must be a number.")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValidationError(f"Amount must be a number, got {value!r}.") from error
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number.")
    return amount


def parse_timestamp(value: object) -> datetime:
    """Parse ISO strings, datetimes or epoch milliseconds into aware UTC datetimes."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as error:
            raise ValidationError(f"Timestamp out of range: {value!r}") from error
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as error:
            raise ValidationError(f"Invalid timestamp: {value!r}") from error
    else:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
