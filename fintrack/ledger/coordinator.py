"""Mini README: Create, update and delete operations over ledger snapshots.

Structure:
    * TransactionDraft - validated input for new transactions.
    * IdGenerator - issues strictly increasing, collision-checked identifiers.
    * MutationCoordinator - applies changes and returns new snapshots.

Every operation takes a snapshot (tuple of transactions) and returns a new
tuple alongside the affected record. Inputs are never modified, so a failed
operation leaves the caller's snapshot exactly as it was. Failures raise the
typed errors from ``fintrack.errors``.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..errors import NotFoundError, OutOfRangeError, ValidationError
from ..logging_utils import get_logger
from .models import (
    Snapshot,
    Transaction,
    TransactionType,
    validate_amount,
    validate_description,
)

LOGGER = get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"description", "amount", "type"})

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class TransactionDraft:
    """Fields supplied by a caller when recording a new transaction."""

    description: str
    amount: float
    type: TransactionType

    @classmethod
    def build(cls, description: object, amount: object, type: object) -> "TransactionDraft":
        """Validate raw input (menu answers, JSON bodies) into a draft."""

        return cls(
            description=validate_description(description),
            amount=validate_amount(amount),
            type=TransactionType.from_str(type),
        )


class IdGenerator:
    """Issue identifiers derived from the clock in milliseconds.

    The candidate is raised above every id already in the snapshot and above
    the last id this generator issued, so two rapid additions within the same
    millisecond, or an addition right after deleting the newest entry, never
    produce a duplicate or reused identifier.
    """

    def __init__(self, millis: Optional[Callable[[], int]] = None) -> None:
        self._millis = millis or (lambda: time.time_ns() // 1_000_000)
        self._last_issued = 0
        self._lock = threading.Lock()

    def next_id(self, existing: Iterable[int] = ()) -> int:
        with self._lock:
            candidate = max(self._millis(), self._last_issued + 1, max(existing, default=0) + 1)
            self._last_issued = candidate
            return candidate


class MutationCoordinator:
    """Apply ledger mutations to snapshots."""

    def __init__(self, id_generator: Optional[IdGenerator] = None, clock: Optional[Clock] = None) -> None:
        self._ids = id_generator or IdGenerator()
        self._clock = clock or _utc_now

    def add(self, snapshot: Iterable[Transaction], draft: TransactionDraft) -> Tuple[Snapshot, Transaction]:
        """Append a new transaction stamped with a fresh id and creation time."""

        current = tuple(snapshot)
        if not isinstance(draft, TransactionDraft):
            raise ValidationError("A TransactionDraft is required to add a transaction.")
        created = Transaction(
            id=self._ids.next_id(transaction.id for transaction in current),
            description=draft.description,
            amount=draft.amount,
            type=draft.type,
            created_at=self._clock(),
        )
        LOGGER.info("Added %s transaction %s (%.2f)", created.type.value, created.id, created.amount)
        return current + (created,), created

    def update(
        self, snapshot: Iterable[Transaction], transaction_id: int, changes: Mapping[str, object]
    ) -> Tuple[Snapshot, Transaction]:
        """Merge the supplied fields into an existing transaction."""

        current = tuple(snapshot)
        index = _index_of(current, transaction_id)
        coerced = _coerce_changes(changes)
        updated = replace(current[index], **coerced)
        LOGGER.info("Updated transaction %s fields=%s", transaction_id, sorted(coerced))
        return current[:index] + (updated,) + current[index + 1 :], updated

    def delete_by_id(self, snapshot: Iterable[Transaction], transaction_id: int) -> Tuple[Snapshot, Transaction]:
        """Remove the transaction carrying ``transaction_id``."""

        current = tuple(snapshot)
        index = _index_of(current, transaction_id)
        removed = current[index]
        LOGGER.info("Deleted transaction %s", transaction_id)
        return current[:index] + current[index + 1 :], removed

    def delete_by_position(self, snapshot: Iterable[Transaction], position: int) -> Tuple[Snapshot, Transaction]:
        """Remove the transaction shown at 1-based ``position``."""

        current = tuple(snapshot)
        if isinstance(position, bool) or not isinstance(position, int) or not 1 <= position <= len(current):
            raise OutOfRangeError(
                f"Position {position!r} is outside the ledger (1-{len(current)})."
            )
        removed = current[position - 1]
        LOGGER.info("Deleted transaction %s at position %s", removed.id, position)
        return current[: position - 1] + current[position:], removed


def _index_of(snapshot: Snapshot, transaction_id: int) -> int:
    for index, transaction in enumerate(snapshot):
        if transaction.id == transaction_id:
            return index
    raise NotFoundError(f"Transaction {transaction_id} not found")


def _coerce_changes(changes: Mapping[str, object]) -> Dict[str, object]:
    """Validate partial updates; ``None`` values mean "leave unchanged"."""

    coerced: Dict[str, object] = {}
    for key, value in changes.items():
        if key not in UPDATABLE_FIELDS:
            raise ValidationError(f"Field '{key}' cannot be updated.")
        if value is None:
            continue
        if key == "description":
            coerced[key] = validate_description(value)
        elif key == "amount":
            coerced[key] = validate_amount(value)
        else:
            coerced[key] = TransactionType.from_str(value)
    return coerced
