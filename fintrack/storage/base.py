"""Mini README: Abstract store contract for persisting the ledger.

Structure:
    * TransactionStore - abstract base implemented by every backend.

Backends only implement ``load``/``save``. The shared ``apply`` helper runs a
load-modify-save sequence under a re-entrant lock so two requests handled on
different threads never interleave and lose each other's updates.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Tuple, TypeVar

from ..ledger.models import Snapshot, Transaction
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

ResultT = TypeVar("ResultT")


class TransactionStore(ABC):
    """Base interface for ledger persistence backends."""

    backend_name: str = "generic"

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod
    def load(self) -> Snapshot:
        """Return the current ledger, raising ``StorageError`` on failure."""

    @abstractmethod
    def save(self, transactions: Iterable[Transaction]) -> None:
        """Replace the persisted ledger, raising ``StorageError`` on failure."""

    def apply(self, operation: Callable[[Snapshot], Tuple[Snapshot, ResultT]]) -> ResultT:
        """Load, transform and save as one step; return the operation's result.

        Nothing is saved when ``operation`` raises.
        """

        with self._lock:
            snapshot = self.load()
            updated, result = operation(snapshot)
            self.save(updated)
            LOGGER.debug(
                "%s store applied mutation (%s -> %s entries)",
                self.backend_name,
                len(snapshot),
                len(updated),
            )
            return result
