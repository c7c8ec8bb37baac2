"""Mini README: Transient in-process ledger store.

Useful for the HTTP service in demos and for tests. Each instance owns its
own tuple; nothing is shared between stores.
"""

from __future__ import annotations

from typing import Iterable

from ..ledger.models import Snapshot, Transaction
from .base import TransactionStore


class MemoryStore(TransactionStore):
    """Keep the ledger in process memory."""

    backend_name = "memory"

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        super().__init__()
        self._transactions: Snapshot = tuple(transactions)

    def load(self) -> Snapshot:
        return self._transactions

    def save(self, transactions: Iterable[Transaction]) -> None:
        self._transactions = tuple(transactions)
