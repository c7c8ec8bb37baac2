"""Mini README: Persistence backends for the ledger.

Structure:
    * TransactionStore - abstract load/save contract with locked ``apply``.
    * JsonFileStore - JSON file snapshot on disk.
    * MemoryStore - transient process memory.
    * build_store - choose a backend from ``FinanceSettings``.
"""

from __future__ import annotations

from ..configuration import FinanceSettings
from ..logging_utils import get_logger
from .base import TransactionStore
from .json_store import JsonFileStore
from .memory_store import MemoryStore

LOGGER = get_logger(__name__)


def build_store(settings: FinanceSettings) -> TransactionStore:
    """Instantiate the backend selected by ``settings.storage_backend``."""

    if settings.storage_backend == "memory":
        LOGGER.info("Using in-memory ledger store")
        return MemoryStore()
    LOGGER.info("Using JSON ledger store at %s", settings.data_file)
    return JsonFileStore(settings.data_file)


__all__ = ["JsonFileStore", "MemoryStore", "TransactionStore", "build_store"]
