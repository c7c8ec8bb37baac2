"""Mini README: JSON file backend for the ledger.

Structure:
    * JsonFileStore - reads and writes a pretty-printed JSON array of records.

The file holds the external transaction shape
``{id, description, amount, type, createdAt}``. A missing file is created as
an empty list on first use. Files written by the earliest CLI releases stored
``primeId`` (epoch milliseconds) instead of ``id``/``createdAt``; such records
are upgraded on load and rewritten in the current shape on the next save.
Writes go to a sibling temporary file which then replaces the original, so a
crash mid-write never leaves half a JSON document behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List

from ..errors import StorageError, ValidationError
from ..ledger.models import Snapshot, Transaction
from ..logging_utils import get_logger
from .base import TransactionStore

LOGGER = get_logger(__name__)


def _upgrade_legacy_record(record: Dict[str, object]) -> Dict[str, object]:
    """Map ``primeId`` records onto the ``id``/``createdAt`` shape."""

    if "primeId" in record and "id" not in record:
        upgraded = {key: value for key, value in record.items() if key != "primeId"}
        upgraded["id"] = record["primeId"]
        upgraded.setdefault("createdAt", record["primeId"])
        return upgraded
    return record


class JsonFileStore(TransactionStore):
    """Persist the ledger as a JSON document on disk."""

    backend_name = "json"

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _ensure_file(self) -> None:
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")
        except OSError as error:
            raise StorageError(f"Cannot create ledger file {self.path}: {error}") from error
        LOGGER.info("Created empty ledger file at %s", self.path)

    def load(self) -> Snapshot:
        with self._lock:
            self._ensure_file()
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as error:
                raise StorageError(f"Cannot read ledger file {self.path}: {error}") from error
            except json.JSONDecodeError as error:
                raise StorageError(f"Ledger file {self.path} is not valid JSON: {error}") from error
            if not isinstance(raw, list):
                raise StorageError(f"Ledger file {self.path} must contain a JSON array.")

            transactions: List[Transaction] = []
            seen = set()
            for position, record in enumerate(raw, start=1):
                if not isinstance(record, dict):
                    raise StorageError(f"Record #{position} in {self.path} is not an object.")
                try:
                    transaction = Transaction.from_dict(_upgrade_legacy_record(record))
                except ValidationError as error:
                    raise StorageError(f"Record #{position} in {self.path} is invalid: {error}") from error
                if transaction.id in seen:
                    raise StorageError(f"Duplicate transaction id {transaction.id} in {self.path}.")
                seen.add(transaction.id)
                transactions.append(transaction)
            LOGGER.debug("Loaded %s transactions from %s", len(transactions), self.path)
            return tuple(transactions)

    def save(self, transactions: Iterable[Transaction]) -> None:
        payload = [transaction.as_dict() for transaction in transactions]
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                descriptor, temp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
                )
                try:
                    with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                        json.dump(payload, handle, indent=2, ensure_ascii=False)
                    os.replace(temp_name, self.path)
                except BaseException:
                    Path(temp_name).unlink(missing_ok=True)
                    raise
            except OSError as error:
                LOGGER.error("Saving ledger to %s failed: %s", self.path, error)
                raise StorageError(f"Cannot write ledger file {self.path}: {error}") from error
            LOGGER.info("Saved %s transactions to %s", len(payload), self.path)
