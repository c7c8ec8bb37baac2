"""Mini README: Ledger core for the finance tracker.

This package holds the transaction model, the pure engine computations and
the mutation coordinator. It performs no I/O: adapters load a snapshot from
a store, call into these modules and persist whatever comes back.
"""

from .coordinator import IdGenerator, MutationCoordinator, TransactionDraft
from .engine import (
    CsvRow,
    LedgerSummary,
    Totals,
    balance,
    export_filename,
    format_currency,
    parse_csv,
    recent,
    search,
    summarise,
    to_csv,
    totals,
)
from .models import Snapshot, Transaction, TransactionType

__all__ = [
    "CsvRow",
    "IdGenerator",
    "LedgerSummary",
    "MutationCoordinator",
    "Snapshot",
    "Totals",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "balance",
    "export_filename",
    "format_currency",
    "parse_csv",
    "recent",
    "search",
    "summarise",
    "to_csv",
    "totals",
]
