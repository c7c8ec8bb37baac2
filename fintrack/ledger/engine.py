"""Mini README: Pure ledger computations over transaction snapshots.

Structure:
    * Totals / LedgerSummary - aggregate figures for a snapshot.
    * balance, totals, summarise - income/expense arithmetic.
    * search, recent - retrieval helpers that preserve insertion order.
    * format_currency - display helper mapping currency codes to symbols.
    * to_csv, parse_csv, export_filename - CSV export and re-import.

Nothing in this module performs I/O or mutates its inputs. Every function
accepts any iterable of ``Transaction`` and returns fresh values, so the CLI
menu and the HTTP routes can share them freely.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..errors import ValidationError
from .models import Snapshot, Transaction, TransactionType, validate_amount

DEFAULT_RECENT_LIMIT = 10
CSV_HEADER = ("Date", "Description", "Amount", "Type")
CURRENCY_SYMBOLS: Dict[str, str] = {"USD": "$", "EUR": "€", "INR": "₹"}


@dataclass(frozen=True, slots=True)
class Totals:
    """Sum of amounts partitioned by transaction type."""

    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class LedgerSummary:
    """Aggregate view returned by summary endpoints."""

    income: float
    expense: float
    balance: float
    transaction_count: int
    currency: str

    def as_dict(self) -> Dict[str, object]:
        return {
            "income": self.income,
            "expense": self.expense,
            "balance": self.balance,
            "transactionCount": self.transaction_count,
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class CsvRow:
    """One row read back from a CSV export."""

    date: date
    description: str
    amount: float
    type: TransactionType


def totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum income and expense amounts separately."""

    income = 0.0
    expense = 0.0
    for transaction in transactions:
        if transaction.type is TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount
    return Totals(income=income, expense=expense)


def balance(transactions: Iterable[Transaction]) -> float:
    """Return income minus expenses.

    Derived from the partitioned totals rather than a running signed sum, so
    the result is identical whatever order the snapshot is in.
    """

    return totals(transactions).balance


def summarise(transactions: Iterable[Transaction], currency: str = "USD") -> LedgerSummary:
    """Collect totals, balance and count in a single pass-friendly structure."""

    snapshot = tuple(transactions)
    aggregate = totals(snapshot)
    return LedgerSummary(
        income=aggregate.income,
        expense=aggregate.expense,
        balance=aggregate.balance,
        transaction_count=len(snapshot),
        currency=currency,
    )


def search(transactions: Iterable[Transaction], query: Optional[str]) -> Snapshot:
    """Case-insensitive substring match against descriptions; blank queries match everything."""

    needle = (query or "").casefold()
    return tuple(
        transaction for transaction in transactions if needle in transaction.description.casefold()
    )


def coerce_limit(limit: object, default: int = DEFAULT_RECENT_LIMIT) -> int:
    """Interpret user supplied limits; fractions truncate, missing or non-numeric input gives ``default``."""

    if limit is None or isinstance(limit, bool):
        return default
    if isinstance(limit, int):
        return limit
    try:
        return int(float(str(limit).strip()))
    except (ValueError, OverflowError):
        return default


def recent(transactions: Iterable[Transaction], limit: object = DEFAULT_RECENT_LIMIT) -> Snapshot:
    """Return the last ``limit`` transactions in their original order."""

    snapshot = tuple(transactions)
    count = coerce_limit(limit)
    if count <= 0:
        return ()
    return snapshot[-count:]


def format_currency(amount: float, currency_code: str = "USD") -> str:
    """Prefix the amount, fixed to two decimals, with the currency symbol."""

    symbol = CURRENCY_SYMBOLS.get((currency_code or "").upper(), CURRENCY_SYMBOLS["USD"])
    return f"{symbol}{amount:.2f}"


def _format_amount(amount: float) -> str:
    # whole amounts render without a trailing ".0"
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def to_csv(transactions: Iterable[Transaction]) -> str:
    """Render ``Date,Description,Amount,Type`` rows with quoted descriptions."""

    lines = [",".join(CSV_HEADER)]
    for transaction in transactions:
        description = transaction.description.replace('"', '""')
        lines.append(
            f'{transaction.created_at.date().isoformat()},"{description}",'
            f"{_format_amount(transaction.amount)},{transaction.type.value}"
        )
    return "\n".join(lines)


def parse_csv(text: str) -> List[CsvRow]:
    """Read rows produced by :func:`to_csv` back into typed values."""

    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return []
    if tuple(header) != CSV_HEADER:
        raise ValidationError(f"Unexpected CSV header: {','.join(header)}")
    rows: List[CsvRow] = []
    for line_number, record in enumerate(reader, start=2):
        if not record:
            continue
        if len(record) != len(CSV_HEADER):
            raise ValidationError(f"CSV line {line_number} has {len(record)} columns, expected 4")
        raw_date, description, raw_amount, raw_type = record
        try:
            row_date = date.fromisoformat(raw_date)
        except ValueError as error:
            raise ValidationError(f"CSV line {line_number} has an invalid date: {raw_date!r}") from error
        rows.append(
            CsvRow(
                date=row_date,
                description=description,
                amount=validate_amount(raw_amount),
                type=TransactionType.from_str(raw_type),
            )
        )
    return rows


def export_filename(today: date) -> str:
    """Name used for CSV exports, e.g. ``transactions_2024-05-31.csv``."""

    return f"transactions_{today.isoformat()}.csv"
