"""Mini README: Tests for the interactive terminal menu.

The menu is driven with scripted answers and its output captured in a list,
covering additions, balance, search, deletion by displayed position, CSV
export, invalid input and the degraded mode for unreadable ledgers.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

import pytest

from fintrack.configuration import FinanceSettings
from fintrack.errors import StorageError
from fintrack.interface import LedgerMenu
from fintrack.ledger import engine
from fintrack.storage import JsonFileStore, MemoryStore, TransactionStore


def _run(answers: Iterable[str], tmp_path, store: TransactionStore = None, **overrides) -> tuple:
    settings = FinanceSettings(
        storage_backend="memory",
        data_file=tmp_path / "unused.json",
        export_directory=tmp_path / "exports",
        **overrides,
    )
    store = store if store is not None else MemoryStore()
    scripted = iter(answers)
    output: List[str] = []

    def prompt(question: str) -> str:
        output.append(question)
        try:
            return next(scripted)
        except StopIteration:
            raise EOFError from None

    LedgerMenu(store, settings, prompt=prompt, echo=output.append, today=lambda: date(2024, 5, 31)).run()
    return store, output


def test_add_income_and_expense_then_view_balance(tmp_path) -> None:
    """Menu additions land in the store and the balance screen reflects them."""

    store, output = _run(["2", "Salary", "1000", "3", "Rent", "400", "4", "8"], tmp_path)
    assert [transaction.description for transaction in store.load()] == ["Salary", "Rent"]
    assert "Income added successfully!" in output
    assert "Expense added successfully!" in output
    assert "Current Balance: $600.00" in output
    assert "Total Income: $1000.00" in output
    assert "Total Expenses: $400.00" in output
    assert output[-1] == "Goodbye!"


def test_invalid_amount_is_rejected(tmp_path) -> None:
    store, output = _run(["2", "Salary", "-10", "8"], tmp_path)
    assert store.load() == ()
    assert any(line.startswith("Invalid entry:") for line in output)


def test_invalid_choice_shows_menu_again(tmp_path) -> None:
    _, output = _run(["9", "8"], tmp_path)
    assert "Invalid choice. Please try again." in output
    assert output.count("=== Finance Tracker CLI ===") == 2


def test_view_lists_positions_and_balance(tmp_path) -> None:
    _, output = _run(["2", "A very long salary description", "50", "1", "8"], tmp_path)
    row = next(line for line in output if line.startswith("1 "))
    assert "A very long salary" in row
    assert "description" not in row
    assert "Current Balance: $50.00" in output


def test_view_on_empty_ledger(tmp_path) -> None:
    _, output = _run(["1", "8"], tmp_path)
    assert "No transactions found." in output


def test_search_reports_matches(tmp_path) -> None:
    _, output = _run(["3", "Coffee beans", "12", "3", "Rent", "400", "5", "coffee", "5", "tax", "8"], tmp_path)
    assert "Found 1 transaction(s):" in output
    assert any("Coffee beans - $12.00 (expense)" in line for line in output)
    assert "No transactions found matching your search." in output


def test_delete_by_displayed_position(tmp_path) -> None:
    store, output = _run(["2", "Salary", "1000", "3", "Rent", "400", "6", "1", "8"], tmp_path)
    assert [transaction.description for transaction in store.load()] == ["Rent"]
    assert 'Transaction "Salary" deleted successfully.' in output


@pytest.mark.parametrize("answer", ["5", "abc"])
def test_delete_with_invalid_position(tmp_path, answer: str) -> None:
    store, output = _run(["2", "Salary", "1000", "6", answer, "8"], tmp_path)
    assert len(store.load()) == 1
    assert "Invalid transaction ID." in output


def test_delete_cancelled_with_zero(tmp_path) -> None:
    store, _ = _run(["2", "Salary", "1000", "6", "0", "8"], tmp_path)
    assert len(store.load()) == 1


def test_export_writes_dated_csv(tmp_path) -> None:
    _, output = _run(["3", "Books", "20", "7", "8"], tmp_path)
    exported = tmp_path / "exports" / "transactions_2024-05-31.csv"
    assert f"Transactions exported to {exported}" in output
    (row,) = engine.parse_csv(exported.read_text(encoding="utf-8"))
    assert row.description == "Books"


def test_export_with_empty_ledger(tmp_path) -> None:
    _, output = _run(["7", "8"], tmp_path)
    assert "No transactions to export." in output


def test_end_of_input_exits_cleanly(tmp_path) -> None:
    _, output = _run([], tmp_path)
    assert output[-1] == "Goodbye!"


def test_currency_setting_changes_display(tmp_path) -> None:
    _, output = _run(["2", "Salary", "10", "4", "8"], tmp_path, currency="INR")
    assert "Current Balance: ₹10.00" in output


class _UnreadableStore(MemoryStore):
    def load(self):
        raise StorageError("corrupt file")


def test_unreadable_ledger_is_treated_as_empty_when_degrading(tmp_path) -> None:
    _, output = _run(["1", "8"], tmp_path, store=_UnreadableStore())
    assert "Error loading transactions: corrupt file" in output
    assert "No transactions found." in output


def test_unreadable_ledger_propagates_when_degrading_disabled(tmp_path) -> None:
    with pytest.raises(StorageError):
        _run(["1", "8"], tmp_path, store=_UnreadableStore(), degrade_on_storage_error=False)


def test_undecodable_ledger_file_is_treated_as_empty(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_bytes(b"[\xff]")
    _, output = _run(["1", "8"], tmp_path, store=JsonFileStore(path))
    assert any(line.startswith("Error loading transactions:") for line in output)
    assert "No transactions found." in output
    assert output[-1] == "Goodbye!"


def test_export_failure_is_reported_and_menu_continues(tmp_path) -> None:
    """An export directory that cannot be created prints an error instead of exiting."""

    (tmp_path / "exports").write_text("not a directory")
    store, output = _run(["3", "Books", "20", "7", "4", "8"], tmp_path)
    assert any(line.startswith("Error exporting transactions:") for line in output)
    assert "Current Balance: $-20.00" in output
    assert len(store.load()) == 1
