"""Mini README: Interactive terminal menu for the finance tracker.

Structure:
    * MenuState - one state per prompt the operator can be looking at.
    * LedgerMenu - blocking read loop dispatching each state to a handler.

The loop reads exactly one answer per prompt and each handler returns the
next state, so there is never more than one question outstanding. Input and
output are injectable; tests drive the menu with scripted answers while the
real CLI uses ``input`` and ``typer.echo``.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

import typer

from ..configuration import FinanceSettings, get_settings
from ..errors import OutOfRangeError, StorageError, ValidationError
from ..ledger import MutationCoordinator, Snapshot, TransactionDraft, TransactionType, engine
from ..logging_utils import get_logger
from ..storage import TransactionStore, build_store

LOGGER = get_logger(__name__)

MENU_LINES = (
    "",
    "=== Finance Tracker CLI ===",
    "1. View all transactions",
    "2. Add income",
    "3. Add expense",
    "4. View balance",
    "5. Search transactions",
    "6. Delete transaction",
    "7. Export to CSV",
    "8. Exit",
    "==========================",
)


class MenuState(str, Enum):
    """Screens of the interactive menu."""

    MAIN = "main"
    VIEW = "view"
    ADD_INCOME = "add_income"
    ADD_EXPENSE = "add_expense"
    BALANCE = "balance"
    SEARCH = "search"
    DELETE = "delete"
    EXPORT = "export"
    EXIT = "exit"


CHOICES: Dict[str, MenuState] = {
    "1": MenuState.VIEW,
    "2": MenuState.ADD_INCOME,
    "3": MenuState.ADD_EXPENSE,
    "4": MenuState.BALANCE,
    "5": MenuState.SEARCH,
    "6": MenuState.DELETE,
    "7": MenuState.EXPORT,
    "8": MenuState.EXIT,
}


class LedgerMenu:
    """Drive the ledger through numbered menu choices."""

    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        settings: Optional[FinanceSettings] = None,
        *,
        coordinator: Optional[MutationCoordinator] = None,
        prompt: Callable[[str], str] = input,
        echo: Callable[[str], None] = typer.echo,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store or build_store(self.settings)
        self.coordinator = coordinator or MutationCoordinator()
        self._prompt = prompt
        self._echo = echo
        self._today = today
        self._handlers: Dict[MenuState, Callable[[], MenuState]] = {
            MenuState.MAIN: self._main,
            MenuState.VIEW: self._view,
            MenuState.ADD_INCOME: lambda: self._add(TransactionType.INCOME),
            MenuState.ADD_EXPENSE: lambda: self._add(TransactionType.EXPENSE),
            MenuState.BALANCE: self._balance,
            MenuState.SEARCH: self._search,
            MenuState.DELETE: self._delete,
            MenuState.EXPORT: self._export,
        }

    def run(self) -> None:
        """Run until the operator exits or input is exhausted."""

        self._echo("Welcome to Finance Tracker CLI!")
        state = MenuState.MAIN
        while state is not MenuState.EXIT:
            try:
                state = self._handlers[state]()
            except EOFError:
                state = MenuState.EXIT
        self._echo("Goodbye!")

    def _money(self, amount: float) -> str:
        return engine.format_currency(amount, self.settings.currency)

    def _load(self) -> Snapshot:
        try:
            return self.store.load()
        except StorageError as error:
            if not self.settings.degrade_on_storage_error:
                raise
            LOGGER.error("Loading transactions failed, continuing with an empty ledger: %s", error)
            self._echo(f"Error loading transactions: {error}")
            return ()

    def _main(self) -> MenuState:
        for line in MENU_LINES:
            self._echo(line)
        choice = self._prompt("Choose an option (1-8): ").strip()
        state = CHOICES.get(choice)
        if state is None:
            self._echo("Invalid choice. Please try again.")
            return MenuState.MAIN
        return state

    def _print_table(self, transactions: Snapshot) -> None:
        self._echo("")
        self._echo("All Transactions:")
        self._echo(f"{'ID':<5} {'Date':<12} {'Description':<20} {'Amount':<10} Type")
        self._echo("-" * 60)
        for position, transaction in enumerate(transactions, start=1):
            self._echo(
                f"{position:<5} {transaction.created_at.date().isoformat():<12} "
                f"{transaction.description[:18]:<20} {self._money(transaction.amount):<10} "
                f"{transaction.type.value}"
            )
        self._echo("")
        self._echo(f"Current Balance: {self._money(engine.balance(transactions))}")

    def _view(self) -> MenuState:
        transactions = self._load()
        if not transactions:
            self._echo("No transactions found.")
        else:
            self._print_table(transactions)
        return MenuState.MAIN

    def _add(self, transaction_type: TransactionType) -> MenuState:
        label = transaction_type.value
        description = self._prompt(f"Enter {label} description: ")
        amount = self._prompt(f"Enter {label} amount: ")
        try:
            draft = TransactionDraft.build(description, amount.strip(), transaction_type)
        except ValidationError as error:
            LOGGER.warning("Rejected %s entry: %s", label, error)
            self._echo(f"Invalid entry: {error}")
            return MenuState.MAIN
        try:
            self.store.apply(lambda snapshot: self.coordinator.add(snapshot, draft))
        except StorageError as error:
            self._echo(f"Error saving transactions: {error}")
            return MenuState.MAIN
        self._echo("Transactions saved successfully.")
        self._echo(f"{label.capitalize()} added successfully!")
        return MenuState.MAIN

    def _balance(self) -> MenuState:
        aggregate = engine.totals(self._load())
        self._echo("")
        self._echo(f"Current Balance: {self._money(aggregate.balance)}")
        self._echo(f"Total Income: {self._money(aggregate.income)}")
        self._echo(f"Total Expenses: {self._money(aggregate.expense)}")
        return MenuState.MAIN

    def _search(self) -> MenuState:
        query = self._prompt("Enter search term: ")
        results = engine.search(self._load(), query)
        if not results:
            self._echo("No transactions found matching your search.")
            return MenuState.MAIN
        self._echo("")
        self._echo(f"Found {len(results)} transaction(s):")
        for position, transaction in enumerate(results, start=1):
            self._echo(
                f"{position}. {transaction.created_at.date().isoformat()} - {transaction.description}"
                f" - {self._money(transaction.amount)} ({transaction.type.value})"
            )
        return MenuState.MAIN

    def _delete(self) -> MenuState:
        transactions = self._load()
        if not transactions:
            self._echo("No transactions found.")
            return MenuState.MAIN
        self._print_table(transactions)
        answer = self._prompt("\nEnter transaction ID to delete (or 0 to cancel): ").strip()
        try:
            position = int(answer)
        except ValueError:
            self._echo("Invalid transaction ID.")
            return MenuState.MAIN
        if position == 0:
            return MenuState.MAIN
        try:
            removed = self.store.apply(
                lambda snapshot: self.coordinator.delete_by_position(snapshot, position)
            )
        except OutOfRangeError:
            self._echo("Invalid transaction ID.")
            return MenuState.MAIN
        except StorageError as error:
            self._echo(f"Error saving transactions: {error}")
            return MenuState.MAIN
        self._echo(f'Transaction "{removed.description}" deleted successfully.')
        return MenuState.MAIN

    def _export(self) -> MenuState:
        transactions = self._load()
        if not transactions:
            self._echo("No transactions to export.")
            return MenuState.MAIN
        try:
            destination = export_csv(transactions, self.settings.export_directory, self._today())
        except OSError as error:
            LOGGER.error("CSV export failed: %s", error)
            self._echo(f"Error exporting transactions: {error}")
            return MenuState.MAIN
        self._echo(f"Transactions exported to {destination}")
        return MenuState.MAIN


def export_csv(transactions: Snapshot, directory: Path, today: date) -> Path:
    """Write ``transactions`` as CSV into ``directory`` and return the file path."""

    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / engine.export_filename(today)
    destination.write_text(engine.to_csv(transactions), encoding="utf-8")
    LOGGER.info("Exported %s transactions to %s", len(transactions), destination)
    return destination
