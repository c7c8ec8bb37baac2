"""Mini README: Entry point CLI for the finance tracker.

This script exposes a Typer CLI with commands to start the HTTP service,
open the interactive menu, and print quick reports (balance, recent
transactions) or export the ledger to CSV without entering the menu. All
commands read ``FINTRACK_*`` settings and share the configured store.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from fintrack.configuration import get_settings
from fintrack.errors import StorageError
from fintrack.interface import LedgerMenu, export_csv
from fintrack.ledger import engine
from fintrack.logging_utils import configure_root_logger
from fintrack.storage import build_store

cli = typer.Typer(help="Track income and expenses from the terminal or over HTTP.")


def _load_or_exit():
    store = build_store(get_settings())
    try:
        return store.load()
    except StorageError as error:
        typer.echo(f"Error loading transactions: {error}", err=True)
        raise typer.Exit(code=1) from error


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Finance Tracker server running on http://{browser_host}:{effective_port}"
        f" (bound to {effective_host}, storage: {settings.storage_backend})"
    )
    uvicorn.run(
        "fintrack.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def menu() -> None:
    """Open the interactive numbered menu."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    LedgerMenu(settings=settings).run()


@cli.command()
def balance() -> None:
    """Print the balance together with income and expense totals."""

    settings = get_settings()
    aggregate = engine.totals(_load_or_exit())
    typer.echo(f"Current Balance: {engine.format_currency(aggregate.balance, settings.currency)}")
    typer.echo(f"Total Income: {engine.format_currency(aggregate.income, settings.currency)}")
    typer.echo(f"Total Expenses: {engine.format_currency(aggregate.expense, settings.currency)}")


@cli.command()
def recent(limit: int = typer.Option(None, help="How many transactions to show.")) -> None:
    """Print the most recent transactions, oldest first."""

    settings = get_settings()
    count = settings.recent_limit if limit is None else limit
    for transaction in engine.recent(_load_or_exit(), count):
        typer.echo(
            f"{transaction.created_at.date().isoformat()} - {transaction.description}"
            f" - {engine.format_currency(transaction.amount, settings.currency)} ({transaction.type.value})"
        )


@cli.command()
def export(
    directory: Optional[Path] = typer.Option(None, help="Directory receiving the CSV file."),
) -> None:
    """Write the ledger to transactions_<date>.csv."""

    settings = get_settings()
    transactions = _load_or_exit()
    if not transactions:
        typer.echo("No transactions to export.")
        return
    destination = export_csv(transactions, directory or settings.export_directory, date.today())
    typer.echo(f"Transactions exported to {destination}")


if __name__ == "__main__":
    cli()
