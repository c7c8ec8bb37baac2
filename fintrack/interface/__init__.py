"""Mini README: Interactive interfaces (web/CLI) for the finance tracker.

Exports the FastAPI application factory and the terminal menu. Both are thin
adapters: they load snapshots from a store, call the ledger core and render
the result.
"""

from .menu import LedgerMenu, MenuState, export_csv
from .web_app import create_application

__all__ = ["LedgerMenu", "MenuState", "create_application", "export_csv"]
