"""Mini README: Core package initializer for the finance tracker.

The ledger core lives in ``fintrack.ledger``, persistence in
``fintrack.storage`` and the CLI/HTTP adapters in ``fintrack.interface``.
Only the logging helper is re-exported here so importing the package stays
free of web framework dependencies.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
