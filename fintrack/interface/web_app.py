"""Mini README: FastAPI-powered HTTP service for the finance tracker.

Structure:
    * create_application - application factory wiring routes, CORS and error handlers.
    * Request bodies - Pydantic models validating JSON payloads.

Each application instance owns one ``TransactionStore``; nothing lives in
module globals, so tests can spin up isolated apps backed by a
``MemoryStore``. Reads go straight to ``store.load()``; mutations run through
``store.apply`` so a request's load-modify-save happens as one step.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from ..configuration import FinanceSettings, get_settings
from ..errors import NotFoundError, OutOfRangeError, StorageError, ValidationError
from ..ledger import MutationCoordinator, TransactionDraft, engine
from ..logging_utils import get_logger
from ..storage import TransactionStore, build_store

LOGGER = get_logger(__name__)


class TransactionCreate(BaseModel):
    """Body accepted when recording a transaction."""

    description: str
    amount: float
    type: str


class TransactionUpdate(BaseModel):
    """Partial body accepted when editing a transaction."""

    description: Optional[str] = None
    amount: Optional[float] = None
    type: Optional[str] = None

    model_config = {"extra": "forbid"}


class InviteRequest(BaseModel):
    """Body for the invite placeholder endpoint."""

    email: str = Field(..., min_length=3)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_application(
    settings: Optional[FinanceSettings] = None,
    store: Optional[TransactionStore] = None,
    coordinator: Optional[MutationCoordinator] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    store = store or build_store(settings)
    coordinator = coordinator or MutationCoordinator()

    app = FastAPI(title="Finance Tracker", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def handle_validation(_: Request, error: ValidationError) -> JSONResponse:
        LOGGER.warning("Rejected request: %s", error)
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(error))

    @app.exception_handler(RequestValidationError)
    async def handle_body_validation(_: Request, error: RequestValidationError) -> JSONResponse:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in issue['loc'])}: {issue['msg']}" for issue in error.errors()
        )
        LOGGER.warning("Rejected request body: %s", messages)
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, messages)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_: Request, error: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Transaction not found")

    @app.exception_handler(OutOfRangeError)
    async def handle_out_of_range(_: Request, error: OutOfRangeError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(error))

    @app.exception_handler(StorageError)
    async def handle_storage(_: Request, error: StorageError) -> JSONResponse:
        LOGGER.error("Ledger storage failure: %s", error)
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Ledger storage unavailable")

    @app.get("/api/transactions")
    def list_transactions() -> JSONResponse:
        """Return every transaction in insertion order."""

        transactions = store.load()
        LOGGER.debug("Listing %s transactions", len(transactions))
        return JSONResponse([transaction.as_dict() for transaction in transactions])

    @app.post("/api/transactions", status_code=status.HTTP_201_CREATED)
    def create_transaction(body: TransactionCreate) -> JSONResponse:
        """Record a new transaction and return it with its assigned id."""

        draft = TransactionDraft.build(body.description, body.amount, body.type)
        created = store.apply(lambda snapshot: coordinator.add(snapshot, draft))
        return JSONResponse(created.as_dict(), status_code=status.HTTP_201_CREATED)

    @app.get("/api/transactions/recent")
    def recent_transactions(limit: Optional[str] = None) -> JSONResponse:
        """Return the last ``limit`` transactions (default from settings)."""

        count = engine.coerce_limit(limit, default=settings.recent_limit)
        return JSONResponse([transaction.as_dict() for transaction in engine.recent(store.load(), count)])

    @app.get("/api/transactions/search")
    def search_transactions(q: str = "") -> JSONResponse:
        """Case-insensitive description search."""

        results = engine.search(store.load(), q)
        LOGGER.debug("Search %r matched %s transactions", q, len(results))
        return JSONResponse([transaction.as_dict() for transaction in results])

    @app.get("/api/transactions/export")
    def export_transactions() -> PlainTextResponse:
        """Download the ledger as CSV."""

        filename = engine.export_filename(date.today())
        LOGGER.info("Exporting ledger as %s", filename)
        return PlainTextResponse(
            engine.to_csv(store.load()),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.put("/api/transactions/{transaction_id}")
    def update_transaction(transaction_id: int, body: TransactionUpdate) -> JSONResponse:
        """Apply a partial update to an existing transaction."""

        changes = body.model_dump(exclude_unset=True)
        updated = store.apply(lambda snapshot: coordinator.update(snapshot, transaction_id, changes))
        return JSONResponse(updated.as_dict())

    @app.delete("/api/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_transaction(transaction_id: int) -> Response:
        """Delete a transaction by id."""

        store.apply(lambda snapshot: coordinator.delete_by_id(snapshot, transaction_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/api/balance")
    def current_balance() -> JSONResponse:
        """Return the balance in the configured currency."""

        return JSONResponse({"balance": engine.balance(store.load()), "currency": settings.currency})

    @app.get("/api/summary")
    def summary() -> JSONResponse:
        """Return income, expense, balance and transaction count."""

        return JSONResponse(engine.summarise(store.load(), settings.currency).as_dict())

    @app.post("/api/invite")
    def invite(body: InviteRequest) -> JSONResponse:
        """Placeholder for inviting a collaborator; only records the request."""

        if "@" not in body.email:
            raise ValidationError("A valid email address is required.")
        LOGGER.info("Invite requested for %s", body.email)
        return JSONResponse({"message": "Invite sent successfully"})

    return app
