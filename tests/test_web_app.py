"""Mini README: Tests for the FastAPI routes.

Each test builds an isolated application backed by a ``MemoryStore`` and
exercises it through ``TestClient``: CRUD endpoints, aggregate views, CSV
export and the error-to-status mapping.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fintrack.configuration import FinanceSettings
from fintrack.errors import StorageError
from fintrack.interface import create_application
from fintrack.ledger import engine
from fintrack.storage import JsonFileStore, MemoryStore, TransactionStore


@pytest.fixture()
def client(tmp_path) -> TestClient:
    settings = FinanceSettings(storage_backend="memory", data_file=tmp_path / "unused.json", currency="eur")
    return TestClient(create_application(settings=settings, store=MemoryStore()))


def _add(client: TestClient, description: str, amount: float, kind: str) -> dict:
    response = client.post("/api/transactions", json={"description": description, "amount": amount, "type": kind})
    assert response.status_code == 201
    return response.json()


def test_create_and_list_transactions(client: TestClient) -> None:
    """Created records come back in the external shape and insertion order."""

    salary = _add(client, "Salary", 1000, "income")
    rent = _add(client, "Rent", 400, "expense")
    assert set(salary) == {"id", "description", "amount", "type", "createdAt"}

    listed = client.get("/api/transactions").json()
    assert [entry["id"] for entry in listed] == [salary["id"], rent["id"]]


def test_create_rejects_invalid_payloads(client: TestClient) -> None:
    for payload in (
        {"description": "Rent", "amount": -4, "type": "expense"},
        {"description": "   ", "amount": 4, "type": "expense"},
        {"description": "Rent", "amount": 4, "type": "refund"},
        {"description": "Rent", "amount": "lots", "type": "expense"},
        {"amount": 4, "type": "expense"},
    ):
        response = client.post("/api/transactions", json=payload)
        assert response.status_code == 422
        assert "error" in response.json()
    assert client.get("/api/transactions").json() == []


def test_update_merges_fields(client: TestClient) -> None:
    rent = _add(client, "Rent", 400, "expense")
    response = client.put(f"/api/transactions/{rent['id']}", json={"amount": 450})
    assert response.status_code == 200
    body = response.json()
    assert body["amount"] == 450
    assert body["description"] == "Rent"
    assert body["createdAt"] == rent["createdAt"]


def test_update_with_negative_amount_is_rejected(client: TestClient) -> None:
    rent = _add(client, "Rent", 400, "expense")
    response = client.put(f"/api/transactions/{rent['id']}", json={"amount": -5})
    assert response.status_code == 422
    assert client.get("/api/transactions").json()[0]["amount"] == 400


def test_update_rejects_immutable_fields(client: TestClient) -> None:
    rent = _add(client, "Rent", 400, "expense")
    response = client.put(f"/api/transactions/{rent['id']}", json={"id": 1})
    assert response.status_code == 422


def test_update_and_delete_unknown_id_return_404(client: TestClient) -> None:
    assert client.put("/api/transactions/999", json={"amount": 1}).json() == {"error": "Transaction not found"}
    response = client.delete("/api/transactions/999")
    assert response.status_code == 404


def test_delete_removes_transaction(client: TestClient) -> None:
    salary = _add(client, "Salary", 1000, "income")
    rent = _add(client, "Rent", 400, "expense")
    response = client.delete(f"/api/transactions/{salary['id']}")
    assert response.status_code == 204
    assert [entry["id"] for entry in client.get("/api/transactions").json()] == [rent["id"]]


def test_balance_and_summary(client: TestClient) -> None:
    """Aggregate endpoints report the configured currency."""

    _add(client, "Salary", 1000, "income")
    _add(client, "Rent", 400, "expense")
    assert client.get("/api/balance").json() == {"balance": 600, "currency": "EUR"}
    assert client.get("/api/summary").json() == {
        "income": 1000,
        "expense": 400,
        "balance": 600,
        "transactionCount": 2,
        "currency": "EUR",
    }


def test_recent_limits(client: TestClient) -> None:
    for index in range(12):
        _add(client, f"Item {index}", index + 1, "expense")
    assert len(client.get("/api/transactions/recent").json()) == 10
    assert len(client.get("/api/transactions/recent?limit=abc").json()) == 10
    assert client.get("/api/transactions/recent?limit=0").json() == []
    latest = client.get("/api/transactions/recent?limit=2").json()
    assert [entry["description"] for entry in latest] == ["Item 10", "Item 11"]


def test_search_endpoint(client: TestClient) -> None:
    _add(client, "Grocery run", 30, "expense")
    _add(client, "Salary", 1000, "income")
    results = client.get("/api/transactions/search", params={"q": "GROCERY"}).json()
    assert [entry["description"] for entry in results] == ["Grocery run"]
    assert client.get("/api/transactions/search", params={"q": "nothing"}).json() == []


def test_export_returns_csv(client: TestClient) -> None:
    _add(client, "Books, used", 12.5, "expense")
    response = client.get("/api/transactions/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = engine.parse_csv(response.text)
    assert rows[0].description == "Books, used"
    assert rows[0].amount == 12.5


def test_invite_placeholder(client: TestClient) -> None:
    assert client.post("/api/invite", json={"email": "friend@example.com"}).json() == {
        "message": "Invite sent successfully"
    }
    assert client.post("/api/invite", json={"email": "nobody"}).status_code == 422


class _BrokenStore(TransactionStore):
    def load(self):
        raise StorageError("disk unavailable")

    def save(self, transactions) -> None:
        raise StorageError("disk unavailable")


def test_storage_failures_map_to_503(tmp_path) -> None:
    settings = FinanceSettings(storage_backend="memory", data_file=tmp_path / "unused.json")
    broken = TestClient(create_application(settings=settings, store=_BrokenStore()))
    response = broken.get("/api/transactions")
    assert response.status_code == 503
    assert response.json() == {"error": "Ledger storage unavailable"}


def test_undecodable_ledger_file_maps_to_503(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_bytes(b"[\xff]")
    settings = FinanceSettings(storage_backend="json", data_file=path)
    response = TestClient(create_application(settings=settings, store=JsonFileStore(path))).get("/api/summary")
    assert response.status_code == 503
