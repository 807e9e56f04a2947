"""Integration tests for the execute, data and status endpoints."""
from __future__ import annotations

import pytest


@pytest.fixture
def loaded_client(orders_csv, client):
    return client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_execute_returns_coerced_rows(loaded_client):
    resp = loaded_client.post("/api/execute", json={"sql": "SELECT * FROM [orders] LIMIT 10"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["fields"] == ["order_id", "amount"]
    assert body["rows"] == [
        {"order_id": "A1", "amount": 10.5},
        {"order_id": "A2", "amount": "bad"},
    ]


def test_execute_failure_is_200_with_ok_false(loaded_client):
    resp = loaded_client.post("/api/execute", json={"sql": "DELETE FROM [orders]"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is False
    assert body["kind"] == "statement_rejected"
    assert "only read statements permitted" in body["error"]


def test_execute_applies_requested_limit(loaded_client):
    body = loaded_client.post(
        "/api/execute", json={"sql": "SELECT [order_id] FROM [orders]", "limit": 1},
    ).json()

    assert body["sql"] == "SELECT [order_id] FROM [orders] LIMIT 1"
    assert len(body["rows"]) == 1


def test_execute_without_sql_is_400(client):
    resp = client.post("/api/execute", json={})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing sql"


def test_execute_when_data_dir_removed(tmp_path):
    from fastapi.testclient import TestClient
    from tabchat.api.app import create_app

    missing = tmp_path / "gone"
    with TestClient(create_app(missing)) as c:
        missing.rmdir()
        body = c.post("/api/execute", json={"sql": "SELECT 1"}).json()

    assert body["ok"] is False
    assert body["kind"] == "no_data_directory"


def test_list_files(loaded_client):
    resp = loaded_client.get("/api/data/files")
    assert resp.json() == {"files": [{"name": "orders", "file": "orders.csv"}]}


def test_get_single_file_and_404(loaded_client):
    assert loaded_client.get("/api/data/files/orders").json() == {"name": "orders", "file": "orders.csv"}

    resp = loaded_client.get("/api/data/files/missing")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "CSV not found"}


def test_preview(loaded_client):
    body = loaded_client.get("/api/data/preview", params={"table": "orders", "limit": 1}).json()
    assert body["ok"] is True
    assert body["rows"] == [{"order_id": "A1", "amount": "10.5"}]


def test_preview_unknown_table(loaded_client):
    body = loaded_client.get("/api/data/preview", params={"table": "nope"}).json()
    assert body == {"ok": False, "rows": None, "error": "CSV not found"}


def test_status_without_provider(loaded_client):
    body = loaded_client.get("/api/status").json()

    assert body["provider"] == "none"
    assert body["has_database"] is True
    assert body["tables"] == ["orders"]
    assert any("OPENROUTER_API_KEY" in tip for tip in body["tips"])


def test_status_with_empty_data_dir(client):
    body = client.get("/api/status").json()

    assert body["has_database"] is False
    assert body["tables"] == []
    assert any("CSV files" in tip for tip in body["tips"])
