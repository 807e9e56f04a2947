"""Shared test fixtures.

  data_dir    — empty temp directory standing in for DATA_DIR.
  write_csv   — factory writing ``<name>.csv`` into data_dir.
  store       — fresh in-memory TabularStore backed by data_dir.
  client      — FastAPI TestClient; its lifespan ingests data_dir.
"""
import pytest

from tabchat.config import settings


@pytest.fixture(autouse=True)
def no_llm_keys(monkeypatch):
    """Keep real provider keys from the environment out of every test."""
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", None)
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def write_csv(data_dir):
    def _write(name: str, content: str):
        path = data_dir / f"{name}.csv"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def store(data_dir):
    from tabchat.infra.db.store import TabularStore

    s = TabularStore(data_dir)
    yield s
    s.dispose()


@pytest.fixture
def orders_csv(write_csv):
    return write_csv("orders", "order_id,amount\nA1,10.5\nA2,bad\n")


@pytest.fixture
def client(data_dir):
    """TestClient over an app whose store is ingested from data_dir at startup."""
    from fastapi.testclient import TestClient
    from tabchat.api.app import create_app

    app = create_app(data_dir)
    with TestClient(app) as c:
        yield c
