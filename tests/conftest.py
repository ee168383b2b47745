"""Pytest fixtures: a throwaway SQLite database per test and an API client bound to it."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from finance_tracker import database
from finance_tracker.api import app


@pytest.fixture(autouse=True)
def _isolated_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point DATABASE_URL at a per-test SQLite file and create the schema."""

    db_file = tmp_path / "transactions.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{os.fspath(db_file)}")
    database.reset_engine()
    database.init_db()
    yield
    database.reset_engine()


@pytest.fixture
def session():
    s = database.get_session()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def seed(client: TestClient):
    """Create transactions through the API and return the created records."""

    def _seed(*rows: dict) -> list[dict]:
        created = []
        for row in rows:
            body = {"currency": "USD", "description": "", **row}
            response = client.post("/transactions", json=body)
            assert response.status_code == 201, response.text
            created.append(response.json())
        return created

    return _seed
