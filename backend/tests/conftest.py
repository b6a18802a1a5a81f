# backend/tests/conftest.py
import os

# Keep the module-level app from touching a database file on import
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from urmoney.config import Settings
from urmoney.database import Database
from urmoney.main import create_app


@pytest.fixture
def engine():
    # One in-memory DB shared across threads (TestClient) via StaticPool
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database(engine):
    database = Database(engine=engine)
    database.create_tables()
    return database


@pytest.fixture
def db_session(database):
    with database.session() as session:
        yield session


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        STATIC_DIR=str(tmp_path / "build"),
        SEED_DEFAULT_CATEGORIES=False,
    )


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_category(client):
    """Create a category through the API and return its id."""
    def _make(name="Food", color="#EF4444"):
        response = client.post("/api/categories", json={"name": name, "color": color})
        assert response.status_code == 201
        return response.json()["id"]
    return _make


@pytest.fixture
def make_transaction(client):
    """Create a transaction through the API and return its id."""
    def _make(description="Lunch", amount=12.5, type="expense", category_id=None, date="2024-03-01"):
        payload = {
            "description": description,
            "amount": amount,
            "type": type,
            "category_id": category_id,
            "date": date,
        }
        response = client.post("/api/transactions", json=payload)
        assert response.status_code == 201
        return response.json()["id"]
    return _make
