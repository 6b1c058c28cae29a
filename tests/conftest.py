# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database bound to database.queries and
a FastAPI TestClient using the deterministic role assistant.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from backend.main import app
from backend.routes.assistant import get_assistant
from core.assistant import StaticRoleAssistant
from database import queries
from database.db_setup import init_db
from database.seed import seed_database


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_db(eng)
    previous = queries.current_engine()
    queries.bind_engine(eng)
    yield eng
    queries.bind_engine(previous)
    eng.dispose()


@pytest.fixture
def seeded(engine):
    seed_database()
    return engine


@pytest.fixture
def client(engine):
    # No context manager: the startup seed must not run against test data
    app.dependency_overrides[get_assistant] = lambda: StaticRoleAssistant()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_role():
    def _make(title="Closer", description="Finalizes deals with qualified leads.", permissions=("view",), is_default=False):
        return queries.create_role(
            title=title, description=description, permissions=list(permissions), is_default=is_default
        )
    return _make


@pytest.fixture
def make_product():
    def _make(id="p1", name="Product", commission="10%", bonus="5€", is_sellable=True):
        return queries.create_product(id=id, name=name, commission=commission, bonus=bonus, is_sellable=is_sellable)
    return _make
