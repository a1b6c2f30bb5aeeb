import os

# Keep the application engine in memory; must happen before app.config is read
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_storer
from app.storer.sql_storer import SQLStorer


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_storer():
    """Override storer dependency for testing."""
    return SQLStorer(engine)


# Override the dependency
app.dependency_overrides[get_storer] = override_get_storer


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_engine():
    """Fresh tables on the shared in-memory engine."""
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def storer(db_engine):
    return SQLStorer(db_engine)


@pytest.fixture(scope="function")
def fail_statement(db_engine):
    """
    Make the next statements starting with a given prefix fail.

    Usage:
        fail_statement("INSERT INTO order_items")
    """
    listeners = []

    def install(prefix: str):
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            if statement.startswith(prefix):
                raise OperationalError(statement, parameters, Exception(f"injected failure: {prefix}"))

        event.listen(db_engine, "before_cursor_execute", before_cursor_execute)
        listeners.append(before_cursor_execute)

    yield install

    for fn in listeners:
        event.remove(db_engine, "before_cursor_execute", fn)


@pytest.fixture(scope="function")
def statements(db_engine):
    """Record every SQL statement sent to the database."""
    captured = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        captured.append(statement)

    event.listen(db_engine, "before_cursor_execute", before_cursor_execute)

    yield captured

    event.remove(db_engine, "before_cursor_execute", before_cursor_execute)
