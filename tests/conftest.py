"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import scalp_core.db.tables  # noqa: F401 — register tables on Base.metadata
from scalp_core.db.base import Base


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created.

    One shared connection, so the API tests can use it from the server thread.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session = Session(engine)
    yield session
    session.close()
    engine.dispose()
