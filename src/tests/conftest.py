"""Pytest configuration and fixtures for engine and service layer tests."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

from src.models.base import Base
from src.services.timeline import Actor, OrderSnapshot, Stage, StageCatalog


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    from src.models import order, order_document  # noqa: F401

    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session


@pytest.fixture
def abc_catalog():
    """Minimal catalog: creation stage followed by A, B and C."""
    return StageCatalog(
        [
            Stage(key="created", title="Created"),
            Stage(key="A", title="Stage A", tasks=("Przygotowane",)),
            Stage(key="B", title="Stage B", tasks=("Wysłane",)),
            Stage(key="C", title="Stage C"),
        ]
    )


@pytest.fixture
def created_at():
    return datetime(2026, 10, 1, 9, 0)


@pytest.fixture
def make_snapshot(created_at):
    """Factory for engine snapshots with sensible defaults."""

    def _make(status="Weryfikacja i płatność", **fields):
        fields.setdefault("created_at", created_at)
        return OrderSnapshot(status=status, **fields)

    return _make


@pytest.fixture
def actor():
    return Actor(display_name="Jan", email="jan@example.com")


@pytest.fixture
def sample_order(test_db):
    """Provide a production order at the verification stage."""
    from src.services import order_timeline_service

    order = order_timeline_service.create_order(
        "ZAM-2026-001",
        customer_name="Jan Kowalski",
        channel="Telefon",
    )
    return order.id
