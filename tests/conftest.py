"""Pytest fixtures and configuration for sherpa tests."""

import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from sherpa.database.database import Base, get_db
from sherpa.database import models  # noqa: F401
from sherpa.database.instance_repository import InstanceRepository
from sherpa.database.item_repository import ScheduleItemRepository
from sherpa.models.item_factory import create_habit, create_task
from sherpa.models.recurrence import RecurrenceFrequency, RecurrenceRule


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Fresh in-memory SQLite engine with the schema created."""
    from sqlalchemy import event

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for testing."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def item_repo(db_session: Session):
    return ScheduleItemRepository(db_session)


@pytest.fixture
def instance_repo(db_session: Session):
    return InstanceRepository(db_session)


@pytest.fixture
def anchor_day():
    """Fixed anchor day so calendar arithmetic is deterministic."""
    return date(2024, 1, 1)


@pytest.fixture
def daily_rule(anchor_day):
    return RecurrenceRule(frequency=RecurrenceFrequency.DAILY, interval=1, start_date=anchor_day)


@pytest.fixture
def daily_habit(daily_rule):
    """A daily habit anchored at the fixed anchor day."""
    return create_habit("Meditate", daily_rule, created_at=datetime(2023, 12, 31, 8, 0))


@pytest.fixture
def due_task(anchor_day):
    """A one-shot task due two days after the anchor."""
    return create_task("File taxes", due_date=date(2024, 1, 3), created_at=datetime(2023, 12, 31, 9, 0))


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with the database dependency overridden."""
    from sherpa.api.app import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
