import os


def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from sherpa.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./sherpa.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_has_conservative_pooling(monkeypatch):
    from sherpa.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "2")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "10")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 3
    assert kwargs["max_overflow"] == 2
    assert kwargs["pool_timeout"] == 10


def test_debug_env_enables_echo(monkeypatch):
    from sherpa.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite:///./sherpa.db")["echo"] is True
    monkeypatch.setenv("DEBUG", "False")
    assert db.get_engine_kwargs("sqlite:///./sherpa.db")["echo"] is False


def test_sqlite_pragmas_listener_is_guarded():
    # Verify the helper used by the connect event guard behaves as expected.
    from sherpa.database import database as db

    assert db._is_sqlite_url("sqlite:///./sherpa.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_calendar_span_days_from_env(monkeypatch):
    from sherpa.database import database as db
    from sherpa.models.constants import DEFAULT_CALENDAR_SPAN_DAYS

    monkeypatch.delenv("SHERPA_CALENDAR_SPAN_DAYS", raising=False)
    assert db.get_calendar_span_days() == DEFAULT_CALENDAR_SPAN_DAYS

    monkeypatch.setenv("SHERPA_CALENDAR_SPAN_DAYS", "7")
    assert db.get_calendar_span_days() == 7

    monkeypatch.setenv("SHERPA_CALENDAR_SPAN_DAYS", "-3")
    assert db.get_calendar_span_days() == 0

    monkeypatch.setenv("SHERPA_CALENDAR_SPAN_DAYS", "two weeks")
    assert db.get_calendar_span_days() == DEFAULT_CALENDAR_SPAN_DAYS


def test_init_db_creates_tables_without_migrations(monkeypatch, tmp_path):
    """Default startup path builds the schema from the ORM models."""
    from sqlalchemy import create_engine, inspect
    from sherpa.database import database as db

    engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}", connect_args={"check_same_thread": False})
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.delenv("RUN_MIGRATIONS", raising=False)

    db.init_db()

    tables = set(inspect(engine).get_table_names())
    assert {"schedule_items", "instances"} <= tables
    unique_names = {c["name"] for c in inspect(engine).get_unique_constraints("instances")}
    assert "uq_instance_item_date" in unique_names
    engine.dispose()
