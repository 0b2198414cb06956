"""Unit tests for SQL key/value store using SQLite in-memory."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from autofinder.adapters.outbound.key_value_store.models import Base, KeyValueEntryModel
from autofinder.adapters.outbound.key_value_store.sql_key_value_store import SqlKeyValueStore

GET_DB_SESSION = "autofinder.adapters.outbound.key_value_store.sql_key_value_store.get_db_session"


@pytest.fixture
def sqlite_engine():
    """Create SQLite in-memory engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_factory(sqlite_engine, monkeypatch):
    """Patch get_db_session to use the SQLite engine."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)

    def get_test_db_session():
        return SessionLocal()

    monkeypatch.setattr(GET_DB_SESSION, get_test_db_session)
    return SessionLocal


@pytest.mark.asyncio
async def test_load_missing_row_returns_none(session_factory):
    """Test an empty slot."""
    store = SqlKeyValueStore("search_history")

    assert await store.load() is None


@pytest.mark.asyncio
async def test_save_inserts_then_updates(session_factory):
    """Test upsert behavior."""
    store = SqlKeyValueStore("search_history")

    await store.save(b"first")
    await store.save(b"second")

    assert await store.load() == b"second"

    session = session_factory()
    try:
        rows = session.query(KeyValueEntryModel).all()
        assert len(rows) == 1
        assert rows[0].key == "search_history"
        assert rows[0].updated_at is not None
    finally:
        session.close()


@pytest.mark.asyncio
async def test_slots_are_isolated_by_key(session_factory):
    """Test that two keys do not share data."""
    history = SqlKeyValueStore("search_history")
    other = SqlKeyValueStore("other")

    await history.save(b"history")

    assert await other.load() is None
    assert await history.load() == b"history"


@pytest.mark.asyncio
async def test_save_error_rolls_back_and_raises(monkeypatch):
    """Test that database errors propagate after rollback."""
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    monkeypatch.setattr(GET_DB_SESSION, lambda: session)

    with pytest.raises(OperationalError):
        await SqlKeyValueStore("search_history").save(b"data")

    session.rollback.assert_called_once()
    session.close.assert_called_once()
