"""
Tests for db.connection and db.repository.

psycopg2 connections, pools and cursors are replaced with mocks; the
tests verify transaction scoping and the SQL parameters sent.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from unittest.mock import MagicMock

import pytest
from psycopg2 import OperationalError, errors, sql

from db.connection import DatabaseConnection
from db.repository import PlayerRow, PostgresRepository, PostgresStore
from gaa_etl.exceptions import DuplicateMatchError


@pytest.fixture
def pool(monkeypatch):
    fake_pool = MagicMock()
    monkeypatch.setattr(DatabaseConnection, "_pool", fake_pool)
    return fake_pool


@pytest.fixture
def cursor():
    return MagicMock()


@pytest.fixture
def repository(cursor):
    return PostgresRepository(cursor)


# ---------- DatabaseConnection ----------


def test_initialize_sets_statement_timeout(monkeypatch):
    """Test that the pool is created with the session statement timeout."""
    factory = MagicMock()
    monkeypatch.setattr("db.connection.pool.SimpleConnectionPool", factory)
    monkeypatch.setattr(DatabaseConnection, "_pool", None)

    DatabaseConnection.initialize("db", 5432, "gaastat", "etl", "secret", statement_timeout_ms=5000)

    args, kwargs = factory.call_args
    assert args == (1, 2)
    assert kwargs["options"] == "-c statement_timeout=5000"
    assert kwargs["database"] == "gaastat"
    assert DatabaseConnection.is_initialized()


def test_get_connection_requires_pool(monkeypatch):
    """Test that using the pool before initialize() raises OperationalError."""
    monkeypatch.setattr(DatabaseConnection, "_pool", None)

    with pytest.raises(OperationalError):
        with DatabaseConnection.get_connection():
            pass


def test_get_connection_commits_on_success(pool):
    """Test that a clean block commits and returns the connection."""
    conn = pool.getconn.return_value

    with DatabaseConnection.get_connection() as yielded:
        assert yielded is conn

    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()
    pool.putconn.assert_called_once_with(conn)


def test_get_connection_rolls_back_on_error(pool):
    """Test that an exception rolls back, is re-raised and returns the connection."""
    conn = pool.getconn.return_value

    with pytest.raises(RuntimeError):
        with DatabaseConnection.get_connection():
            raise RuntimeError("boom")

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    pool.putconn.assert_called_once_with(conn)


def test_get_cursor_closes_cursor(pool):
    """Test that the cursor is closed when the block ends."""
    cur = pool.getconn.return_value.cursor.return_value

    with DatabaseConnection.get_cursor() as yielded:
        assert yielded is cur

    cur.close.assert_called_once()


def test_close_all(pool):
    """Test that closing the pool closes every connection and forgets the pool."""
    DatabaseConnection.close_all()

    pool.closeall.assert_called_once()
    assert not DatabaseConnection.is_initialized()


# ---------- PostgresRepository ----------


def test_find_season(repository, cursor):
    """Test that lookups return the first column or None."""
    cursor.fetchone.return_value = (3,)
    assert repository.find_season(2025) == 3
    assert cursor.execute.call_args[0][1] == (2025,)

    cursor.fetchone.return_value = None
    assert repository.find_season(2030) is None


def test_find_player_is_case_insensitive(repository, cursor):
    """Test that player lookup compares lower-cased names and returns a PlayerRow."""
    cursor.fetchone.return_value = (7, 2, 3)

    assert repository.find_player("Sean Murphy") == PlayerRow(7, 2, 3)
    query = cursor.execute.call_args[0][0]
    assert "lower(full_name) = lower(%s)" in query


def test_position_ids(repository, cursor):
    """Test that position rows become a code -> id map."""
    cursor.fetchall.return_value = [("GK", 1), ("DEF", 2)]

    assert repository.position_ids() == {"GK": 1, "DEF": 2}


def test_insert_match_builds_composed_query(repository, cursor):
    """Test that inserts pass column values in order and return the new id."""
    cursor.fetchone.return_value = (11,)
    row = {"competition_id": 2, "match_number": 9, "match_date": date(2025, 9, 26)}

    assert repository.insert_match(row) == 11
    query, params = cursor.execute.call_args[0]
    assert isinstance(query, sql.Composed)
    assert params == (2, 9, date(2025, 9, 26))


def test_insert_match_unique_violation(repository, cursor):
    """Test that a unique violation on matches becomes DuplicateMatchError."""
    cursor.execute.side_effect = errors.UniqueViolation("duplicate key")

    with pytest.raises(DuplicateMatchError) as exc_info:
        repository.insert_match({"competition_id": 2, "match_number": 9})

    assert exc_info.value.match_number == 9


def test_update_player(repository, cursor):
    """Test that jersey and position are updated for the given player."""
    repository.update_player(7, 14, 4)

    query, params = cursor.execute.call_args[0]
    assert query.startswith("UPDATE players SET jersey_number")
    assert params == (14, 4, 7)


# ---------- PostgresStore ----------


def test_store_transaction_yields_repository(monkeypatch, cursor):
    """Test that each transaction wraps a cursor from the connection helper."""
    @contextmanager
    def fake_cursor():
        yield cursor

    monkeypatch.setattr(DatabaseConnection, "get_cursor", fake_cursor)

    with PostgresStore().transaction() as repository:
        assert isinstance(repository, PostgresRepository)
        assert repository.cursor is cursor
