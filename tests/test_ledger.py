from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from sqlmig.errors import LedgerInconsistency, RecordError, SchemaError, StatusCheckError
from sqlmig.ledger import Ledger
from sqlmig.runner import ensure_schema
from sqlmig.util.db import Database


def _database(tmp_path) -> Database:
    return Database(f"sqlite:///{tmp_path / 'ledger.sqlite'}")


def _table_exists(database: Database, name: str) -> bool:
    with database.begin() as conn:
        row = conn.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name"),
            {"name": name},
        ).first()
    return row is not None


def test_ensure_schema_is_idempotent(tmp_path):
    database = _database(tmp_path)
    ensure_schema(database)
    ensure_schema(database)

    assert _table_exists(database, "db_migrations")
    with database.begin() as conn:
        assert Ledger().exists(conn) is True
        assert Ledger().applied_names(conn) == []
    database.close()


def test_record_then_is_applied(tmp_path):
    database = _database(tmp_path)
    ledger = Ledger()
    ensure_schema(database, ledger)

    with database.begin() as conn:
        assert ledger.is_applied(conn, "001_init.sql") is False
        ledger.record(conn, "001_init.sql")
        assert ledger.is_applied(conn, "001_init.sql") is True

    with database.begin() as conn:
        assert ledger.applied_names(conn) == ["001_init.sql"]
    database.close()


def test_record_twice_fails_on_primary_key(tmp_path):
    database = _database(tmp_path)
    ledger = Ledger()
    ensure_schema(database, ledger)
    with database.begin() as conn:
        ledger.record(conn, "001_init.sql")

    with pytest.raises(RecordError) as excinfo:
        with database.begin() as conn:
            ledger.record(conn, "001_init.sql")
    assert excinfo.value.identifier == "001_init.sql"
    assert "error updating migration status" in str(excinfo.value)

    with database.begin() as conn:
        assert ledger.applied_names(conn) == ["001_init.sql"]
    database.close()


def test_duplicate_rows_surface_as_inconsistency(tmp_path):
    database = _database(tmp_path)
    with database.begin() as conn:
        # a ledger table created by hand without the primary key
        conn.execute(text("create table db_migrations (name text)"))
        conn.execute(text("insert into db_migrations values ('001_init.sql')"))
        conn.execute(text("insert into db_migrations values ('001_init.sql')"))
    ensure_schema(database)

    with pytest.raises(LedgerInconsistency) as excinfo:
        with database.begin() as conn:
            Ledger().is_applied(conn, "001_init.sql")
    assert excinfo.value.identifier == "001_init.sql"
    database.close()


def test_status_check_without_table_fails(tmp_path):
    database = _database(tmp_path)

    with pytest.raises(StatusCheckError):
        with database.begin() as conn:
            Ledger().is_applied(conn, "001_init.sql")
    database.close()


class _Unreachable:
    """Database handle whose transactions can never be opened."""

    def begin(self):
        raise OperationalError("BEGIN", {}, ConnectionRefusedError("database is down"))


def test_schema_error_when_database_is_unreachable():
    with pytest.raises(SchemaError) as excinfo:
        ensure_schema(_Unreachable())
    assert excinfo.value.identifier == "db_migrations"
    assert isinstance(excinfo.value.cause, OperationalError)
