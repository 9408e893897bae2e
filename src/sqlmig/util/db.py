"""Database handle built around a SQLAlchemy engine."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine


def normalize_dsn(dsn: str) -> str:
    """Treat a bare filesystem path as a SQLite database file."""

    if "://" in dsn:
        return dsn
    return f"sqlite:///{dsn}"


class Database:
    """Lightweight wrapper exposing the transactional unit of work migrations need."""

    def __init__(self, dsn: str) -> None:
        self.dsn = normalize_dsn(dsn)
        self.engine: Engine = create_engine(self.dsn, future=True)
        self.dialect = self.engine.dialect.name
        if self.dialect == "sqlite":
            self._enable_sqlite_transactions()

    def _enable_sqlite_transactions(self) -> None:
        # pysqlite only opens transactions implicitly before DML; take over so
        # DDL in a migration body is covered by the same BEGIN as its ledger row.
        @event.listens_for(self.engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(self.engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction.

        The transaction commits when the block exits normally and rolls back
        when any exception, including KeyboardInterrupt, escapes it.
        """

        with self.engine.begin() as conn:
            yield conn

    def close(self) -> None:
        self.engine.dispose()


__all__ = ["Database", "normalize_dsn"]
