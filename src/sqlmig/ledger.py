"""Persisted record of which migrations have been applied."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from .errors import LedgerInconsistency, RecordError, SchemaError, StatusCheckError
from .source import sort_names

logger = logging.getLogger(__name__)

TABLE_NAME = "db_migrations"

SCHEMA_SQL = """
create table if not exists db_migrations (
    name text primary key
)
"""
ALREADY_DONE_SQL = "select count(*) from db_migrations where name = :name"
RECORD_SQL = "insert into db_migrations values (:name)"
APPLIED_NAMES_SQL = "select name from db_migrations"


class Ledger:
    """Stateless accessor for the ``db_migrations`` table.

    Every method works on the connection of the caller's transaction; nothing
    is cached in-process, the database is the single source of truth.
    """

    def ensure_schema(self, conn: Connection) -> None:
        try:
            conn.execute(text(SCHEMA_SQL))
        except SQLAlchemyError as exc:
            raise SchemaError(TABLE_NAME, exc) from exc

    def is_applied(self, conn: Connection, name: str) -> bool:
        """Return whether exactly one ledger row exists for ``name``.

        Zero rows means the migration is pending. More than one row cannot
        happen while the primary key holds, so it raises LedgerInconsistency
        instead of being treated as either state.
        """

        try:
            count = conn.execute(text(ALREADY_DONE_SQL), {"name": name}).scalar_one()
        except SQLAlchemyError as exc:
            raise StatusCheckError(name, exc) from exc
        if count > 1:
            raise LedgerInconsistency(name, ValueError(f"{count} records found"))
        return count == 1

    def record(self, conn: Connection, name: str) -> None:
        try:
            conn.execute(text(RECORD_SQL), {"name": name})
        except SQLAlchemyError as exc:
            raise RecordError(name, exc) from exc

    def exists(self, conn: Connection) -> bool:
        """Return whether the tracking table has been created yet."""

        try:
            return inspect(conn).has_table(TABLE_NAME)
        except SQLAlchemyError as exc:
            raise StatusCheckError(TABLE_NAME, exc) from exc

    def applied_names(self, conn: Connection) -> list[str]:
        try:
            rows = conn.execute(text(APPLIED_NAMES_SQL)).scalars().all()
        except SQLAlchemyError as exc:
            raise StatusCheckError(TABLE_NAME, exc) from exc
        return sort_names([str(row) for row in rows])


__all__ = ["Ledger", "TABLE_NAME"]
