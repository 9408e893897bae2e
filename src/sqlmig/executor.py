"""Apply one migration and its ledger record as a single transaction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from .errors import CommitError, ExecutionError, MigrationError
from .ledger import Ledger
from .models import Migration, MigrationStatus
from .util.script import needs_split, split_statements

if TYPE_CHECKING:  # pragma: no cover
    from .runner import SupportsBegin

logger = logging.getLogger(__name__)


def execute_script(conn: Connection, migration: Migration) -> None:
    """Run the raw migration body on ``conn`` without bind-parameter parsing."""

    if needs_split(conn.dialect.name):
        statements = split_statements(migration.body)
    else:
        statements = [migration.body] if migration.body.strip() else []
    try:
        for statement in statements:
            # no_parameters keeps drivers from treating % or ? as placeholders
            conn.exec_driver_sql(statement, execution_options={"no_parameters": True})
    except SQLAlchemyError as exc:
        raise ExecutionError(migration.name, exc) from exc


def apply_migration(
    database: SupportsBegin,
    migration: Migration,
    ledger: Ledger | None = None,
) -> MigrationStatus:
    """Apply ``migration`` unless the ledger already lists it.

    The ledger check, the ledger insert and the body all run inside one
    transaction: either the row and every effect of the body commit together,
    or nothing does.
    """

    ledger = ledger or Ledger()
    try:
        with database.begin() as conn:
            if ledger.is_applied(conn, migration.name):
                logger.debug("Skipping %s: already applied", migration.name)
                return "skipped"
            ledger.record(conn, migration.name)
            execute_script(conn, migration)
    except MigrationError:
        raise
    except SQLAlchemyError as exc:
        raise CommitError(migration.name, exc) from exc
    logger.info("Applied migration %s", migration.name)
    return "applied"


__all__ = ["apply_migration", "execute_script"]
