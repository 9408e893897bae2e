"""Run every discovered migration against a database, in order."""

from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager
from typing import Protocol

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from .errors import MigrationCancelled, MigrationError, SchemaError
from .executor import apply_migration
from .ledger import TABLE_NAME, Ledger
from .models import MigrationReport
from .source import Source

logger = logging.getLogger(__name__)


class SupportsBegin(Protocol):
    """Anything that opens a transaction scope, e.g. an Engine or a Database."""

    def begin(self) -> AbstractContextManager[Connection]:
        ...


def ensure_schema(database: SupportsBegin, ledger: Ledger | None = None) -> None:
    """Create the ledger table in its own transaction if it does not exist."""

    ledger = ledger or Ledger()
    try:
        with database.begin() as conn:
            ledger.ensure_schema(conn)
    except MigrationError:
        raise
    except SQLAlchemyError as exc:
        raise SchemaError(TABLE_NAME, exc) from exc


def migrate(
    source: Source,
    database: SupportsBegin,
    *,
    cancel: threading.Event | None = None,
) -> MigrationReport:
    """Apply all pending migrations from ``source`` in byte-wise name order.

    Each migration runs in its own transaction, opened only after the previous
    one committed. The first failure aborts the run and propagates; migrations
    that already committed stay applied, so the run can simply be repeated
    after the problem is fixed. Setting ``cancel`` stops the run before the
    next migration starts.

    Two runners racing on the same database may both see a migration as
    pending; the loser fails on the ledger's primary key with RecordError and
    rolls back. Callers needing mutual exclusion must lock externally.
    """

    names = source.discover()
    ledger = Ledger()
    ensure_schema(database, ledger)

    report = MigrationReport()
    for name in names:
        try:
            if cancel is not None and cancel.is_set():
                raise MigrationCancelled(name)
            migration = source.load(name)
            status = apply_migration(database, migration, ledger)
        except MigrationError as exc:
            logger.error("Migration run aborted at %s: %s", name, exc)
            raise
        report.add(name, status)

    logger.info(
        "Migration run complete: %d applied, %d skipped",
        len(report.applied),
        len(report.skipped),
    )
    return report


__all__ = ["SupportsBegin", "ensure_schema", "migrate"]
