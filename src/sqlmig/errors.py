"""Error kinds raised while discovering and applying migrations."""

from __future__ import annotations


class MigrationError(RuntimeError):
    """Base class for every failure that aborts a migration run.

    ``identifier`` names what was being processed (a glob pattern, a file name
    or a migration name) and ``cause`` holds the underlying exception, if any.
    """

    stage = "error running migrations"

    def __init__(self, identifier: str, cause: BaseException | None = None) -> None:
        self.identifier = identifier
        self.cause = cause
        message = f"sqlmig: {self.stage}: {identifier!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DiscoveryError(MigrationError):
    """The glob pattern is malformed or the source root cannot be scanned."""

    stage = "error globbing"


class SchemaError(MigrationError):
    """The ``db_migrations`` tracking table could not be created."""

    stage = "error creating db_migrations table"


class ReadError(MigrationError):
    """A migration body could not be read from its source."""

    stage = "error reading migration"


class StatusCheckError(MigrationError):
    stage = "error checking migration status"


class RecordError(MigrationError):
    """Inserting the ledger row failed, including the duplicate-name race."""

    stage = "error updating migration status"


class ExecutionError(MigrationError):
    stage = "error executing migration"


class CommitError(MigrationError):
    """The unit of work for a migration could not be opened or committed."""

    stage = "error committing migration"


class LedgerInconsistency(MigrationError):
    """More than one ledger row exists for a single migration name."""

    stage = "ledger holds duplicate records for migration"


class MigrationCancelled(MigrationError):
    stage = "run cancelled before migration"


__all__ = [
    "CommitError",
    "DiscoveryError",
    "ExecutionError",
    "LedgerInconsistency",
    "MigrationCancelled",
    "MigrationError",
    "ReadError",
    "RecordError",
    "SchemaError",
    "StatusCheckError",
]
