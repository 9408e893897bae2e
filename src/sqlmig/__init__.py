"""sqlmig package exports."""

from .config import get_settings
from .errors import (
    CommitError,
    DiscoveryError,
    ExecutionError,
    LedgerInconsistency,
    MigrationCancelled,
    MigrationError,
    ReadError,
    RecordError,
    SchemaError,
    StatusCheckError,
)
from .executor import apply_migration
from .ledger import Ledger
from .models import Migration, MigrationReport, MigrationResult
from .runner import ensure_schema, migrate
from .source import Source
from .util.db import Database

__all__ = [
    "CommitError",
    "Database",
    "DiscoveryError",
    "ExecutionError",
    "Ledger",
    "LedgerInconsistency",
    "Migration",
    "MigrationCancelled",
    "MigrationError",
    "MigrationReport",
    "MigrationResult",
    "ReadError",
    "RecordError",
    "SchemaError",
    "Source",
    "StatusCheckError",
    "apply_migration",
    "ensure_schema",
    "get_settings",
    "migrate",
]
