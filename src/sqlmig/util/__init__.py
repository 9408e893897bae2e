"""Utility helpers shared across sqlmig modules."""

from .db import Database, normalize_dsn  # noqa: F401
from .script import needs_split, split_statements  # noqa: F401

__all__ = [
    "Database",
    "needs_split",
    "normalize_dsn",
    "split_statements",
]
