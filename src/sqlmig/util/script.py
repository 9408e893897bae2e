"""Helpers for running multi-statement SQL scripts."""

from __future__ import annotations

import sqlite3

# Dialects whose DB-API driver rejects more than one statement per execute().
SINGLE_STATEMENT_DIALECTS = frozenset({"sqlite"})


def split_statements(script: str) -> list[str]:
    """Split ``script`` into complete SQL statements.

    Splitting happens at semicolons, but only where SQLite's tokenizer agrees
    the statement is complete, so semicolons inside string literals, comments
    and trigger bodies stay put. Comment-only fragments are dropped.
    """

    statements: list[str] = []
    parts = script.split(";")
    buffer = ""
    for index, part in enumerate(parts):
        buffer += part
        if index < len(parts) - 1:
            buffer += ";"
            if not sqlite3.complete_statement(buffer):
                continue
        if _has_sql(buffer):
            statements.append(buffer.strip())
        buffer = ""
    return statements


def needs_split(dialect_name: str) -> bool:
    return dialect_name in SINGLE_STATEMENT_DIALECTS


def _has_sql(fragment: str) -> bool:
    for line in fragment.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        if stripped.strip(";").strip():
            return True
    return False


__all__ = ["needs_split", "split_statements"]
