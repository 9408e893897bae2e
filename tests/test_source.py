from __future__ import annotations

import os
from pathlib import Path

import pytest

from sqlmig.errors import DiscoveryError, ReadError
from sqlmig.source import Source, sort_names


def _write(root: Path, name: str, body: str = "select 1;") -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_discover_sorts_names_regardless_of_creation_order(tmp_path):
    for name in ("010_late.sql", "002_x.sql", "001_y.sql", "notes.txt"):
        _write(tmp_path, name)

    assert Source(tmp_path, "*.sql").discover() == ["001_y.sql", "002_x.sql", "010_late.sql"]


def test_discover_uses_byte_order():
    assert sort_names(["b.sql", "a.sql", "B.sql", "_x.sql"]) == ["B.sql", "_x.sql", "a.sql", "b.sql"]


def test_discover_skips_directories_and_supports_nested_patterns(tmp_path):
    _write(tmp_path, "001_root.sql")
    _write(tmp_path, "core/002_nested.sql")
    (tmp_path / "003_dir.sql").mkdir()

    assert Source(tmp_path).discover() == ["001_root.sql"]
    assert Source(tmp_path, "**/*.sql").discover() == ["001_root.sql", "core/002_nested.sql"]


def test_discover_empty_root_is_valid(tmp_path):
    assert Source(tmp_path, "*.sql").discover() == []


def test_discover_missing_root_raises(tmp_path):
    source = Source(tmp_path / "missing", "*.sql")

    with pytest.raises(DiscoveryError) as excinfo:
        source.discover()
    assert excinfo.value.identifier == "*.sql"
    assert "error globbing" in str(excinfo.value)


@pytest.mark.parametrize("pattern", ["", "   ", "/etc/*.sql", "[", "a[.sql", "core/[!.sql", "[]"])
def test_discover_rejects_unusable_patterns(tmp_path, pattern):
    with pytest.raises(DiscoveryError):
        Source(tmp_path, pattern).discover()


def test_read_and_load(tmp_path):
    _write(tmp_path, "001_init.sql", "create table t (id integer);")
    source = Source(str(tmp_path))

    migration = source.load("001_init.sql")
    assert migration.name == "001_init.sql"
    assert migration.body == "create table t (id integer);"


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(ReadError) as excinfo:
        Source(tmp_path).read("404.sql")
    assert excinfo.value.identifier == "404.sql"
    assert isinstance(excinfo.value.cause, OSError)


def test_read_undecodable_file_raises(tmp_path):
    (tmp_path / "001_bad.sql").write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(ReadError):
        Source(tmp_path).read("001_bad.sql")


@pytest.mark.parametrize("pattern", ["[0-9]*.sql", "[!_]*.sql", "[]]*.sql", "*/[a-z]*.sql"])
def test_discover_accepts_closed_character_classes(tmp_path, pattern):
    assert Source(tmp_path, pattern).discover() == []


def test_discover_unlistable_root_raises(tmp_path, monkeypatch):
    _write(tmp_path, "001_a.sql")

    def _denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(os, "scandir", _denied)
    with pytest.raises(DiscoveryError) as excinfo:
        Source(tmp_path).discover()
    assert isinstance(excinfo.value.cause, PermissionError)
