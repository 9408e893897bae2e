"""Runtime configuration helpers for sqlmig."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


_load_env_file()


@dataclass(frozen=True)
class Settings:
    """Typed wrapper around environment-driven configuration."""

    db_dsn: str
    migrations_root: Path
    migrations_glob: str
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached configuration values loaded from the environment."""

    db_dsn = os.getenv("DB_DSN", "sqlite:///sqlmig.db")
    migrations_root = Path(os.getenv("MIGRATIONS_ROOT", "migrations"))
    migrations_glob = os.getenv("MIGRATIONS_GLOB", "*.sql")
    log_level = os.getenv("LOG_LEVEL", "WARNING").upper()

    return Settings(
        db_dsn=db_dsn,
        migrations_root=migrations_root,
        migrations_glob=migrations_glob,
        log_level=log_level,
    )
