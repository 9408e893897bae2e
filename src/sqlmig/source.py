"""Discovery of migration scripts on the filesystem."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from .errors import DiscoveryError, ReadError
from .models import Migration

if TYPE_CHECKING:  # pragma: no cover
    from .models import MigrationReport
    from .runner import SupportsBegin

logger = logging.getLogger(__name__)


def sort_names(names: list[str]) -> list[str]:
    """Sort migration names by their UTF-8 byte value."""

    return sorted(names, key=lambda name: name.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class Source:
    """A directory plus a glob pattern selecting the migration scripts in it.

    Names are the matching paths relative to ``root`` with forward slashes, so
    ``Source("db", "**/*.sql")`` yields names such as ``"core/001_init.sql"``.
    """

    root: Path | str
    pattern: str = "*.sql"

    @property
    def root_path(self) -> Path:
        return Path(self.root)

    def discover(self) -> list[str]:
        """Return the names of all matching files in byte-wise ascending order."""

        self._validate_pattern()
        root = self.root_path
        if not root.is_dir():
            raise DiscoveryError(
                self.pattern, NotADirectoryError(f"migration root is not a directory: {root}")
            )
        try:
            # Path.glob skips directories it cannot list, so check the root itself
            with os.scandir(root):
                pass
            names = [
                path.relative_to(root).as_posix()
                for path in root.glob(self.pattern)
                if path.is_file()
            ]
        except (OSError, ValueError, NotImplementedError) as exc:
            raise DiscoveryError(self.pattern, exc) from exc
        ordered = sort_names(names)
        logger.debug("Discovered %d migrations in %s matching %r", len(ordered), root, self.pattern)
        return ordered

    def read(self, name: str) -> str:
        """Return the raw script text of migration ``name``."""

        try:
            return (self.root_path / name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(name, exc) from exc

    def load(self, name: str) -> Migration:
        return Migration(name=name, body=self.read(name))

    def migrate(
        self,
        database: SupportsBegin,
        *,
        cancel: threading.Event | None = None,
    ) -> MigrationReport:
        """Apply every pending migration from this source to ``database``."""

        from .runner import migrate

        return migrate(self, database, cancel=cancel)

    def _validate_pattern(self) -> None:
        if not self.pattern or not self.pattern.strip():
            raise DiscoveryError(self.pattern, ValueError("empty glob pattern"))
        if PurePosixPath(self.pattern).is_absolute() or Path(self.pattern).is_absolute():
            raise DiscoveryError(
                self.pattern, ValueError("glob pattern must be relative to the migration root")
            )
        for component in PurePosixPath(self.pattern).parts:
            if _has_unterminated_class(component):
                raise DiscoveryError(
                    self.pattern, ValueError(f"unterminated character class in {component!r}")
                )


def _has_unterminated_class(component: str) -> bool:
    index = 0
    while index < len(component):
        if component[index] != "[":
            index += 1
            continue
        end = index + 1
        if end < len(component) and component[end] in "!^":
            end += 1
        # a leading "]" is a literal member of the class
        if end < len(component) and component[end] == "]":
            end += 1
        close = component.find("]", end)
        if close == -1:
            return True
        index = close + 1
    return False


__all__ = ["Source", "sort_names"]
