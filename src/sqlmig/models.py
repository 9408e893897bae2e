"""Value objects describing migrations and the outcome of a run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MigrationStatus = Literal["applied", "skipped"]


@dataclass(frozen=True, slots=True)
class Migration:
    """A named SQL script that can be applied exactly once."""

    name: str
    body: str


@dataclass(slots=True)
class MigrationResult:
    """Outcome of a single migration within a run."""

    name: str
    status: MigrationStatus

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "status": self.status}


@dataclass(slots=True)
class MigrationReport:
    """Ordered outcomes for every migration a run processed."""

    results: list[MigrationResult] = field(default_factory=list)

    def add(self, name: str, status: MigrationStatus) -> None:
        self.results.append(MigrationResult(name=name, status=status))

    @property
    def applied(self) -> list[str]:
        return [result.name for result in self.results if result.status == "applied"]

    @property
    def skipped(self) -> list[str]:
        return [result.name for result in self.results if result.status == "skipped"]

    def __len__(self) -> int:
        return len(self.results)


__all__ = ["Migration", "MigrationReport", "MigrationResult", "MigrationStatus"]
