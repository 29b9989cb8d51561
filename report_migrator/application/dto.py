"""Application-level DTOs for the migration workflow."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from report_migrator.domain.models import Division


@dataclass(slots=True, frozen=True)
class ExtractPaths:
    reports: Path
    division_40: Path | None = None
    division_43: Path | None = None


@dataclass(slots=True, frozen=True)
class PartitionResult:
    counts: Mapping[Division, Mapping[str, int]] = field(default_factory=dict)

    @property
    def artifacts_written(self) -> int:
        return sum(len(per_report) for per_report in self.counts.values())

    def report_ids(self, division: Division) -> Sequence[str]:
        return tuple(self.counts.get(division, {}))
