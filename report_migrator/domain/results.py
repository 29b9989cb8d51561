"""Domain-level results for report reconciliation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Sequence


class ReconciliationState(str, Enum):
    LOOKUP = "lookup"
    PURGE = "purge"
    CREATE = "create"
    PERSIST = "persist"
    DONE = "done"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class ReconciliationOutcome:
    reference: str
    state: ReconciliationState
    deal_id: str | None = None
    report_id: int | None = None
    purged_deal_id: str | None = None
    replaced_report_id: int | None = None
    failed_at: ReconciliationState | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class MigrationSummary:
    total: int
    migrated: int
    skipped: int
    failed: int
    started_at: datetime
    finished_at: datetime
    outcomes: Sequence[ReconciliationOutcome] = field(default_factory=tuple)

    def has_failures(self) -> bool:
        return self.failed > 0

    def iter_state(self, state: ReconciliationState) -> Iterable[ReconciliationOutcome]:
        return (outcome for outcome in self.outcomes if outcome.state is state)
