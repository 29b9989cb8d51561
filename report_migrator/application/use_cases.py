"""Application services orchestrating partitioning and migration."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Collection, Mapping, Sequence

from report_migrator.application.dto import PartitionResult
from report_migrator.domain.errors import MigrationAborted
from report_migrator.domain.models import Division, RawAsset, RawReport
from report_migrator.domain.reconciliation import ReconciliationEngine
from report_migrator.domain.repositories import AssetArtifactStore
from report_migrator.domain.results import (
    MigrationSummary,
    ReconciliationOutcome,
    ReconciliationState,
)
from report_migrator.domain.services import RecordTransformer, partition_assets

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What the orchestrator does when CREATE or PERSIST fails for a record."""

    ABORT = "abort"
    CONTINUE = "continue"


class PartitionAssetsUseCase:
    def __init__(self, repository: AssetArtifactStore) -> None:
        self._repository = repository

    def execute(
        self,
        reports: Sequence[RawReport],
        assets: Mapping[Division, Sequence[RawAsset]],
    ) -> PartitionResult:
        report_ids = [report.id for report in reports]
        counts: dict[Division, dict[str, int]] = {}
        for division, division_assets in assets.items():
            grouped = partition_assets(division_assets, report_ids)
            counts[division] = {}
            for report_id, report_assets in grouped.items():
                self._repository.write(division, report_id, report_assets)
                counts[division][report_id] = len(report_assets)
            dropped = len(division_assets) - sum(counts[division].values())
            if dropped:
                logger.info("Dropped %d %s assets for reports outside the extract", dropped, division.label)
        return PartitionResult(counts=counts)


@dataclass(slots=True)
class MigrationContext:
    artifacts: AssetArtifactStore
    engine: ReconciliationEngine
    transformer: RecordTransformer = field(default_factory=RecordTransformer)
    failure_policy: FailurePolicy = FailurePolicy.ABORT
    request_delay: float = 0.0
    sleep: Callable[[float], None] = time.sleep


class MigrateReportsUseCase:
    """Reconciles every report of the extract, one at a time, in extract order."""

    def __init__(self, context: MigrationContext) -> None:
        self._context = context

    def execute(
        self,
        reports: Sequence[RawReport],
        references: Collection[str] | None = None,
    ) -> MigrationSummary:
        started_at = datetime.now(timezone.utc)
        selected = [r for r in reports if references is None or r.reference.strip() in references]
        # Unreadable artifacts halt the run before any remote call is made.
        assets = [self._load_assets(raw) for raw in selected]
        outcomes: list[ReconciliationOutcome] = []

        for index, (raw, report_assets) in enumerate(zip(selected, assets), start=1):
            logger.info("[%d/%d] Processing %s", index, len(selected), raw.reference)
            outcome = self._migrate_one(raw, report_assets)
            outcomes.append(outcome)
            if outcome.state is ReconciliationState.FAIL:
                if self._context.failure_policy is FailurePolicy.ABORT:
                    raise MigrationAborted(outcome)
                logger.warning("Continuing after failure on %s", raw.reference)

        return MigrationSummary(
            total=len(selected),
            migrated=sum(1 for o in outcomes if o.state is ReconciliationState.DONE),
            skipped=sum(1 for o in outcomes if o.state is ReconciliationState.SKIP),
            failed=sum(1 for o in outcomes if o.state is ReconciliationState.FAIL),
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            outcomes=tuple(outcomes),
        )

    def _load_assets(self, raw: RawReport) -> dict[Division, Sequence[RawAsset]]:
        return {
            division: self._context.artifacts.read(division, raw.id)
            for division in (Division.DIV_40, Division.DIV_43)
        }

    def _migrate_one(
        self,
        raw: RawReport,
        assets: Mapping[Division, Sequence[RawAsset]],
    ) -> ReconciliationOutcome:
        transformed = self._context.transformer.transform(raw, assets)
        if transformed is None:
            return ReconciliationOutcome(reference=raw.reference, state=ReconciliationState.SKIP)
        deal, report = transformed

        if self._context.request_delay > 0:
            self._context.sleep(self._context.request_delay)
        return self._context.engine.reconcile(deal, report)
