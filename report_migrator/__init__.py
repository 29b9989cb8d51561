"""Depreciation report migration toolkit."""
from report_migrator.application.use_cases import (
    FailurePolicy,
    MigrateReportsUseCase,
    MigrationContext,
    PartitionAssetsUseCase,
)
from report_migrator.domain.reconciliation import ReconciliationEngine
from report_migrator.domain.services import RecordTransformer, build_deal, build_report

__all__ = [
    "FailurePolicy",
    "MigrateReportsUseCase",
    "MigrationContext",
    "PartitionAssetsUseCase",
    "ReconciliationEngine",
    "RecordTransformer",
    "build_deal",
    "build_report",
]
