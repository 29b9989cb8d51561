"""Console rendering of migration and partition results."""
from __future__ import annotations

from report_migrator.application.dto import PartitionResult
from report_migrator.domain.results import MigrationSummary, ReconciliationState


def render_partition(result: PartitionResult) -> str:
    lines = ["Partition Summary", "================="]
    for division, per_report in result.counts.items():
        lines.append(f"{division.label}: {sum(per_report.values())} assets across {len(per_report)} reports")
    lines.append(f"Artifacts written: {result.artifacts_written}")
    return "\n".join(lines)


def render_summary(summary: MigrationSummary) -> str:
    lines = [
        "Migration Summary",
        "=================",
        f"Reports processed: {summary.total}",
        f"Migrated: {summary.migrated}",
        f"Skipped (invalid): {summary.skipped}",
        f"Failed: {summary.failed}",
    ]
    skipped = [outcome.reference for outcome in summary.iter_state(ReconciliationState.SKIP)]
    if skipped:
        lines.append("\nSkipped references:")
        lines.extend(f"- {reference}" for reference in skipped)
    failed = list(summary.iter_state(ReconciliationState.FAIL))
    if failed:
        lines.append("\nFailures:")
        for outcome in failed:
            stage = outcome.failed_at.value if outcome.failed_at else "unknown"
            lines.append(f"- {outcome.reference} during {stage}: {outcome.error}")
    return "\n".join(lines)
