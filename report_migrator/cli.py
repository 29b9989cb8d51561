"""Command-line entrypoint for the report migration."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from report_migrator.application.dto import ExtractPaths, PartitionResult
from report_migrator.application.use_cases import (
    MigrateReportsUseCase,
    MigrationContext,
    PartitionAssetsUseCase,
)
from report_migrator.config import Settings, load_settings, parse_policy
from report_migrator.domain.errors import ConfigurationError, MigrationAborted, MigrationError
from report_migrator.domain.models import Division, RawReport
from report_migrator.domain.reconciliation import ReconciliationEngine
from report_migrator.infrastructure.artifacts.file_repository import FileSystemArtifactRepository
from report_migrator.infrastructure.crm.http_client import HttpCrmGateway
from report_migrator.infrastructure.crm.memory import InMemoryCrmGateway
from report_migrator.infrastructure.extract.loaders import load_assets, load_reports
from report_migrator.infrastructure.storage.sql_store import SqlReportStore, init_db, make_engine
from report_migrator.presentation.summary import render_partition, render_summary

logger = logging.getLogger("report_migrator")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Migrate depreciation reports into the CRM and the report database")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default INFO)")
    parser.add_argument("--output-dir", type=Path, help="Directory for per-report asset artifacts")
    sub = parser.add_subparsers(dest="command", required=True)

    partition = sub.add_parser("partition", help="Split asset extracts into per-report artifacts")
    migrate = sub.add_parser("migrate", help="Reconcile reports against the CRM and the database")
    run = sub.add_parser("run", help="Partition, then migrate")

    for command in (partition, migrate, run):
        command.add_argument("reports", type=Path, help="Path to the report extract (.json, .csv or .xlsx)")
    for command in (partition, run):
        command.add_argument("--div40", type=Path, help="Path to the Division 40 asset extract")
        command.add_argument("--div43", type=Path, help="Path to the Division 43 asset extract")
    for command in (migrate, run):
        command.add_argument("--delay", type=float, help="Seconds to wait before each CRM lookup")
        command.add_argument("--policy", type=str, help="Failure policy: abort or continue")
        command.add_argument(
            "--reference",
            action="append",
            dest="references",
            help="Only migrate this reference (repeatable)",
        )
        command.add_argument(
            "--dry-run",
            action="store_true",
            help="Use an in-memory CRM and database instead of the configured ones",
        )
    return parser.parse_args(argv)


def partition(paths: ExtractPaths, reports: list[RawReport], settings: Settings) -> PartitionResult:
    assets = {}
    if paths.division_40 is not None:
        assets[Division.DIV_40] = load_assets(paths.division_40)
    if paths.division_43 is not None:
        assets[Division.DIV_43] = load_assets(paths.division_43)
    if not assets:
        raise ConfigurationError("Pass --div40 and/or --div43 to partition assets")

    repository = FileSystemArtifactRepository(settings.output_dir)
    result = PartitionAssetsUseCase(repository).execute(reports, assets)
    repository.write_manifest(result.counts)
    return result


def build_context(settings: Settings, dry_run: bool) -> MigrationContext:
    if dry_run:
        crm = InMemoryCrmGateway()
        engine = make_engine("sqlite://")
    else:
        if not settings.crm_token:
            raise ConfigurationError("MIGRATOR_CRM_TOKEN is required unless --dry-run is given")
        crm = HttpCrmGateway(settings.crm_base_url, settings.crm_token, timeout=settings.http_timeout)
        engine = make_engine(settings.database_url)
    init_db(engine)

    return MigrationContext(
        artifacts=FileSystemArtifactRepository(settings.output_dir),
        engine=ReconciliationEngine(crm, SqlReportStore(engine)),
        failure_policy=settings.failure_policy,
        request_delay=settings.request_delay,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings().with_overrides(
            output_dir=args.output_dir,
            request_delay=getattr(args, "delay", None),
            failure_policy=parse_policy(args.policy) if getattr(args, "policy", None) else None,
        )
        reports = list(load_reports(args.reports))
        logger.info("Loaded %d reports from %s", len(reports), args.reports)

        if args.command in {"partition", "run"}:
            paths = ExtractPaths(reports=args.reports, division_40=args.div40, division_43=args.div43)
            print(render_partition(partition(paths, reports, settings)))
            if args.command == "partition":
                return 0

        context = build_context(settings, args.dry_run)
        references = set(args.references) if args.references else None
        summary = MigrateReportsUseCase(context).execute(reports, references=references)
    except MigrationAborted as exc:
        logger.error("%s", exc)
        return 1
    except MigrationError as exc:
        logger.error("Fatal: %s", exc)
        return 2

    print(render_summary(summary))
    return 1 if summary.has_failures() else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
