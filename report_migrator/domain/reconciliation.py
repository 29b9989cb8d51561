"""Delete-and-recreate reconciliation of one report against the CRM and the store.

Each record walks LOOKUP -> (PURGE) -> CREATE -> PERSIST. There is no field
diffing: a matching deal or report row is destroyed and rebuilt, which makes a
rerun over the same extract converge on one deal and one report row per
reference. A record interrupted between PURGE and PERSIST is healed by the
next run.
"""
from __future__ import annotations

import logging

from .errors import CrmError, PersistenceError
from .models import Division, NormalizedDeal, NormalizedReport
from .repositories import CrmGateway, ReportStore
from .results import ReconciliationOutcome, ReconciliationState

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    def __init__(self, crm: CrmGateway, store: ReportStore) -> None:
        self._crm = crm
        self._store = store

    def reconcile(self, deal: NormalizedDeal, report: NormalizedReport) -> ReconciliationOutcome:
        reference = report.reference
        state = ReconciliationState.LOOKUP
        purged: str | None = None
        deal_id: str | None = None
        try:
            # Token search may match other references containing this one; only
            # the first hit is acted on.
            existing = self._crm.search(reference)
            if existing is not None:
                state = ReconciliationState.PURGE
                logger.info("Archiving existing deal %s for %s", existing, reference)
                self._crm.archive(existing)
                purged = existing

            state = ReconciliationState.CREATE
            deal_id = self._crm.create(deal.to_properties())
            logger.info("Created deal %s for %s", deal_id, reference)

            state = ReconciliationState.PERSIST
            replaced, report_id = self._persist(report, deal_id)
        except (CrmError, PersistenceError) as exc:
            payload = getattr(exc, "payload", None)
            logger.error("Reconciliation of %s failed during %s: %s", reference, state.value, exc)
            if payload is not None:
                logger.error("Response payload for %s: %s", reference, payload)
            return ReconciliationOutcome(
                reference=reference,
                state=ReconciliationState.FAIL,
                deal_id=deal_id,
                purged_deal_id=purged,
                failed_at=state,
                error=exc,
            )

        return ReconciliationOutcome(
            reference=reference,
            state=ReconciliationState.DONE,
            deal_id=deal_id,
            report_id=report_id,
            purged_deal_id=purged,
            replaced_report_id=replaced,
        )

    def _persist(self, report: NormalizedReport, deal_id: str) -> tuple[int | None, int]:
        replaced = self._store.find_report_by_reference(report.reference)
        if replaced is not None:
            logger.info("Deleting existing report row %s for %s", replaced, report.reference)
            self._store.delete_report(replaced)

        report_id = self._store.insert_report(report.to_row(deal_id))
        for division in (Division.DIV_40, Division.DIV_43):
            rows = [dict(asset.to_row(), report_id=report_id) for asset in report.assets_for(division)]
            if not rows:
                continue
            inserted = self._store.bulk_insert_assets(division, rows)
            logger.info("Inserted %d %s assets for %s", inserted, division.label, report.reference)
        return replaced, report_id
