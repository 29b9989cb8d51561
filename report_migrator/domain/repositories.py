"""Collaborator interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from .models import Division, RawAsset


class CrmGateway(Protocol):
    """Deal store of the relationship-management system."""

    def search(self, name_token: str) -> str | None:
        """Return the id of the first deal whose name contains the token."""
        ...

    def create(self, properties: Mapping[str, object]) -> str:
        ...

    def archive(self, deal_id: str) -> None:
        ...


class ReportStore(Protocol):
    """Relational persistence for reports and their asset rows."""

    def find_report_by_reference(self, reference: str) -> int | None:
        ...

    def delete_report(self, report_id: int) -> None:
        ...

    def insert_report(self, fields: Mapping[str, object]) -> int:
        ...

    def bulk_insert_assets(self, division: Division, rows: Sequence[Mapping[str, object]]) -> int:
        ...


class AssetArtifactStore(Protocol):
    """Per-report, per-division intermediate asset collections."""

    def write(self, division: Division, report_id: str, assets: Sequence[RawAsset]) -> None:
        ...

    def read(self, division: Division, report_id: str) -> Sequence[RawAsset]:
        ...
