"""Dict-backed CRM used by dry runs and tests."""
from __future__ import annotations

from itertools import count
from typing import Mapping

from report_migrator.domain.errors import CrmArchiveError


class InMemoryCrmGateway:
    def __init__(self) -> None:
        self.deals: dict[str, dict[str, object]] = {}
        self.archived: dict[str, dict[str, object]] = {}
        self._ids = count(1)

    def search(self, name_token: str) -> str | None:
        for deal_id, properties in self.deals.items():
            if name_token in str(properties.get("dealname", "")):
                return deal_id
        return None

    def create(self, properties: Mapping[str, object]) -> str:
        deal_id = str(next(self._ids))
        self.deals[deal_id] = dict(properties)
        return deal_id

    def archive(self, deal_id: str) -> None:
        if deal_id not in self.deals:
            raise CrmArchiveError(f"Deal {deal_id} not found", status=404)
        self.archived[deal_id] = self.deals.pop(deal_id)
