"""HubSpot-style deals API client speaking JSON over HTTP."""
from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Mapping

from report_migrator.domain.errors import (
    CrmArchiveError,
    CrmCreateError,
    CrmError,
    CrmLookupError,
)

logger = logging.getLogger(__name__)

DEALS_PATH = "/crm/v3/objects/deals"
NAME_PROPERTY = "dealname"


class HttpCrmGateway:
    def __init__(self, base_url: str, token: str, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout

    def search(self, name_token: str) -> str | None:
        body = {
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": NAME_PROPERTY,
                            "operator": "CONTAINS_TOKEN",
                            "value": name_token,
                        }
                    ]
                }
            ],
            "properties": [NAME_PROPERTY],
            "limit": 1,
        }
        result = self._request("POST", f"{DEALS_PATH}/search", body, CrmLookupError)
        matches = (result or {}).get("results") or []
        if not matches:
            return None
        return str(matches[0]["id"])

    def create(self, properties: Mapping[str, object]) -> str:
        result = self._request("POST", DEALS_PATH, {"properties": dict(properties)}, CrmCreateError)
        if not result or "id" not in result:
            raise CrmCreateError("Deal creation returned no id", payload=result)
        return str(result["id"])

    def archive(self, deal_id: str) -> None:
        path = f"{DEALS_PATH}/{urllib.parse.quote(str(deal_id), safe='')}"
        self._request("DELETE", path, None, CrmArchiveError)

    def _request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None,
        error_type: type[CrmError],
    ) -> Any:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(
            f"{self._base_url}{path}",
            data=data,
            method=method,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        logger.debug("%s %s", method, path)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            payload = _decode(exc.read())
            raise error_type(f"{method} {path} failed", status=exc.code, payload=payload) from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise error_type(f"{method} {path} failed: {getattr(exc, 'reason', exc)}") from exc
        return _decode(raw)


def _decode(raw: bytes) -> Any:
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
