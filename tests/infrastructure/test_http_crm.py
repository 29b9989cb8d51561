import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from report_migrator.domain.errors import CrmCreateError, CrmLookupError
from report_migrator.infrastructure.crm.http_client import HttpCrmGateway


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def respond(payload):
    return FakeResponse(json.dumps(payload).encode("utf-8") if payload is not None else b"")


@pytest.fixture
def gateway() -> HttpCrmGateway:
    return HttpCrmGateway("https://crm.example.com/", "secret", timeout=5)


def test_search_sends_token_filter_and_returns_first_id(gateway):
    with patch("urllib.request.urlopen", return_value=respond({"results": [{"id": 11}, {"id": 12}]})) as urlopen:
        assert gateway.search("R-001") == "11"

    request = urlopen.call_args.args[0]
    assert request.full_url == "https://crm.example.com/crm/v3/objects/deals/search"
    assert request.get_method() == "POST"
    assert request.get_header("Authorization") == "Bearer secret"
    body = json.loads(request.data)
    assert body["filterGroups"][0]["filters"][0] == {
        "propertyName": "dealname",
        "operator": "CONTAINS_TOKEN",
        "value": "R-001",
    }


def test_search_without_results(gateway):
    with patch("urllib.request.urlopen", return_value=respond({"total": 0, "results": []})):
        assert gateway.search("R-404") is None


def test_search_error_status_raises_lookup_error(gateway):
    error = urllib.error.HTTPError(
        "https://crm.example.com", 429, "Too Many Requests", {}, io.BytesIO(b'{"message": "rate limited"}')
    )
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(CrmLookupError) as excinfo:
            gateway.search("R-001")

    assert excinfo.value.status == 429
    assert excinfo.value.payload == {"message": "rate limited"}


def test_create_and_archive(gateway):
    with patch("urllib.request.urlopen", return_value=respond({"id": "501"})) as urlopen:
        assert gateway.create({"dealname": "R-001"}) == "501"
    assert json.loads(urlopen.call_args.args[0].data) == {"properties": {"dealname": "R-001"}}

    with patch("urllib.request.urlopen", return_value=respond(None)) as urlopen:
        gateway.archive("501")
    request = urlopen.call_args.args[0]
    assert request.get_method() == "DELETE"
    assert request.full_url.endswith("/crm/v3/objects/deals/501")


def test_create_without_id_is_an_error(gateway):
    with patch("urllib.request.urlopen", return_value=respond({"status": "error"})):
        with pytest.raises(CrmCreateError):
            gateway.create({"dealname": "R-001"})
