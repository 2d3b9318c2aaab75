"""Tests for the CelesTrak element feed client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from orbwatch.core.tle import ElementRecord, parse_elements
from orbwatch.data.celestrak import GROUPS, CelestrakClient

ISS_TLE_TEXT = (
    "ISS (ZARYA)\n"
    "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993\n"
    "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596\n"
)

GEO_TLE_TEXT = (
    "INTELSAT 901\n"
    "1 26824U 01024A   24045.50000000 -.00000150  00000-0  00000-0 0  9991\n"
    "2 26824   0.0150  87.6543 0002345 123.4567 236.5432  1.00270000 83715\n"
)


def _make_response(status_code: int = 200, text: str = "") -> MagicMock:
    """Helper to create a mock response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.raise_for_status = MagicMock()
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


def test_client_init():
    client = CelestrakClient()
    assert client.timeout == 30.0
    assert isinstance(client._session, requests.Session)


@pytest.mark.parametrize("group, query", sorted(GROUPS.items()))
def test_group_url(group: str, query: str):
    url = CelestrakClient().group_url(group)
    assert url == f"https://celestrak.org/NORAD/elements/gp.php?GROUP={query}&FORMAT=tle"


def test_unknown_group_falls_back_to_stations():
    client = CelestrakClient()
    assert client.group_url("cubesats") == client.group_url("stations")


def test_fetch_group_success():
    """Records come back raw, in feed order, and decode cleanly."""
    client = CelestrakClient(timeout=5.0)
    with patch.object(client._session, "get", return_value=_make_response(200, ISS_TLE_TEXT + GEO_TLE_TEXT)) as get:
        records = client.fetch_group("stations")

    get.assert_called_once_with(client.group_url("stations"), timeout=5.0)
    assert [r.name for r in records] == ["ISS (ZARYA)", "INTELSAT 901"]
    assert all(isinstance(r, ElementRecord) for r in records)
    assert records[0].catalog_id == "25544"
    assert parse_elements(records[0]).ok


def test_fetch_group_limit():
    client = CelestrakClient()
    text = ISS_TLE_TEXT * 5
    with patch.object(client._session, "get", return_value=_make_response(200, text)):
        assert len(client.fetch_group("active", limit=3)) == 3
        assert len(client.fetch_group("active", limit=None)) == 5


def test_fetch_group_default_limit():
    client = CelestrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, ISS_TLE_TEXT * 60)):
        assert len(client.fetch_group()) == 50


def test_fetch_group_empty():
    client = CelestrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, "  \n")):
        assert client.fetch_group("weather") == []


def test_fetch_group_keeps_malformed_records_raw():
    """Decoding is the caller's job; the client does not filter."""
    broken = "BROKEN\n1 99999U short\n2 99999 short\n"
    client = CelestrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, ISS_TLE_TEXT + broken)):
        records = client.fetch_group("stations")
    assert len(records) == 2
    assert not parse_elements(records[1]).ok


def test_fetch_group_rate_limit_429():
    client = CelestrakClient()
    with patch.object(client._session, "get", return_value=_make_response(429, "Rate limited")):
        with pytest.raises(requests.HTTPError):
            client.fetch_group("starlink")
