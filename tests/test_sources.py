"""Tests for the HTTP collaborators in :mod:`asnping.sources`."""

import pytest
import requests

from asnping.core import Config, DiscoverySettings, PerformanceMetrics
from asnping.errors import GeolocationError, PeeringDBError, PrefixSourceError
from asnping.sources import PrefixSource, PeeringDBSource, GeolocationSource

from conftest import FakeResponse, FakeSession


def test_fetch_prefixes_sends_window_and_peer_threshold():
    payload = {"data": {"prefixes": [{"prefix": "192.0.2.0/24"}, {"prefix": "2001:db8::/32"}]}}
    session = FakeSession(FakeResponse(payload))
    settings = DiscoverySettings(min_peers=10, http_timeout=7)

    prefixes = PrefixSource(settings, session=session).fetch_prefixes(64500, start_time=1700000000)

    assert prefixes == ["192.0.2.0/24", "2001:db8::/32"]
    call, = session.calls
    assert call["url"] == Config.RIPE_STAT_API
    assert call["params"]["resource"] == "AS64500"
    assert call["params"]["starttime"] == 1700000000
    assert call["params"]["min_peers_seeing"] == 10
    assert call["timeout"] == 7


def test_fetch_prefixes_defaults_to_lookback_window():
    session = FakeSession(FakeResponse({"data": {"prefixes": []}}))
    settings = DiscoverySettings(lookback_hours=24)

    PrefixSource(settings, session=session).fetch_prefixes(64500)

    started = session.calls[0]["params"]["starttime"]
    assert abs(started - settings.prefix_start_time()) <= 5


def test_fetch_prefixes_wraps_http_errors():
    metrics = PerformanceMetrics()
    session = FakeSession(FakeResponse(status_code=503))

    with pytest.raises(PrefixSourceError) as excinfo:
        PrefixSource(session=session, metrics=metrics).fetch_prefixes(64500, start_time=0)

    assert excinfo.value.asn == 64500
    assert metrics.failed_requests == 1


def test_fetch_prefixes_wraps_unexpected_shape():
    session = FakeSession(FakeResponse({"status": "ok"}))
    with pytest.raises(PrefixSourceError):
        PrefixSource(session=session).fetch_prefixes(64500, start_time=0)


def test_connection_errors_become_collaborator_errors():
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(PeeringDBError):
        PeeringDBSource(session=session).fetch_website(64500)


def test_fetch_website_returns_first_record():
    payload = {"data": [{"website": " https://www.example.net/ "}, {"website": "https://other"}]}
    session = FakeSession(FakeResponse(payload))

    website = PeeringDBSource(session=session).fetch_website(64500)

    assert website == "https://www.example.net/"
    assert session.calls[0]["params"] == {"asn": 64500}


@pytest.mark.parametrize("payload", [{"data": []}, {"data": [{"website": ""}]}, {"data": [{"website": None}]}])
def test_fetch_website_unregistered_is_empty(payload):
    session = FakeSession(FakeResponse(payload))
    assert PeeringDBSource(session=session).fetch_website(64500) == ""


def test_geolocation_lookup_parses_and_caches():
    payload = {"ip": "192.0.2.1", "city": "Paris", "region": "Ile-de-France",
               "country": "FR", "org": "AS64500 Example SAS"}
    session = FakeSession(FakeResponse(payload))
    source = GeolocationSource(DiscoverySettings(ipinfo_token="secret"), session=session)

    first = source.lookup("192.0.2.1")
    second = source.lookup("192.0.2.1")

    assert first is second
    assert first.country == "FR"
    assert first.org == "AS64500 Example SAS"
    assert len(session.calls) == 1
    assert session.calls[0]["url"] == "https://ipinfo.io/192.0.2.1/json"
    assert session.calls[0]["params"] == {"token": "secret"}


def test_geolocation_without_token_sends_no_params():
    session = FakeSession(FakeResponse({"ip": "192.0.2.1"}))
    location = GeolocationSource(session=session).lookup("192.0.2.1")

    assert session.calls[0]["params"] is None
    assert location.country == ""
    assert location.country_key == "Unknown"


def test_geolocation_error_body_is_rejected():
    session = FakeSession(FakeResponse({"error": {"title": "Wrong ip"}}))
    with pytest.raises(GeolocationError):
        GeolocationSource(session=session).lookup("192.0.2.1")


def test_geolocation_malformed_json():
    session = FakeSession(FakeResponse(json_error=ValueError("Expecting value")))
    with pytest.raises(GeolocationError, match="malformed"):
        GeolocationSource(session=session).lookup("192.0.2.1")


def test_fetch_prefixes_rejects_non_string_prefix():
    payload = {"data": {"prefixes": [{"prefix": None}, {"prefix": "192.0.2.0/24"}]}}
    session = FakeSession(FakeResponse(payload))

    with pytest.raises(PrefixSourceError) as excinfo:
        PrefixSource(session=session).fetch_prefixes(64500, start_time=0)
    assert excinfo.value.asn == 64500


@pytest.mark.parametrize("payload", [
    {"data": {"website": "https://example.net"}},
    {"data": "https://example.net"},
    {"data": [{"website": 123}]},
    {"data": [{"website": ["https://example.net"]}]},
])
def test_fetch_website_rejects_malformed_records(payload):
    session = FakeSession(FakeResponse(payload))
    with pytest.raises(PeeringDBError):
        PeeringDBSource(session=session).fetch_website(64500)
