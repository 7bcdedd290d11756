"""Shared test fixtures and fakes."""

import threading

import pytest

from asnping.core import DiscoverySettings
from asnping.models import LocationRecord


class FakeProber:
    """Prober stand-in that answers for a fixed set of addresses."""

    def __init__(self, reachable=(), delay=0.0):
        self.reachable = set(reachable)
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def probe(self, address):
        if self.delay:
            threading.Event().wait(self.delay)
        with self._lock:
            self.calls.append(address)
        return address in self.reachable


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


class FakeSession:
    """Records GET calls and replays canned responses."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class StubGeolocation:
    def __init__(self, locations=None, error=None):
        self.locations = locations or {}
        self.error = error
        self.lookups = []

    def lookup(self, ip):
        self.lookups.append(ip)
        if self.error is not None:
            raise self.error
        return self.locations.get(ip, LocationRecord(ip=ip))


class StubPrefixSource:
    def __init__(self, prefixes=None, error=None):
        self.prefixes = prefixes or {}
        self.error = error
        self.calls = []

    def fetch_prefixes(self, asn, start_time=None):
        self.calls.append((asn, start_time))
        if self.error is not None:
            raise self.error
        return list(self.prefixes.get(asn, []))


@pytest.fixture
def quiet_settings():
    """Settings with progress bars disabled."""
    return DiscoverySettings(show_progress=False)
