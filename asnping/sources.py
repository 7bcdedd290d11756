"""
External data sources consumed during discovery.

This module wraps the three HTTP collaborators:
- RIPEstat announced prefixes for an ASN
- PeeringDB network records (organization website)
- ipinfo.io IP geolocation
"""

import logging
import requests
from typing import Optional, List, Dict, Any

from .core import Config, DiscoverySettings, PerformanceMetrics, HTTPSessionManager
from .errors import CollaboratorError, PrefixSourceError, PeeringDBError, GeolocationError
from .models import LocationRecord
from .utils import asn_label


class _JSONSource:
    """Shared GET-and-decode logic for the JSON collaborators"""

    error_class = CollaboratorError

    def __init__(self, settings: DiscoverySettings = None,
                 session: requests.Session = None,
                 metrics: Optional[PerformanceMetrics] = None):
        self.settings = settings or DiscoverySettings()
        self._session = session
        self.metrics = metrics
        self.logger = logging.getLogger(__name__)

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = HTTPSessionManager().get_session()
        return self._session

    def _get_json(self, url: str, params: Dict[str, Any] = None, asn: int = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.settings.http_timeout)
            response.raise_for_status()
            payload = response.json()
        except ValueError as e:
            # requests' JSONDecodeError is both a ValueError and a RequestException
            self._record(success=False)
            raise self.error_class(f"malformed JSON response: {e}", asn=asn) from e
        except requests.exceptions.RequestException as e:
            self._record(success=False)
            raise self.error_class(f"request failed: {e}", asn=asn) from e

        self._record(success=True)
        return payload

    def _record(self, success: bool):
        if self.metrics:
            self.metrics.add_request(success=success)


class PrefixSource(_JSONSource):
    """Announced prefixes from RIPEstat"""

    error_class = PrefixSourceError

    def fetch_prefixes(self, asn: int, start_time: int = None) -> List[str]:
        """
        Query RIPEstat for prefixes announced by an ASN.

        Args:
            asn: Autonomous System Number
            start_time: Unix timestamp lower bound; defaults to the
                configured lookback window

        Returns:
            Prefixes in the order RIPEstat lists them (IPv4 and IPv6)
        """
        if start_time is None:
            start_time = self.settings.prefix_start_time()

        params = {
            "data_overload_limit": "ignore",
            "resource": asn_label(asn),
            "starttime": start_time,
            "min_peers_seeing": self.settings.min_peers,
        }
        self.logger.debug(f"Fetching prefixes for {asn_label(asn)} since {start_time}")
        payload = self._get_json(Config.RIPE_STAT_API, params=params, asn=asn)

        try:
            entries = payload["data"]["prefixes"]
            prefixes = [entry["prefix"] for entry in entries]
        except (KeyError, TypeError) as e:
            raise PrefixSourceError(f"unexpected response format: {e}", asn=asn) from e

        malformed = [prefix for prefix in prefixes if not isinstance(prefix, str)]
        if malformed:
            raise PrefixSourceError(f"non-string prefix in response: {malformed[0]!r}", asn=asn)

        self.logger.debug(f"{asn_label(asn)}: {len(prefixes)} announced prefixes")
        return prefixes


class PeeringDBSource(_JSONSource):
    """Organization website lookup via PeeringDB"""

    error_class = PeeringDBError

    def fetch_website(self, asn: int) -> str:
        """
        Return the registered website for an ASN, or "" if none is listed.
        """
        payload = self._get_json(Config.PEERINGDB_API, params={"asn": asn}, asn=asn)

        try:
            records = payload["data"]
        except (KeyError, TypeError) as e:
            raise PeeringDBError(f"unexpected response format: {e}", asn=asn) from e

        if not isinstance(records, list):
            raise PeeringDBError(f"expected a list of records, got {type(records).__name__}", asn=asn)

        website = ""
        if records and isinstance(records[0], dict):
            website = records[0].get("website") or ""
            if not isinstance(website, str):
                raise PeeringDBError(f"website is not a string: {website!r}", asn=asn)
            website = website.strip()

        if website:
            self.logger.info(f"Website for {asn_label(asn)}: {website}")
        else:
            self.logger.info(f"No website found for {asn_label(asn)}")
        return website


class GeolocationSource(_JSONSource):
    """ipinfo.io geolocation, memoized for the lifetime of the instance"""

    error_class = GeolocationError

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._cache: Dict[str, LocationRecord] = {}

    def lookup(self, ip: str) -> LocationRecord:
        if ip in self._cache:
            return self._cache[ip]

        params = {"token": self.settings.ipinfo_token} if self.settings.ipinfo_token else None
        payload = self._get_json(Config.IPINFO_API.format(ip=ip), params=params)

        if not isinstance(payload, dict):
            raise GeolocationError(f"unexpected response for {ip}: {payload!r}")
        if "error" in payload:
            raise GeolocationError(f"lookup for {ip} rejected: {payload['error']}")

        location = LocationRecord(
            ip=ip,
            city=payload.get("city") or "",
            region=payload.get("region") or "",
            country=payload.get("country") or "",
            org=payload.get("org") or "",
        )
        self.logger.debug(f"{ip} located in {location.city}, {location.region}, "
                          f"{location.country} ({location.org})")
        self._cache[ip] = location
        return location
