"""
Result types produced by a discovery run.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Iterator, Any, Optional

from .core import Config


@dataclass(frozen=True)
class LocationRecord:
    """Geolocation attributes for one IP address"""
    ip: str
    city: str = ""
    region: str = ""
    country: str = ""
    org: str = ""

    @property
    def country_key(self) -> str:
        return self.country or Config.UNKNOWN_COUNTRY

    def matches_asn(self, asn: int) -> bool:
        """True when the organization field names the given ASN as a whole token"""
        return re.search(rf"\bAS{asn}\b", self.org) is not None


@dataclass(frozen=True)
class DiscoveryResult:
    """The single responsive address found for an ASN"""
    asn: int
    address: str
    ip: str
    strategy: str
    location: Optional[LocationRecord] = None

    @property
    def country(self) -> str:
        if self.location is None:
            return Config.UNKNOWN_COUNTRY
        return self.location.country_key


@dataclass(frozen=True)
class AggregateEntry:
    ip: str
    asn: int


class CountryAggregate:
    """
    Append-only mapping of country to (IP, ASN) entries.

    Countries keep first-seen order and entries keep insertion order, so the
    aggregate reflects the order in which ASNs were processed.
    """

    def __init__(self):
        self._by_country: Dict[str, List[AggregateEntry]] = {}

    def add(self, country: str, ip: str, asn: int) -> AggregateEntry:
        entry = AggregateEntry(ip=ip, asn=asn)
        self._by_country.setdefault(country or Config.UNKNOWN_COUNTRY, []).append(entry)
        return entry

    def add_result(self, result: DiscoveryResult) -> AggregateEntry:
        return self.add(result.country, result.address, result.asn)

    def countries(self) -> List[str]:
        return list(self._by_country)

    def entries(self, country: str) -> List[AggregateEntry]:
        return list(self._by_country.get(country, []))

    def items(self) -> Iterator:
        for country, entries in self._by_country.items():
            yield country, list(entries)

    def as_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            country: [{"ip": entry.ip, "asn": entry.asn} for entry in entries]
            for country, entries in self._by_country.items()
        }

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._by_country.values())

    def __contains__(self, country: str) -> bool:
        return country in self._by_country

    def __repr__(self) -> str:
        return f"CountryAggregate({self.as_dict()!r})"


@dataclass
class DiscoveryReport:
    """Everything a run produced, in ASN processing order"""
    aggregate: CountryAggregate = field(default_factory=CountryAggregate)
    results: List[DiscoveryResult] = field(default_factory=list)
    unreachable: List[int] = field(default_factory=list)
    failures: Dict[int, str] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return len(self.results) + len(self.unreachable) + len(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "countries": self.aggregate.as_dict(),
            "unreachable": list(self.unreachable),
            "failures": {str(asn): reason for asn, reason in self.failures.items()},
        }
