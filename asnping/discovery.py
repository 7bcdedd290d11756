"""
Per-ASN discovery orchestration.

Runs the name-server fast path, falls back to the prefix sweep, geolocates
whatever address was found and aggregates the results by country.
"""

import logging
from typing import Optional, Iterable
from tqdm import tqdm

from .core import DiscoverySettings, PerformanceMetrics
from .dns_lookup import NameServerResolver
from .errors import CollaboratorError
from .models import CountryAggregate, DiscoveryReport, DiscoveryResult
from .prober import ReachabilityProber, BatchScanner
from .sources import PrefixSource, PeeringDBSource, GeolocationSource
from .strategies import NameServerFastPath, PrefixSweep
from .utils import asn_label


class DiscoveryOrchestrator:
    """Sequences the discovery strategies for each ASN"""

    def __init__(self, settings: DiscoverySettings = None,
                 metrics: Optional[PerformanceMetrics] = None,
                 prefix_source: PrefixSource = None,
                 geolocation: GeolocationSource = None,
                 fast_path: NameServerFastPath = None,
                 sweep: PrefixSweep = None):
        self.settings = settings or DiscoverySettings()
        self.metrics = metrics
        self.logger = logging.getLogger(__name__)

        self.prefix_source = prefix_source or PrefixSource(self.settings, metrics=metrics)
        self.geolocation = geolocation or GeolocationSource(self.settings, metrics=metrics)

        if fast_path is None or sweep is None:
            scanner = BatchScanner(ReachabilityProber(self.settings.probe_timeout), metrics=metrics)
            if fast_path is None:
                fast_path = NameServerFastPath(
                    scanner,
                    PeeringDBSource(self.settings, metrics=metrics),
                    NameServerResolver(timeout=self.settings.dns_timeout),
                    self.geolocation,
                )
            if sweep is None:
                sweep = PrefixSweep(scanner, batch_size=self.settings.batch_size,
                                    show_progress=self.settings.show_progress)
        self.fast_path = fast_path
        self.sweep = sweep

    def discover(self, asn: int, aggregate: CountryAggregate) -> Optional[DiscoveryResult]:
        """
        Find one responsive address for an ASN and record it in the aggregate.

        Args:
            asn: Autonomous System Number
            aggregate: Accumulator the result is appended to

        Returns:
            The discovery result, or None when neither strategy found an
            address (the aggregate is left untouched)

        Raises:
            CollaboratorError: if prefix lookup or geolocation fails
        """
        label = asn_label(asn)
        result = None

        if self.settings.use_fast_path:
            self.logger.info(f"{label}: trying name-server fast path")
            nameserver = self.fast_path.try_fast_path(asn)
            if nameserver:
                result = DiscoveryResult(
                    asn=asn,
                    address=nameserver,
                    ip=self.fast_path.last_ip,
                    strategy="nameserver",
                    location=self.fast_path.last_location,
                )

        if result is None and self.settings.use_sweep:
            prefixes = self.prefix_source.fetch_prefixes(
                asn, start_time=self.settings.prefix_start_time()
            )
            self.logger.info(f"{label}: sweeping {len(prefixes)} announced prefixes")
            address = self.sweep.sweep(prefixes)
            if address:
                location = self.geolocation.lookup(address)
                result = DiscoveryResult(
                    asn=asn, address=address, ip=address, strategy="sweep", location=location
                )

        if result is None:
            self.logger.warning(f"No pingable IP found for {label}")
            return None

        aggregate.add_result(result)
        self.logger.info(f"{label}: {result.address} ({result.country}) via {result.strategy}")
        return result

    def run(self, asns: Iterable[int]) -> DiscoveryReport:
        """
        Discover every ASN in order, one at a time.

        Collaborator failures skip the affected ASN and are listed in the
        report, unless the settings ask for strict mode, in which case the
        first failure is re-raised.
        """
        asns = list(asns)
        report = DiscoveryReport()

        with tqdm(asns, desc="Discovering", unit="ASN",
                  disable=not self.settings.show_progress) as pbar:
            for asn in pbar:
                pbar.set_postfix_str(asn_label(asn))
                try:
                    result = self.discover(asn, report.aggregate)
                except CollaboratorError as e:
                    if self.settings.strict:
                        raise
                    self.logger.error(f"Skipping {asn_label(asn)}: {e}")
                    report.failures[asn] = str(e)
                    continue
                finally:
                    if self.metrics:
                        self.metrics.add_asn()

                if result is None:
                    report.unreachable.append(asn)
                else:
                    report.results.append(result)

        return report
