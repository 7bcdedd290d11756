"""
Liveness discovery strategies.

The name-server fast path tries one likely-reachable host (the
authoritative name server of the ASN's registered domain). The prefix sweep
falls back to probing announced IPv4 prefixes address by address.
"""

import logging
from typing import Optional, List, Sequence
from tqdm import tqdm

from .core import Config
from .dns_lookup import NameServerResolver
from .errors import CollaboratorError
from .models import LocationRecord
from .prober import BatchScanner
from .sources import PeeringDBSource, GeolocationSource
from .utils import asn_label, hostname_from_url, is_ipv6_prefix, parse_ipv4_prefix, sweep_hosts, sweep_batches


class NameServerFastPath:
    """Probe the organization's authoritative name server"""

    def __init__(self, scanner: BatchScanner, peeringdb: PeeringDBSource,
                 resolver: NameServerResolver, geolocation: GeolocationSource):
        self.scanner = scanner
        self.peeringdb = peeringdb
        self.resolver = resolver
        self.geolocation = geolocation
        self.logger = logging.getLogger(__name__)
        self.last_ip: Optional[str] = None
        self.last_location: Optional[LocationRecord] = None

    def try_fast_path(self, asn: int) -> Optional[str]:
        """
        Find a reachable name server that belongs to the ASN.

        Args:
            asn: Autonomous System Number

        Returns:
            The name-server hostname, or None if any step fails. On success
            ``last_ip`` and ``last_location`` hold the validated address and
            its location.
        """
        self.last_ip = None
        self.last_location = None
        label = asn_label(asn)

        try:
            website = self.peeringdb.fetch_website(asn)
        except CollaboratorError as e:
            self.logger.warning(f"{label}: website lookup failed, skipping name-server probe ({e})")
            return None

        domain = hostname_from_url(website)
        if not domain:
            self.logger.debug(f"{label}: no usable domain in website {website!r}")
            return None

        nameserver = self.resolver.first_nameserver(domain)
        if not nameserver:
            self.logger.debug(f"{label}: no name server found for {domain}")
            return None

        # The pinged address and the geolocated address must be the same one
        ip = self.resolver.resolve_first(nameserver)
        if not ip:
            self.logger.debug(f"{label}: could not resolve {nameserver}")
            return None

        results = self.scanner.scan([ip])
        if not results.get(ip):
            self.logger.info(f"{label}: name server {nameserver} ({ip}) is not reachable")
            return None

        try:
            location = self.geolocation.lookup(ip)
        except CollaboratorError as e:
            self.logger.warning(f"{label}: could not validate {nameserver} ({e})")
            return None

        if not location.matches_asn(asn):
            self.logger.info(f"{label}: name server {nameserver} ({ip}) belongs to "
                             f"{location.org or 'an unknown network'}, not {label}")
            return None

        self.logger.info(f"{label}: name server {nameserver} ({ip}) is reachable")
        self.last_ip = ip
        self.last_location = location
        return nameserver


class PrefixSweep:
    """Brute-force sweep of announced IPv4 prefixes"""

    def __init__(self, scanner: BatchScanner, batch_size: int = Config.DEFAULT_BATCH_SIZE,
                 host_count: int = Config.SWEEP_HOST_COUNT, show_progress: bool = False):
        self.scanner = scanner
        self.batch_size = batch_size
        self.host_count = host_count
        self.show_progress = show_progress
        self.logger = logging.getLogger(__name__)

    def eligible_prefixes(self, prefixes: Sequence[str]) -> List:
        """Parse prefixes, dropping IPv6 and malformed entries"""
        networks = []
        for prefix in prefixes:
            if not isinstance(prefix, str):
                self.logger.warning(f"Skipping non-string prefix {prefix!r}")
                continue
            if is_ipv6_prefix(prefix):
                self.logger.debug(f"Skipping IPv6 prefix {prefix}")
                continue
            try:
                networks.append(parse_ipv4_prefix(prefix))
            except ValueError as e:
                self.logger.warning(f"Skipping malformed prefix {prefix!r}: {e}")
        return networks

    def sweep(self, prefixes: Sequence[str]) -> Optional[str]:
        """
        Return the first responsive address across the prefixes, in order.

        Args:
            prefixes: Announced prefixes, IPv6 entries allowed (ignored)

        Returns:
            The responsive address, or None once every prefix is exhausted
        """
        for network in self.eligible_prefixes(prefixes):
            hosts = sweep_hosts(network, self.host_count)
            self.logger.debug(f"Sweeping {network} ({len(hosts)} hosts)")

            with tqdm(total=len(hosts), desc=f"  {network}", unit="IPs",
                      leave=False, disable=not self.show_progress) as pbar:
                for batch in sweep_batches(hosts, self.batch_size):
                    results = self.scanner.scan(batch)
                    pbar.update(len(batch))

                    for address in batch:
                        if results.get(address):
                            self.logger.info(f"{address} is reachable")
                            return address

            self.logger.debug(f"No responsive host in {network}")

        return None
