"""
DNS lookups used by the name-server fast path.
"""

import logging
import ipaddress
import dns.exception
import dns.resolver
from typing import List, Optional


class NameServerResolver:
    """Resolves NS records and host addresses with dnspython"""

    def __init__(self, timeout: float = 5.0, resolver: dns.resolver.Resolver = None):
        self.logger = logging.getLogger(__name__)
        if resolver is None:
            resolver = dns.resolver.Resolver()
            resolver.lifetime = timeout
            resolver.timeout = timeout
        self.resolver = resolver

    def nameservers(self, hostname: str) -> List[str]:
        """Name-server hostnames for a domain, without the trailing dot"""
        try:
            answers = self.resolver.resolve(hostname, "NS")
        except dns.exception.DNSException as e:
            self.logger.warning(f"Failed to perform NS lookup for {hostname}: {e}")
            return []

        servers = [str(rdata.target).rstrip('.') for rdata in answers]
        for server in servers:
            self.logger.debug(f"  NS {hostname}: {server}")
        return servers

    def first_nameserver(self, hostname: str) -> Optional[str]:
        servers = self.nameservers(hostname)
        return servers[0] if servers else None

    def resolve_first(self, hostname: str) -> Optional[str]:
        """
        First IPv4 address for a hostname.

        IP literals are returned unchanged without a lookup.
        """
        try:
            return str(ipaddress.IPv4Address(hostname))
        except ValueError:
            pass

        try:
            answers = self.resolver.resolve(hostname, "A")
        except dns.exception.DNSException as e:
            self.logger.debug(f"A lookup failed for {hostname}: {e}")
            return None

        for rdata in answers:
            return rdata.address
        return None
