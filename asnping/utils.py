"""
Utility functions and helpers.
"""

import re
import ipaddress
from typing import List, Iterator, Iterable, Optional
from urllib.parse import urlsplit

from .core import Config

_ASN_PATTERN = re.compile(r'^(?:AS)?(\d+)$', re.IGNORECASE)
_MAX_ASN = 4294967295


def parse_asn(value: str) -> int:
    """
    Parse a single ASN with or without its "AS" label.

    Args:
        value: ASN string such as "AS15169", "as15169" or "15169"

    Returns:
        ASN as an integer

    Raises:
        ValueError: if the string is not a valid 32-bit ASN
    """
    match = _ASN_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid ASN: {value!r}")

    asn = int(match.group(1))
    if asn > _MAX_ASN:
        raise ValueError(f"ASN out of range: {value!r}")
    return asn


def parse_asn_list(text: str) -> List[int]:
    """
    Parse a comma-separated ASN list.

    Empty items are ignored and duplicates dropped, keeping first-seen order.
    """
    asns = []
    seen = set()
    for item in text.split(','):
        if not item.strip():
            continue
        asn = parse_asn(item)
        if asn not in seen:
            seen.add(asn)
            asns.append(asn)
    return asns


def asn_label(asn: int) -> str:
    return f"AS{asn}"


def hostname_from_url(url: str) -> Optional[str]:
    """
    Extract the hostname from a website URL, dropping a leading "www." label.

    Scheme-less values like "example.net/about" are accepted.
    """
    if not url or not url.strip():
        return None

    url = url.strip()
    try:
        hostname = urlsplit(url).hostname
        if not hostname and '://' not in url:
            hostname = urlsplit('//' + url).hostname
    except ValueError:
        return None

    if not hostname:
        return None

    hostname = hostname.rstrip('.')
    if hostname.startswith('www.'):
        hostname = hostname[len('www.'):]
    return hostname or None


def is_ipv6_prefix(prefix: str) -> bool:
    return ':' in prefix


def parse_ipv4_prefix(prefix: str) -> ipaddress.IPv4Network:
    """
    Parse an IPv4 CIDR prefix, tolerating host bits.

    Raises:
        ValueError: for IPv6 or malformed prefixes
    """
    if is_ipv6_prefix(prefix):
        raise ValueError(f"IPv6 prefix not supported: {prefix}")
    network = ipaddress.ip_network(prefix.strip(), strict=False)
    if not isinstance(network, ipaddress.IPv4Network):
        raise ValueError(f"Not an IPv4 prefix: {prefix}")
    return network


def sweep_hosts(network: ipaddress.IPv4Network,
                host_count: int = Config.SWEEP_HOST_COUNT) -> List[str]:
    """
    Host addresses to sweep for a prefix.

    Prefixes of /24 or shorter yield base+1 .. base+host_count (the first
    /24 of the block). Longer prefixes yield only their own host addresses.
    """
    if network.prefixlen <= 24:
        base = network.network_address
        return [str(base + offset) for offset in range(1, host_count + 1)]
    return [str(host) for host in network.hosts()][:host_count]


def sweep_batches(hosts: List[str], batch_size: int) -> Iterator[List[str]]:
    """
    Split hosts into probe batches.

    The first host is probed alone; the rest go in consecutive batches of
    up to batch_size addresses.
    """
    if not hosts:
        return
    yield hosts[:1]
    for start in range(1, len(hosts), batch_size):
        yield hosts[start:start + batch_size]


def unique(items: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first-seen order"""
    return list(dict.fromkeys(items))


def format_duration(seconds: float) -> str:
    """
    Format duration in human readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "1h 23m 45s")
    """
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes = int(seconds // 60)
    remaining_seconds = int(seconds % 60)

    if minutes < 60:
        return f"{minutes}m {remaining_seconds}s"

    hours = int(minutes // 60)
    remaining_minutes = int(minutes % 60)

    return f"{hours}h {remaining_minutes}m {remaining_seconds}s"
