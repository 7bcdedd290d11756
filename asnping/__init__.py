"""
asnping - ASN Liveness Discovery

Finds a live, pingable IPv4 address inside each Autonomous System by probing
its organization's name server first and sweeping its announced prefixes
second, then groups the results by country.
"""

__version__ = "1.0.0"
__author__ = "asnping Contributors"

from .core import Config, DiscoverySettings, PerformanceMetrics, setup_logging
from .models import LocationRecord, DiscoveryResult, CountryAggregate, DiscoveryReport
from .errors import CollaboratorError
from .prober import ReachabilityProber, BatchScanner
from .strategies import NameServerFastPath, PrefixSweep
from .discovery import DiscoveryOrchestrator

__all__ = [
    'Config',
    'DiscoverySettings',
    'PerformanceMetrics',
    'setup_logging',
    'LocationRecord',
    'DiscoveryResult',
    'CountryAggregate',
    'DiscoveryReport',
    'CollaboratorError',
    'ReachabilityProber',
    'BatchScanner',
    'NameServerFastPath',
    'PrefixSweep',
    'DiscoveryOrchestrator'
]
