"""
Core utilities and configuration for the ASN liveness discovery tool.
"""

import time
import logging
import threading
import requests
from dataclasses import dataclass, field
from urllib3.util.retry import Retry


@dataclass
class PerformanceMetrics:
    """Track request and probe counters for a run"""
    start_time: float = field(default_factory=time.time)
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    probes_sent: int = 0
    probes_answered: int = 0
    asns_processed: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    @property
    def probes_per_second(self) -> float:
        if self.elapsed_time > 0:
            return self.probes_sent / self.elapsed_time
        return 0.0

    @property
    def success_rate(self) -> float:
        if self.total_requests > 0:
            return (self.successful_requests / self.total_requests) * 100
        return 0.0

    def add_request(self, success: bool = True):
        with self._lock:
            self.total_requests += 1
            if success:
                self.successful_requests += 1
            else:
                self.failed_requests += 1

    def add_probe(self, answered: bool):
        with self._lock:
            self.probes_sent += 1
            if answered:
                self.probes_answered += 1

    def add_asn(self, count: int = 1):
        with self._lock:
            self.asns_processed += count

    def get_summary(self) -> str:
        return (f"ASNs: {self.asns_processed:,} | "
                f"Probes: {self.probes_sent:,} ({self.probes_answered:,} answered) | "
                f"Requests: {self.total_requests:,} | "
                f"Success: {self.success_rate:.1f}% | "
                f"Rate: {self.probes_per_second:.1f} probes/sec")


class HTTPSessionManager:
    """Manages a shared HTTP session with connection pooling"""

    _instance = None
    _session = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(HTTPSessionManager, cls).__new__(cls)
        return cls._instance

    def get_session(self) -> requests.Session:
        """Get or create HTTP session with connection pooling"""
        if self._session is None:
            self._session = requests.Session()

            # One reconnect attempt only; HTTP status codes are never retried
            adapter = requests.adapters.HTTPAdapter(
                pool_connections=4,
                pool_maxsize=10,
                max_retries=Retry(total=1, connect=1, read=0, status=0, redirect=3)
            )
            self._session.mount('http://', adapter)
            self._session.mount('https://', adapter)

            self._session.headers.update({
                'User-Agent': 'Mozilla/5.0 (compatible; asnping/1.0)',
                'Accept': 'application/json',
                'Accept-Encoding': 'gzip, deflate',
                'Connection': 'keep-alive'
            })

        return self._session

    def close(self):
        """Close the HTTP session"""
        if self._session:
            self._session.close()
            self._session = None


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Setup logging with configurable verbosity"""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(console_handler)

    # urllib3 connection chatter drowns out probe output at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    return logger


class Config:
    """Global configuration constants"""

    # API URLs
    RIPE_STAT_API = "https://stat.ripe.net/data/announced-prefixes/data.json"
    PEERINGDB_API = "https://www.peeringdb.com/api/net"
    IPINFO_API = "https://ipinfo.io/{ip}/json"

    # Probing
    DEFAULT_BATCH_SIZE = 10
    DEFAULT_PROBE_TIMEOUT = 1.0
    SWEEP_HOST_COUNT = 254

    # Prefix lookup
    DEFAULT_LOOKBACK_HOURS = 24
    DEFAULT_MIN_PEERS = 10

    # Collaborator timeouts (seconds)
    DEFAULT_HTTP_TIMEOUT = 10
    DEFAULT_DNS_TIMEOUT = 5.0

    UNKNOWN_COUNTRY = "Unknown"


@dataclass
class DiscoverySettings:
    """
    Tunables for a discovery run.

    Defaults come from :class:`Config`; the CLI overrides them per run.
    """
    batch_size: int = Config.DEFAULT_BATCH_SIZE
    probe_timeout: float = Config.DEFAULT_PROBE_TIMEOUT
    lookback_hours: int = Config.DEFAULT_LOOKBACK_HOURS
    min_peers: int = Config.DEFAULT_MIN_PEERS
    http_timeout: float = Config.DEFAULT_HTTP_TIMEOUT
    dns_timeout: float = Config.DEFAULT_DNS_TIMEOUT
    ipinfo_token: str = ""
    use_fast_path: bool = True
    use_sweep: bool = True
    strict: bool = False
    show_progress: bool = True

    def validate(self) -> "DiscoverySettings":
        """Raise ValueError for out-of-range settings"""
        if self.batch_size < 1:
            raise ValueError("batch size must be at least 1")
        if self.probe_timeout <= 0:
            raise ValueError("probe timeout must be positive")
        if self.lookback_hours < 0:
            raise ValueError("lookback hours cannot be negative")
        if self.min_peers < 0:
            raise ValueError("minimum peers cannot be negative")
        if self.http_timeout <= 0 or self.dns_timeout <= 0:
            raise ValueError("collaborator timeouts must be positive")
        if not (self.use_fast_path or self.use_sweep):
            raise ValueError("at least one discovery strategy must be enabled")
        return self

    def prefix_start_time(self, now: float = None) -> int:
        """Unix timestamp marking the start of the prefix lookback window"""
        if now is None:
            now = time.time()
        return int(now - self.lookback_hours * 3600)
