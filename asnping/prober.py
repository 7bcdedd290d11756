"""
ICMP reachability probing.

This module provides the single-address echo probe and the batch scanner
that runs it concurrently over a group of addresses.
"""

import logging
import threading
import ping3
from ping3.errors import PingError
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict, Iterable, Optional

from .core import Config, PerformanceMetrics
from .utils import unique


class ReachabilityProber:
    """Sends one ICMP echo request per probe"""

    def __init__(self, timeout: float = Config.DEFAULT_PROBE_TIMEOUT):
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def probe(self, address: str) -> bool:
        """
        Check whether an address answers a single echo request.

        Args:
            address: IPv4 address or hostname

        Returns:
            True if a reply arrived before the timeout. Errors of any kind
            (resolution, missing raw-socket privilege, transport) count as
            not reachable.
        """
        try:
            delay = ping3.ping(address, timeout=self.timeout, unit="s")
        except PermissionError as e:
            self.logger.debug(f"ICMP not permitted for {address}: {e}")
            return False
        except (PingError, OSError) as e:
            self.logger.debug(f"Probe error for {address}: {e}")
            return False
        except Exception as e:
            self.logger.debug(f"Unexpected probe failure for {address}: {e}")
            return False

        # ping3 returns None on timeout and False on error
        return delay is not None and delay is not False


class BatchScanner:
    """Probes a batch of addresses concurrently and waits for all of them"""

    def __init__(self, prober: ReachabilityProber = None,
                 metrics: Optional[PerformanceMetrics] = None):
        self.prober = prober or ReachabilityProber()
        self.metrics = metrics
        self.logger = logging.getLogger(__name__)

    def scan(self, addresses: Iterable[str]) -> Dict[str, bool]:
        """
        Probe every address in parallel.

        Returns only after every probe has finished, with exactly one entry
        per distinct input address.
        """
        batch = unique(addresses)
        results: Dict[str, bool] = {}
        if not batch:
            return results

        lock = threading.Lock()

        def probe_into(address: str):
            try:
                reachable = self.prober.probe(address)
            except Exception as e:
                self.logger.debug(f"Probe for {address} raised: {e}")
                reachable = False
            with lock:
                results[address] = reachable

        with ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="probe") as executor:
            futures = [executor.submit(probe_into, address) for address in batch]
            wait(futures)

        for address in batch:
            reachable = results[address]
            if self.metrics:
                self.metrics.add_probe(answered=reachable)
            if not reachable:
                self.logger.debug(f"{address} is not reachable")

        return results
