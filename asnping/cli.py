"""
Command-line interface for asnping.

This module provides the main CLI entry point and argument parsing.
"""

import argparse
import json
import os
import sys
import logging
from typing import List

from .core import Config, DiscoverySettings, PerformanceMetrics, HTTPSessionManager, setup_logging
from .discovery import DiscoveryOrchestrator
from .errors import CollaboratorError
from .models import DiscoveryReport
from .colors import get_color_scheme, create_ascii_banner, create_separator
from .utils import parse_asn_list, asn_label, format_duration


def asn_list_argument(value: str) -> List[int]:
    """argparse type for the -asn flag"""
    try:
        asns = parse_asn_list(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if not asns:
        raise argparse.ArgumentTypeError("at least one ASN is required")
    return asns


class ASNPingCLI:
    """Main CLI application class"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.performance_metrics = PerformanceMetrics()
        self.colors = None

    def create_argument_parser(self) -> argparse.ArgumentParser:
        """Create and configure argument parser"""
        parser = argparse.ArgumentParser(
            prog="asnping",
            description="Find a live, pingable IPv4 address in each ASN and group the results by country.",
            epilog="Example: %(prog)s -asn AS13335,15169 --json",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        parser.add_argument(
            '-asn', '--asn', required=True, type=asn_list_argument, dest='asns',
            help='ASN or comma-separated list of ASNs, with or without the "AS" prefix'
        )

        probe_group = parser.add_argument_group('Probe Options')
        probe_group.add_argument(
            '--batch-size', type=int, default=Config.DEFAULT_BATCH_SIZE,
            help=f'Concurrent probes per sweep batch (default: {Config.DEFAULT_BATCH_SIZE})'
        )
        probe_group.add_argument(
            '--probe-timeout', type=float, default=Config.DEFAULT_PROBE_TIMEOUT,
            help=f'Seconds to wait for an echo reply (default: {Config.DEFAULT_PROBE_TIMEOUT})'
        )

        source_group = parser.add_argument_group('Data Source Options')
        source_group.add_argument(
            '--lookback-hours', type=int, default=Config.DEFAULT_LOOKBACK_HOURS,
            help=f'Prefix announcement window in hours (default: {Config.DEFAULT_LOOKBACK_HOURS})'
        )
        source_group.add_argument(
            '--min-peers', type=int, default=Config.DEFAULT_MIN_PEERS,
            help=f'Minimum RIS peers that must see a prefix (default: {Config.DEFAULT_MIN_PEERS})'
        )
        source_group.add_argument(
            '--http-timeout', type=float, default=Config.DEFAULT_HTTP_TIMEOUT,
            help=f'Timeout in seconds for API requests (default: {Config.DEFAULT_HTTP_TIMEOUT})'
        )
        source_group.add_argument(
            '--dns-timeout', type=float, default=Config.DEFAULT_DNS_TIMEOUT,
            help=f'Timeout in seconds for DNS lookups (default: {Config.DEFAULT_DNS_TIMEOUT})'
        )
        source_group.add_argument(
            '--ipinfo-token', default=os.environ.get('IPINFO_TOKEN', ''),
            help='ipinfo.io API token (default: $IPINFO_TOKEN)'
        )

        strategy_group = parser.add_argument_group('Strategy Options')
        strategy_group.add_argument(
            '--no-fast-path', action='store_true',
            help='Skip the name-server fast path and sweep prefixes directly'
        )
        strategy_group.add_argument(
            '--no-sweep', action='store_true',
            help='Only try the name-server fast path'
        )
        strategy_group.add_argument(
            '--strict', action='store_true',
            help='Abort the whole run on the first data source failure instead of skipping the ASN'
        )

        output_group = parser.add_argument_group('Output Options')
        output_group.add_argument(
            '--json', action='store_true',
            help='Print the country aggregate as JSON'
        )
        output_group.add_argument(
            '--quiet', '-q', action='store_true',
            help='Enable quiet mode (warnings and errors only)'
        )
        output_group.add_argument(
            '--verbose', '-v', action='store_true',
            help='Enable verbose logging (debug level)'
        )
        output_group.add_argument(
            '--no-color', action='store_true',
            help='Disable colorized output'
        )
        output_group.add_argument(
            '--no-banner', action='store_true',
            help='Skip ASCII art banner'
        )
        output_group.add_argument(
            '--no-progress', action='store_true',
            help='Hide progress bars'
        )

        return parser

    def build_settings(self, args: argparse.Namespace) -> DiscoverySettings:
        """Turn parsed arguments into validated settings"""
        settings = DiscoverySettings(
            batch_size=args.batch_size,
            probe_timeout=args.probe_timeout,
            lookback_hours=args.lookback_hours,
            min_peers=args.min_peers,
            http_timeout=args.http_timeout,
            dns_timeout=args.dns_timeout,
            ipinfo_token=args.ipinfo_token,
            use_fast_path=not args.no_fast_path,
            use_sweep=not args.no_sweep,
            strict=args.strict,
            show_progress=not (args.no_progress or args.quiet),
        )
        return settings.validate()

    def show_banner(self):
        print(self.colors.rainbow_text(create_ascii_banner()))
        print(self.colors.highlight(create_separator()))
        print()

    def print_configuration(self, args: argparse.Namespace, settings: DiscoverySettings):
        """Print current configuration"""
        asns = ', '.join(self.colors.asn_number(asn_label(asn)) for asn in args.asns)
        strategies = []
        if settings.use_fast_path:
            strategies.append('name server')
        if settings.use_sweep:
            strategies.append('prefix sweep')

        print(self.colors.title("═══ CONFIGURATION ═══"))
        print(f"{self.colors.info('ASNs:')} {asns}")
        print(f"{self.colors.info('Strategies:')} {self.colors.success(', '.join(strategies))}")
        print(f"{self.colors.info('Batch size:')} {self.colors.stat_number(str(settings.batch_size))}")
        print(f"{self.colors.info('Probe timeout:')} {self.colors.stat_number(str(settings.probe_timeout))}s")
        print(f"{self.colors.info('Prefix window:')} {settings.lookback_hours}h, "
              f"min {settings.min_peers} peers")
        if settings.strict:
            print(f"{self.colors.info('Failure policy:')} {self.colors.warning('strict')}")
        print()

    def print_report(self, report: DiscoveryReport):
        """Print the country aggregate and any misses"""
        print(self.colors.title("🎯 DISCOVERY COMPLETE"))

        if not len(report.aggregate):
            print(self.colors.error("No pingable IP found for any ASN"))
        for country, entries in report.aggregate.items():
            print(self.colors.country(country))
            for entry in entries:
                print(f"  {self.colors.ip_address(entry.ip)}  "
                      f"{self.colors.asn_number(asn_label(entry.asn))}")

        if report.unreachable:
            missing = ', '.join(asn_label(asn) for asn in report.unreachable)
            print(self.colors.warning(f"No pingable IP: {missing}"))
        for asn, reason in report.failures.items():
            print(self.colors.error(f"Skipped {asn_label(asn)}: {reason}"))

        summary = (f"Processing Time: {format_duration(self.performance_metrics.elapsed_time)}\n"
                   f"{self.performance_metrics.get_summary()}")
        print(self.colors.neon_box(summary))

    def main(self, argv: List[str] = None) -> int:
        """Main CLI entry point"""
        parser = self.create_argument_parser()
        args = parser.parse_args(argv)

        self.logger = setup_logging(verbose=args.verbose, quiet=args.quiet)
        self.colors = get_color_scheme(enabled=not args.no_color)

        try:
            settings = self.build_settings(args)
        except ValueError as e:
            parser.error(str(e))

        show_chrome = not (args.quiet or args.json)
        if show_chrome and not args.no_banner:
            self.show_banner()
        if show_chrome:
            self.print_configuration(args, settings)

        orchestrator = DiscoveryOrchestrator(settings, metrics=self.performance_metrics)

        try:
            report = orchestrator.run(args.asns)
        except KeyboardInterrupt:
            self.logger.warning("Interrupted by user")
            return 130
        except CollaboratorError as e:
            self.logger.error(f"Aborting: {e}")
            return 1
        finally:
            HTTPSessionManager().close()

        if args.json:
            print(json.dumps(report.to_dict(), indent=2))
        elif args.quiet:
            print(report.aggregate.as_dict())
        else:
            self.print_report(report)

        if report.failures and not report.results:
            return 1
        return 0


def main(argv: List[str] = None) -> int:
    """Main entry point for the CLI application"""
    cli = ASNPingCLI()
    return cli.main(argv)


if __name__ == "__main__":
    sys.exit(main())
