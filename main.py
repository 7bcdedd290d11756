#!/usr/bin/env python3
"""
asnping - Main Entry Point

Finds a live, pingable IPv4 address in each given ASN and groups the
results by country.
"""

import sys

if __name__ == "__main__":
    from asnping.cli import main
    sys.exit(main())
