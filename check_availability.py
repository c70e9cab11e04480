#!/usr/bin/env python3
"""
Check availability of prebuilt Chromium snapshot revisions.

Usage:
    check_availability.py                        # revisions from omahaproxy
    check_availability.py 500000 500010          # explicit range, 500010 excluded
    check_availability.py --no-color 500010 500000
"""

import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from revision_availability.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
