"""
Command line entry point.

Usage:
    check_availability.py                          # revisions from the release feed
    check_availability.py FROM_REVISION TO_REVISION  # explicit revision range
"""

from __future__ import annotations

import argparse
import sys

from .config import Config, ConfigError, apply_env_overrides, load_config
from .feed import OmahaProxyFeed
from .logging_config import setup_logging
from .probe import SnapshotProbe
from .report import run_feed_report, run_range_report
from .text_width import ANSI_PALETTE, PLAIN_PALETTE

DESCRIPTION = """\
This script checks availability of different prebuilt chromium revisions.
Running command without arguments will check against omahaproxy revisions."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check_availability.py",
        usage="%(prog)s [options] [fromRevision toRevision]",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "revisions",
        nargs="*",
        help="Revision range to scan; toRevision itself is not scanned",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--timeout", type=float, help="Per-request network timeout in seconds")
    parser.add_argument("--feed-url", help="Revision feed URL")
    parser.add_argument("--download-host", help="Snapshot storage base URL")
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Merge config file, environment and command line flags.

    Raises:
        ConfigError: If any source holds an invalid value
    """
    config = apply_env_overrides(load_config(args.config))
    return config.replace(
        timeout_seconds=args.timeout,
        feed_url=args.feed_url,
        download_host=args.download_host,
        color=False if args.no_color else None,
    )


def parse_revision(parser: argparse.ArgumentParser, value: str) -> int:
    try:
        return int(value, 10)
    except ValueError:
        parser.error(f"revision must be an integer: {value!r}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.revisions) not in (0, 2):
        parser.print_help(sys.stdout)
        return 0

    revisions = [parse_revision(parser, value) for value in args.revisions]

    setup_logging(
        level="WARNING" if args.quiet else "INFO",
        verbose=args.verbose,
        log_file=args.log_file,
    )

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    palette = ANSI_PALETTE if config.color else PLAIN_PALETTE
    probe = SnapshotProbe(config.download_host, timeout=config.timeout_seconds)
    options = dict(
        palette=palette,
        max_workers=config.max_workers,
        row_timeout=config.row_timeout_seconds,
    )

    if not revisions:
        feed = OmahaProxyFeed(config.feed_url, timeout=config.timeout_seconds)
        return run_feed_report(probe, feed, **options)

    from_revision, to_revision = revisions
    return run_range_report(probe, from_revision, to_revision, **options)
