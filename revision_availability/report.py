"""
Availability reports: a header row followed by one row per revision.

Rows are drawn as soon as their probes have answered.
"""

from __future__ import annotations

import logging
from typing import Iterable, TextIO

from .feed import FeedError, RevisionFeed
from .probe import AvailabilityProbe
from .render import Table
from .scanner import AvailabilityRow, Scanner
from .text_width import ANSI_PALETTE, Palette

logger = logging.getLogger(__name__)

RANGE_LABEL_WIDTH = 10
FEED_LABEL_WIDTH = 27
PLATFORM_WIDTH = 7


def make_table(
    probe: AvailabilityProbe,
    label_width: int,
    palette: Palette = ANSI_PALETTE,
    stream: TextIO | None = None,
) -> Table:
    """Create a table with a label column and one column per platform."""
    widths = [label_width] + [PLATFORM_WIDTH] * len(probe.supported_platforms())
    return Table(widths, palette=palette, stream=stream)


def draw_header(table: Table, probe: AvailabilityProbe) -> None:
    table.draw_row([""] + list(probe.supported_platforms()))


def _draw_rows(table: Table, rows: Iterable[AvailabilityRow]) -> int:
    count = 0
    for row in rows:
        table.draw_row(row.to_values(table.palette))
        count += 1
    return count


def run_range_report(
    probe: AvailabilityProbe,
    from_revision: int,
    to_revision: int,
    palette: Palette = ANSI_PALETTE,
    stream: TextIO | None = None,
    max_workers: int | None = None,
    row_timeout: float | None = None,
) -> int:
    """
    Report availability for revisions from from_revision up to, but not
    including, to_revision. The range may run downwards.

    Returns:
        Exit status (always 0)
    """
    table = make_table(probe, RANGE_LABEL_WIDTH, palette, stream)
    draw_header(table, probe)

    scanner = Scanner(probe, max_workers=max_workers, row_timeout=row_timeout)
    count = _draw_rows(table, scanner.scan_range(from_revision, to_revision))
    logger.debug(f"Scanned {count} revisions from {from_revision} to {to_revision}")
    return 0


def run_feed_report(
    probe: AvailabilityProbe,
    feed: RevisionFeed,
    palette: Palette = ANSI_PALETTE,
    stream: TextIO | None = None,
    max_workers: int | None = None,
    row_timeout: float | None = None,
) -> int:
    """
    Report availability for the revisions the release channels point at.

    Returns:
        0 on success, 1 if the feed could not be fetched (nothing is drawn)
    """
    logger.info(f"Fetching revisions from {feed.url}")
    try:
        entries = feed.fetch_all()
    except FeedError as e:
        logger.error(f"failed to fetch chromium revisions from omahaproxy: {e}")
        return 1

    table = make_table(probe, FEED_LABEL_WIDTH, palette, stream)
    draw_header(table, probe)

    scanner = Scanner(probe, max_workers=max_workers, row_timeout=row_timeout)
    count = _draw_rows(table, scanner.scan_feed(entries, palette))
    logger.debug(f"Scanned {count} feed revisions")
    return 0
