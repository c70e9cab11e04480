"""
Availability scanning.

For each revision, all platforms are probed concurrently and the row is only
produced once every probe has answered. Rows are produced one at a time, in
iteration order: the next revision is not probed until the caller has taken
the previous row.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from .feed import FeedEntry
from .probe import AvailabilityProbe
from .text_width import ANSI_PALETTE, Palette, colorize, pad_left

logger = logging.getLogger(__name__)

FEED_TAG_WIDTH = 15


@dataclass(frozen=True)
class AvailabilityRow:
    """
    Availability of one revision across all platforms.

    Attributes:
        label: Row label, empty in range mode
        revision: Revision that was probed
        per_platform: One flag per platform, in the probe's platform order
    """
    label: str
    revision: int
    per_platform: tuple[bool, ...]

    @property
    def all_available(self) -> bool:
        return all(self.per_platform)

    def to_values(self, palette: Palette = ANSI_PALETTE) -> list[str]:
        """Render the row as table cells.

        The revision is green only when every platform is available.
        """
        revision = str(self.revision)
        if self.all_available:
            revision = colorize(revision, palette.green, palette)
        values = [f"{self.label} {revision}"]
        for available in self.per_platform:
            if available:
                values.append(colorize("+", palette.green, palette))
            else:
                values.append(colorize("-", palette.red, palette))
        return values


def revision_range(from_revision: int, to_revision: int) -> range:
    """Revisions from from_revision towards to_revision, excluding to_revision."""
    step = 1 if from_revision < to_revision else -1
    return range(from_revision, to_revision, step)


def feed_label(entry: FeedEntry, palette: Palette = ANSI_PALETTE) -> str:
    """Label for a feed row, e.g. ``'   [mac canary]'``."""
    return pad_left(f"[{entry.platform} {entry.channel}]", FEED_TAG_WIDTH, palette)


def _submit_detached(fn: Callable[..., bool], *args: Any) -> Future:
    """Run fn on a daemon thread.

    The thread is not joined at interpreter exit, so a call that never returns
    does not keep the process alive.
    """
    future: Future = Future()

    def run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    threading.Thread(target=run, daemon=True).start()
    return future


class Scanner:
    """
    Runs probes for revisions and assembles availability rows.

    Without a row timeout, probes run on a thread pool and every row waits for
    all of them. With a row timeout, each probe gets its own daemon thread, so
    probes that are given up on cannot delay process exit.

    Attributes:
        probe: Availability probe
        platforms: Platform order used for every row
        max_workers: Thread pool size (defaults to the number of platforms)
        row_timeout: Seconds to wait for a row's probes, or None to wait for all
    """

    def __init__(
        self,
        probe: AvailabilityProbe,
        max_workers: int | None = None,
        row_timeout: float | None = None,
    ):
        self.probe = probe
        self.platforms = tuple(probe.supported_platforms())
        self.max_workers = max_workers or max(1, len(self.platforms))
        self.row_timeout = row_timeout

    def check_revision(self, label: str, revision: int) -> AvailabilityRow:
        """Probe a single revision on all platforms."""
        rows = self._scan([(label, revision)])
        try:
            return next(rows)
        finally:
            rows.close()

    def scan_range(self, from_revision: int, to_revision: int) -> Iterator[AvailabilityRow]:
        """Yield rows for a revision range, see revision_range()."""
        jobs = (("", revision) for revision in revision_range(from_revision, to_revision))
        return self._scan(jobs)

    def scan_feed(self, entries: Iterable[FeedEntry], palette: Palette = ANSI_PALETTE) -> Iterator[AvailabilityRow]:
        """Yield one labeled row per feed entry, in entry order."""
        jobs = ((feed_label(entry, palette), entry.revision) for entry in entries)
        return self._scan(jobs)

    def _scan(self, jobs: Iterable[tuple[str, int]]) -> Iterator[AvailabilityRow]:
        if self.row_timeout is not None:
            for label, revision in jobs:
                yield self._check(_submit_detached, label, revision)
            return

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for label, revision in jobs:
                yield self._check(executor.submit, label, revision)

    def _check(self, submit: Callable[..., Future], label: str, revision: int) -> AvailabilityRow:
        futures = [
            submit(self.probe.can_download_revision, platform, revision)
            for platform in self.platforms
        ]
        _, pending = wait(futures, timeout=self.row_timeout)

        results = []
        for platform, future in zip(self.platforms, futures):
            if future in pending:
                logger.warning(f"{platform}@{revision}: no answer within {self.row_timeout}s")
                results.append(False)
                continue
            try:
                results.append(bool(future.result()))
            except Exception as e:
                logger.warning(f"{platform}@{revision}: probe failed: {e}")
                results.append(False)

        row = AvailabilityRow(label=label, revision=revision, per_platform=tuple(results))
        logger.debug(f"Revision {revision}: {sum(results)}/{len(results)} platforms available")
        return row
