"""
Tests for availability scanning (revision_availability/scanner.py).
"""

import os
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path

import pytest

from revision_availability.feed import FeedEntry
from revision_availability.scanner import (
    AvailabilityRow,
    Scanner,
    feed_label,
    revision_range,
)
from revision_availability.text_width import ANSI_PALETTE, PLAIN_PALETTE

PROJECT_ROOT = Path(__file__).parent.parent

GREEN = ANSI_PALETTE.green
RED = ANSI_PALETTE.red
RESET = ANSI_PALETTE.reset


class TestRevisionRange:
    """Tests for revision_range."""

    def test_ascending_excludes_end(self):
        """Test an ascending range stops before the end revision."""
        assert list(revision_range(100, 103)) == [100, 101, 102]

    def test_descending_excludes_end(self):
        """Test a descending range stops before the end revision."""
        assert list(revision_range(103, 100)) == [103, 102, 101]

    def test_equal_bounds_empty(self):
        """Test equal bounds scan nothing."""
        assert list(revision_range(5, 5)) == []

    def test_negative_revisions(self):
        """Test signed integer semantics."""
        assert list(revision_range(-1, 2)) == [-1, 0, 1]


class TestAvailabilityRow:
    """Tests for AvailabilityRow."""

    def test_all_available(self):
        """Test all_available is the AND of every platform."""
        assert AvailabilityRow("", 1, (True, True)).all_available
        assert not AvailabilityRow("", 1, (True, False)).all_available

    def test_values_all_available(self):
        """Test a fully available revision is green."""
        row = AvailabilityRow("", 12345, (True, True))
        assert row.to_values() == [
            f" {GREEN}12345{RESET}",
            f"{GREEN}+{RESET}",
            f"{GREEN}+{RESET}",
        ]

    def test_values_partially_available(self):
        """Test a partially available revision is plain, with +/- cells in platform order."""
        row = AvailabilityRow("", 12345, (True, False))
        assert row.to_values() == [
            " 12345",
            f"{GREEN}+{RESET}",
            f"{RED}-{RESET}",
        ]

    def test_values_with_label(self):
        """Test the label precedes the revision."""
        row = AvailabilityRow("    [linux dev]", 7, (False,))
        assert row.to_values(PLAIN_PALETTE) == ["    [linux dev] 7", "-"]

    def test_row_is_immutable(self):
        """Test rows cannot be modified."""
        row = AvailabilityRow("", 1, (True,))
        with pytest.raises(AttributeError):
            row.revision = 2


class TestFeedLabel:
    """Tests for feed_label."""

    def test_label_padded_to_15(self):
        """Test labels are right-aligned in 15 characters."""
        assert feed_label(FeedEntry("mac", "dev", 1)) == "      [mac dev]"

    def test_long_label_unchanged(self):
        """Test labels longer than 15 characters are kept whole."""
        assert feed_label(FeedEntry("win64", "canary", 1)) == "[win64 canary]".rjust(15)
        assert feed_label(FeedEntry("linux", "stable", 1)) == " [linux stable]"


class TestCheckRevision:
    """Tests for Scanner.check_revision."""

    def test_one_call_per_platform(self, make_probe):
        """Test every platform is probed once for the revision."""
        probe = make_probe()
        Scanner(probe).check_revision("", 42)
        assert sorted(probe.calls) == sorted((p, 42) for p in probe.platforms)

    def test_results_in_platform_order(self, make_probe):
        """Test results follow platform order, not completion order."""
        probe = make_probe(lambda platform, revision: platform == "linux", platforms=("linux", "mac"))
        row = Scanner(probe).check_revision("", 12345)
        assert row.per_platform == (True, False)

    def test_probes_run_concurrently(self, make_probe):
        """Test all platform probes for a row are in flight at the same time."""
        barrier = threading.Barrier(4, timeout=5)

        def answer(platform, revision):
            barrier.wait()
            return True

        row = Scanner(make_probe(answer)).check_revision("", 1)
        assert row.all_available

    def test_probe_exception_is_unavailable(self, make_probe):
        """Test a failing probe counts as unavailable."""
        def answer(platform, revision):
            if platform == "mac":
                raise RuntimeError("storage unreachable")
            return True

        row = Scanner(make_probe(answer)).check_revision("", 1)
        assert row.per_platform == (True, False, True, True)

    def test_truthy_results_normalized(self, make_probe):
        """Test non-bool answers are reduced to booleans."""
        probe = make_probe(lambda platform, revision: 1 if platform == "linux" else None)
        row = Scanner(probe).check_revision("", 1)
        assert row.per_platform == (True, False, False, False)

    def test_single_worker(self, make_probe):
        """Test a one-thread pool still checks every platform."""
        row = Scanner(make_probe(), max_workers=1).check_revision("x", 9)
        assert row == AvailabilityRow("x", 9, (True, True, True, True))


class TestScanRange:
    """Tests for Scanner.scan_range."""

    def test_ascending(self, make_probe):
        """Test revisions 100..102 are scanned in order, 103 excluded."""
        rows = list(Scanner(make_probe()).scan_range(100, 103))
        assert [row.revision for row in rows] == [100, 101, 102]
        assert all(row.label == "" for row in rows)

    def test_descending(self, make_probe):
        """Test revisions 103..101 are scanned in order, 100 excluded."""
        probe = make_probe()
        rows = list(Scanner(probe).scan_range(103, 100))
        assert [row.revision for row in rows] == [103, 102, 101]
        assert 100 not in {revision for _, revision in probe.calls}

    def test_rows_are_sequential(self, make_probe):
        """Test a row's probes all finish before the next row's start."""
        probe = make_probe()
        list(Scanner(probe).scan_range(1, 5))
        revisions = [revision for _, revision in probe.calls]
        assert revisions == sorted(revisions)
        assert len(revisions) == 16

    def test_lazy(self, make_probe):
        """Test the next revision is not probed until its row is requested."""
        probe = make_probe()
        rows = Scanner(probe).scan_range(10, 20)
        first = next(rows)
        assert first.revision == 10
        assert {revision for _, revision in probe.calls} == {10}
        rows.close()

    def test_row_timeout(self, make_probe):
        """Test probes still pending after the row timeout count as unavailable."""
        release = threading.Event()

        def answer(platform, revision):
            if platform == "win64":
                release.wait(5)
            return True

        scanner = Scanner(make_probe(answer), row_timeout=0.2)
        try:
            rows = list(scanner.scan_range(1, 2))
        finally:
            release.set()
        assert rows[0].per_platform == (True, True, True, False)

    def test_row_timeout_does_not_hold_process_exit(self):
        """Test a process exits promptly even while a timed-out check is still hanging."""
        script = textwrap.dedent("""
            import time
            from revision_availability.report import run_range_report

            class HangingLinux:
                def supported_platforms(self):
                    return ("linux", "mac")

                def can_download_revision(self, platform, revision):
                    if platform == "linux":
                        time.sleep(60)
                    return True

            run_range_report(HangingLinux(), 1, 2, row_timeout=0.2)
        """)
        env = dict(os.environ, PYTHONPATH=str(PROJECT_ROOT))

        started = time.monotonic()
        result = subprocess.run(
            [sys.executable, "-c", script],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            timeout=30,
        )
        elapsed = time.monotonic() - started

        assert result.returncode == 0, result.stderr
        assert elapsed < 20
        assert len(result.stdout.splitlines()) == 2


class TestScanFeed:
    """Tests for Scanner.scan_feed."""

    def test_rows_follow_entry_order(self, make_probe):
        """Test one labeled row per entry, in entry order."""
        entries = [
            FeedEntry("win32", "dev", 500),
            FeedEntry("linux", "stable", 400),
        ]
        rows = list(Scanner(make_probe()).scan_feed(entries))
        assert [(row.label, row.revision) for row in rows] == [
            ("    [win32 dev]", 500),
            (" [linux stable]", 400),
        ]

    def test_empty_feed(self, make_probe):
        """Test an empty feed produces no rows and no probes."""
        probe = make_probe()
        assert list(Scanner(probe).scan_feed([])) == []
        assert probe.calls == []
