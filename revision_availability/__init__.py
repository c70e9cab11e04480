"""
Revision availability - prebuilt Chromium snapshot availability reports.

Core Modules:
- Rendering: visible-width padding, fixed-width color-aware tables
- Collaborators: snapshot archive probe, release channel revision feed
- Scanning: concurrent per-platform checks, one row per revision
- Reporting: range and feed reports, command line entry point
"""

__version__ = "1.0.0"

VERSION = __version__

# Rendering
from .text_width import (
    Palette,
    ANSI_PALETTE,
    PLAIN_PALETTE,
    strip_colors,
    visible_length,
    pad_left,
    pad_center,
    colorize,
)
from .render import Table, ColumnCountError

# Collaborators
from .probe import AvailabilityProbe, SnapshotProbe, DOWNLOAD_URLS
from .feed import (
    FeedEntry,
    FeedError,
    FeedNetworkError,
    FeedParseError,
    RevisionFeed,
    OmahaProxyFeed,
    parse_feed,
)

# Scanning and reporting
from .scanner import AvailabilityRow, Scanner, revision_range, feed_label
from .report import run_range_report, run_feed_report

# Configuration and logging
from .config import Config, ConfigError, load_config, load_config_file, apply_env_overrides
from .logging_config import setup_logging

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Rendering
    "Palette",
    "ANSI_PALETTE",
    "PLAIN_PALETTE",
    "strip_colors",
    "visible_length",
    "pad_left",
    "pad_center",
    "colorize",
    "Table",
    "ColumnCountError",
    # Collaborators
    "AvailabilityProbe",
    "SnapshotProbe",
    "DOWNLOAD_URLS",
    "FeedEntry",
    "FeedError",
    "FeedNetworkError",
    "FeedParseError",
    "RevisionFeed",
    "OmahaProxyFeed",
    "parse_feed",
    # Scanning and reporting
    "AvailabilityRow",
    "Scanner",
    "revision_range",
    "feed_label",
    "run_range_report",
    "run_feed_report",
    # Configuration and logging
    "Config",
    "ConfigError",
    "load_config",
    "load_config_file",
    "apply_env_overrides",
    "setup_logging",
]
