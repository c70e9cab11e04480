"""
Revision feed: which revisions the release channels currently point at.

The feed is a JSON document listing, per operating system, the channels and
their branch base positions. Only the main desktop platforms and the four
public channels are kept.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://omahaproxy.appspot.com/all.json"
USER_AGENT = "revision-availability/1.0"

# Feed os name -> platform name shown in the report
ACCEPTED_PLATFORMS = {
    "mac": "mac",
    "win": "win32",
    "win64": "win64",
    "linux": "linux",
}
ACCEPTED_CHANNELS = ("dev", "beta", "canary", "stable")


class FeedError(Exception):
    """Raised when the revision feed cannot be obtained."""
    pass


class FeedNetworkError(FeedError):
    """Raised on transport errors or a non-200 response."""
    pass


class FeedParseError(FeedError):
    """Raised when the feed body is not the expected JSON document."""
    pass


@dataclass(frozen=True)
class FeedEntry:
    """
    One channel revision of one platform.

    Attributes:
        platform: Report platform name (mac, win32, win64, linux)
        channel: Release channel (dev, beta, canary, stable)
        revision: Branch base position
    """
    platform: str
    channel: str
    revision: int


class RevisionFeed(Protocol):
    """Source of channel revisions."""

    url: str

    def fetch_all(self) -> list[FeedEntry]:
        ...


def http_get(url: str, timeout: float | None = None) -> bytes:
    """Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds, or None to wait indefinitely

    Returns:
        Response body as bytes

    Raises:
        FeedNetworkError: If the request fails or does not answer 200
    """
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            if response.status != 200:
                raise FeedNetworkError(f"Failed to fetch {url}: HTTP {response.status}")
            return response.read()
    except urllib.error.HTTPError as e:
        raise FeedNetworkError(f"Failed to fetch {url}: HTTP {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise FeedNetworkError(f"Failed to fetch {url}: {e}") from e


def parse_feed(document: Any) -> list[FeedEntry]:
    """Turn a decoded feed document into report entries.

    Entries keep document order. Unsupported platforms and channels are
    dropped, as are versions without an integer branch base position.

    Args:
        document: Decoded JSON feed

    Returns:
        Filtered feed entries

    Raises:
        FeedParseError: If the document is not a list of platform objects
    """
    if not isinstance(document, list):
        raise FeedParseError(f"Expected a list of platforms, got {type(document).__name__}")

    entries: list[FeedEntry] = []
    for item in document:
        if not isinstance(item, dict):
            raise FeedParseError(f"Expected a platform object, got {type(item).__name__}")
        os_name = item.get("os", "")
        if not isinstance(os_name, str):
            raise FeedParseError(f"Expected an os name, got {type(os_name).__name__}")
        platform = ACCEPTED_PLATFORMS.get(os_name)
        if platform is None:
            continue
        versions = item.get("versions", [])
        if not isinstance(versions, list):
            raise FeedParseError(f"Expected a list of versions for {os_name}, got {type(versions).__name__}")
        for version in versions:
            if not isinstance(version, dict):
                raise FeedParseError(f"Expected a version object, got {type(version).__name__}")
            channel = version.get("channel")
            if channel not in ACCEPTED_CHANNELS:
                continue
            position = version.get("branch_base_position")
            try:
                revision = int(position)
            except (TypeError, ValueError):
                logger.warning(f"Skipping {platform} {channel}: bad branch_base_position {position!r}")
                continue
            entries.append(FeedEntry(platform=platform, channel=channel, revision=revision))
    return entries


class OmahaProxyFeed:
    """
    Revision feed served as a single JSON document over HTTPS.

    Attributes:
        url: Feed URL
        timeout: Request timeout in seconds, or None to wait indefinitely
    """

    def __init__(self, url: str = DEFAULT_FEED_URL, timeout: float | None = None):
        self.url = url
        self.timeout = timeout

    def fetch_all(self) -> list[FeedEntry]:
        """Download and filter the feed.

        Raises:
            FeedNetworkError: If the download fails
            FeedParseError: If the body is not a valid feed
        """
        body = http_get(self.url, timeout=self.timeout)
        try:
            document = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise FeedParseError(f"Invalid JSON from {self.url}: {e}") from e
        entries = parse_feed(document)
        logger.debug(f"Feed {self.url}: {len(entries)} entries")
        return entries
