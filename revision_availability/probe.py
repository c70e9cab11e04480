"""
Existence checks for prebuilt Chromium snapshot archives.

A probe answers one question: is the archive for a platform and revision
downloadable? Any failure to find out counts as "no".
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_HOST = "https://storage.googleapis.com"
USER_AGENT = "revision-availability/1.0"

# Insertion order is the column order of the report.
DOWNLOAD_URLS = {
    "linux": "{host}/chromium-browser-snapshots/Linux_x64/{revision}/chrome-linux.zip",
    "mac": "{host}/chromium-browser-snapshots/Mac/{revision}/chrome-mac.zip",
    "win32": "{host}/chromium-browser-snapshots/Win/{revision}/chrome-win32.zip",
    "win64": "{host}/chromium-browser-snapshots/Win_x64/{revision}/chrome-win32.zip",
}


class AvailabilityProbe(Protocol):
    """Capability to check whether a platform archive exists for a revision."""

    def supported_platforms(self) -> tuple[str, ...]:
        ...

    def can_download_revision(self, platform: str, revision: int) -> bool:
        ...


class SnapshotProbe:
    """
    Probe backed by HTTP HEAD requests against the snapshot bucket.

    Attributes:
        download_host: Base URL of the snapshot storage
        timeout: Per-request timeout in seconds, or None to wait indefinitely
    """

    def __init__(self, download_host: str = DEFAULT_DOWNLOAD_HOST, timeout: float | None = None):
        self.download_host = download_host.rstrip("/")
        self.timeout = timeout

    def supported_platforms(self) -> tuple[str, ...]:
        return tuple(DOWNLOAD_URLS)

    def revision_url(self, platform: str, revision: int) -> str:
        """Build the archive URL for a platform and revision.

        Raises:
            ValueError: If the platform is not supported
        """
        template = DOWNLOAD_URLS.get(platform)
        if template is None:
            raise ValueError(f"Unsupported platform: {platform}")
        return template.format(host=self.download_host, revision=revision)

    def can_download_revision(self, platform: str, revision: int) -> bool:
        """Check whether the archive exists.

        Returns:
            True if the HEAD request answered 200, False otherwise
        """
        url = self.revision_url(platform, revision)
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT}, method="HEAD")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                available = response.status == 200
        except urllib.error.HTTPError as e:
            logger.debug(f"{platform}@{revision}: HTTP {e.code}")
            return False
        except (urllib.error.URLError, OSError) as e:
            logger.warning(f"{platform}@{revision}: request failed: {e}")
            return False

        logger.debug(f"{platform}@{revision}: {'available' if available else 'missing'}")
        return available
