"""
Shared test doubles for the probe and feed collaborators.
"""

import threading

import pytest


PLATFORMS = ("linux", "mac", "win32", "win64")


class StubProbe:
    """Probe answering from a function, recording every call in order."""

    def __init__(self, answer=None, platforms=PLATFORMS):
        self.answer = answer or (lambda platform, revision: True)
        self.platforms = tuple(platforms)
        self.calls = []
        self._lock = threading.Lock()

    def supported_platforms(self):
        return self.platforms

    def can_download_revision(self, platform, revision):
        with self._lock:
            self.calls.append((platform, revision))
        return self.answer(platform, revision)


class StubFeed:
    """Feed returning fixed entries or raising a fixed error."""

    url = "https://feed.example.com/all.json"

    def __init__(self, entries=None, error=None):
        self.entries = entries or []
        self.error = error

    def fetch_all(self):
        if self.error is not None:
            raise self.error
        return list(self.entries)


@pytest.fixture
def make_probe():
    return StubProbe


@pytest.fixture
def make_feed():
    return StubFeed
