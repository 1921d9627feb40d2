"""
Shared fixtures for the release notifier tests.
"""

import pytest

from flint_release_notifier.config import Settings
from flint_release_notifier.services.detector import UpdateDetector
from flint_release_notifier.services.fetcher import ChangelogFetchError, VersionFetchError
from flint_release_notifier.services.state import CacheStore


class FakeClient:
    """Stands in for FlintClient with canned responses."""

    def __init__(self, versions=None, changelogs=None, fail_versions=False, failing_mods=()):
        self.versions = versions or {}
        self.changelogs = changelogs or {}
        self.fail_versions = fail_versions
        self.failing_mods = set(failing_mods)
        self.changelog_calls = []

    async def fetch_versions(self, modifications):
        if self.fail_versions:
            raise VersionFetchError("Failed to validate mod versions: boom")
        return dict(self.versions)

    async def fetch_changelog(self, modification):
        self.changelog_calls.append(modification)
        if modification in self.failing_mods:
            raise ChangelogFetchError(modification, "boom")
        return list(self.changelogs.get(modification, []))


class RecordingNotifier:
    """Collects notify() calls instead of posting them."""

    def __init__(self):
        self.sent = []

    def notify(self, modification, event, version):
        self.sent.append((modification, event, version))
        return None


@pytest.fixture
def store(tmp_path):
    """Cache store in a temporary directory."""
    return CacheStore(tmp_path / "cache")


@pytest.fixture
def detector(store):
    return UpdateDetector(store)


@pytest.fixture
def recorder():
    return RecordingNotifier()


@pytest.fixture
def make_settings(tmp_path):
    """Factory for settings watching the given mods."""

    def _make(*mods):
        return Settings(
            cron="0 * * * *",
            labymod_version="4.2.47",
            watched_mods=tuple(mods),
            webhook_url="",
            webhook_content="",
            timezone="Europe/Berlin",
            cache_dir=str(tmp_path / "cache"),
            request_timeout=10,
            api_base_url="http://localhost",
            log_level="DEBUG",
        )

    return _make
