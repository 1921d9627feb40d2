"""HTTP client for the Flint client-store API."""

import asyncio
import logging
import time
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

# Identifies this notifier to the Flint API operators
USER_AGENT = "FlintReleaseNotifier: https://github.com/RappyTV/FlintReleaseNotifier; Contact: contact@rappytv.com"

DEFAULT_BASE_URL = "https://flintmc.net/api/client-store"


class FlintAPIError(Exception):
    """Base error for failed Flint API calls."""


class VersionFetchError(FlintAPIError):
    """The version status call failed; the whole cycle has to be aborted."""


class ChangelogFetchError(FlintAPIError):
    """The changelog call for a single modification failed."""

    def __init__(self, modification: str, reason: str):
        super().__init__(f"Failed to retrieve mod changelog of {modification}: {reason}")
        self.modification = modification


class FlintClient:
    """Async client for version status and changelog lookups."""

    def __init__(
        self,
        labymod_version: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
    ):
        """
        Initialize client.

        Args:
            labymod_version: LabyMod version used for the version status endpoint
            base_url: Root of the client-store API
            timeout: Total request timeout in seconds
        """
        self.labymod_version = labymod_version
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def fetch_versions(self, modifications: list[str]) -> dict[str, Any]:
        """
        Fetch the published version status of all tracked modifications.

        Args:
            modifications: Every tracked modification identifier

        Returns:
            Mapping of identifier to status. A status is a version string,
            ``"INVALIDATED"``, ``"DELETED"`` or a numeric invalid-state marker.
            An empty mapping is returned when the API answers with a bare list.

        Raises:
            VersionFetchError: On any transport, HTTP or decoding failure
        """
        url = f"{self.base_url}/proof-modification-versions/{self.labymod_version}"
        logger.debug(f"Fetching version status of {len(modifications)} mods for LabyMod {self.labymod_version}")
        try:
            session = await self._get_session()
            async with session.post(url, json=list(modifications)) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise VersionFetchError("Failed to validate mod versions: Request timed out")
        except (aiohttp.ClientError, ValueError) as e:
            raise VersionFetchError(f"Failed to validate mod versions: {e}")

        # The API answers with an empty list when it has nothing to report
        if isinstance(data, list):
            return {}
        if not isinstance(data, dict):
            raise VersionFetchError(
                f"Failed to validate mod versions: unexpected response {type(data).__name__}"
            )
        return data

    async def fetch_changelog(self, modification: str) -> list[str]:
        """
        Fetch the release history of one modification.

        Args:
            modification: Modification identifier

        Returns:
            Release version strings in changelog order; the last one is the latest

        Raises:
            ChangelogFetchError: On any transport, HTTP or decoding failure
        """
        url = f"{self.base_url}/get-modification-changelogs/{modification}"
        # Cache-bust so intermediaries never answer with a stale changelog
        params = {"cache": str(int(time.time() * 1000))}
        logger.debug(f"Fetching changelog of {modification}")
        try:
            session = await self._get_session()
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise ChangelogFetchError(modification, "Request timed out")
        except (aiohttp.ClientError, ValueError) as e:
            raise ChangelogFetchError(modification, str(e))

        if not isinstance(data, list):
            raise ChangelogFetchError(modification, f"unexpected response {type(data).__name__}")

        releases = []
        for entry in data:
            if not isinstance(entry, dict) or not isinstance(entry.get("release"), str):
                raise ChangelogFetchError(modification, "changelog entry without release version")
            releases.append(entry["release"])
        return releases

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
