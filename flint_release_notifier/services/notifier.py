"""Discord webhook notifications for release events."""

import asyncio
import logging
from typing import Any

import aiohttp

from .detector import NotificationType

logger = logging.getLogger(__name__)

EMBED_COLOR = 2463422

TITLES = {
    NotificationType.BOTH: "New approved release",
    NotificationType.RELEASED: "New release",
    NotificationType.APPROVED: "Release approved",
}

ACTIONS = {
    NotificationType.BOTH: "released and approved",
    NotificationType.RELEASED: "released",
    NotificationType.APPROVED: "approved",
}


def build_payload(
    modification: str,
    event: NotificationType,
    version: str,
    content: str = "",
) -> dict[str, Any]:
    """
    Build the webhook body for one event.

    Args:
        modification: Modification identifier
        event: Kind of event
        version: Version the event refers to
        content: Plain text sent above the embed, omitted when blank

    Returns:
        JSON-serializable webhook body
    """
    payload: dict[str, Any] = {
        "embeds": [
            {
                "color": EMBED_COLOR,
                "title": TITLES[event],
                "description": f"The version `v{version}` of `{modification}` just got {ACTIONS[event]}!",
            }
        ]
    }
    if content.strip():
        payload["content"] = content
    return payload


class Notifier:
    """
    Posts release events to a Discord webhook without blocking the caller.

    Deliveries run as detached tasks. Their failures are logged and
    otherwise dropped; an update cycle never waits for or depends on them.
    """

    def __init__(self, webhook_url: str = "", content: str = "", timeout: float = 10):
        """
        Initialize notifier.

        Args:
            webhook_url: Webhook destination; blank disables notifications
            content: Optional plain text prefixed to every message
            timeout: Delivery timeout in seconds
        """
        self.webhook_url = webhook_url.strip()
        self.content = content
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def notify(
        self,
        modification: str,
        event: NotificationType,
        version: str,
    ) -> asyncio.Task | None:
        """
        Schedule delivery of one event and return immediately.

        Must be called from a running event loop.

        Returns:
            The delivery task, or None when notifications are disabled
        """
        if not self.enabled:
            return None

        payload = build_payload(modification, event, version, self.content)
        task = asyncio.get_running_loop().create_task(self.send(payload))
        self._pending.add(task)
        task.add_done_callback(self._on_delivered)
        return task

    async def send(self, payload: dict[str, Any]) -> None:
        """
        Post a webhook body.

        Raises:
            aiohttp.ClientError: On transport or HTTP failure
            asyncio.TimeoutError: If delivery exceeds the timeout
        """
        session = await self._get_session()
        async with session.post(self.webhook_url, json=payload) as response:
            response.raise_for_status()
        logger.debug(f"Delivered webhook: {payload['embeds'][0]['title']}")

    def _on_delivered(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Failed to send webhook: {error!r}")

    async def drain(self) -> None:
        """Wait for deliveries still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def close(self):
        """Drain pending deliveries and close the HTTP session."""
        await self.drain()
        if self._session and not self._session.closed:
            await self._session.close()
