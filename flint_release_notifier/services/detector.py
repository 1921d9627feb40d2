"""Release/approval detection against the cached state of a modification."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .state import CacheRecord, CacheStore

logger = logging.getLogger(__name__)

INVALIDATED = "INVALIDATED"
DELETED = "DELETED"


class NotificationType(Enum):
    """Kinds of events a webhook message is sent for."""

    RELEASED = "released"
    APPROVED = "approved"
    BOTH = "both"


@dataclass(frozen=True)
class Decision:
    """
    Outcome of comparing fetched data with the cache.

    ``record`` is the record to persist (None leaves the cache untouched),
    ``event`` the notification to send (None sends nothing).
    """

    record: CacheRecord | None = None
    event: NotificationType | None = None
    skipped: bool = False


def evaluate(
    modification: str,
    latest_version: str,
    released_version: Any,
    cached: CacheRecord | None,
) -> Decision:
    """
    Decide what changed for one modification.

    Args:
        modification: Modification identifier, used for logging only
        latest_version: Last release in the modification's changelog
        released_version: Status from the version endpoint, None if absent
        cached: Current cache record, None on first observation

    Returns:
        Decision describing the cache write and notification, if any
    """
    if is_invalid_state(released_version):
        logger.warning(f"Invalid state on {modification}: {released_version}")
        return Decision(skipped=True)
    if released_version == INVALIDATED:
        logger.warning(f"{modification} is invalidated!")
        return Decision(skipped=True)
    if released_version == DELETED:
        logger.error(f"{modification} is deleted!")
        return Decision(skipped=True)

    # Exact match only; "v1.0" and "1.0" are different versions
    is_released = latest_version == released_version

    if cached is None:
        # First sighting seeds the cache without notifying
        logger.info(f"{modification} is not cached yet. Creating...")
        return Decision(record=CacheRecord(latest_version, is_released))

    if cached.latest_version != latest_version:
        if is_released:
            logger.info(f"{modification} has an update which got released instantly!")
        else:
            logger.info(f"{modification} has an update!")
        return Decision(
            record=CacheRecord(latest_version, is_released),
            event=NotificationType.BOTH if is_released else NotificationType.RELEASED,
        )

    if not cached.released and is_released:
        logger.info(f"{modification} has been released!")
        return Decision(
            record=CacheRecord(latest_version, True),
            event=NotificationType.APPROVED,
        )

    logger.debug(f"{modification} did not have any updates.")
    return Decision()


class UpdateDetector:
    """Applies :func:`evaluate` decisions to a :class:`CacheStore`."""

    def __init__(self, store: CacheStore):
        self.store = store

    def process(
        self,
        modification: str,
        latest_version: str,
        released_version: Any,
    ) -> NotificationType | None:
        """
        Compare, persist and return the event to notify about.

        Skip states never touch the cache.

        Raises:
            CacheError: If the cache cannot be read or written
        """
        cached = None if is_skip_state(released_version) else self.store.get(modification)
        decision = evaluate(modification, latest_version, released_version, cached)
        if decision.skipped:
            return None
        if decision.record is not None:
            self.store.put(modification, decision.record)
            if cached is None:
                logger.info(f"{modification} was cached!")
        return decision.event


def is_invalid_state(released_version: Any) -> bool:
    """
    Numeric or otherwise non-string status values.

    Booleans count as well, so a JSON ``true`` is skipped rather than read
    as "not released".
    """
    return released_version is not None and not isinstance(released_version, str)


def is_skip_state(released_version: Any) -> bool:
    """Invalid states, INVALIDATED and DELETED."""
    return is_invalid_state(released_version) or released_version in (INVALIDATED, DELETED)
