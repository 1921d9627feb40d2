"""Scheduled update check for watched Flint modifications."""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Settings, load_settings
from .services.fetcher import FlintClient, ChangelogFetchError, VersionFetchError
from .services.state import CacheStore, CacheError
from .services.detector import UpdateDetector
from .services.notifier import Notifier

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def process_mod(
    modification: str,
    versions: dict[str, Any],
    client: FlintClient,
    detector: UpdateDetector,
    notifier: Notifier,
) -> bool:
    """
    Check one modification and schedule its notification.

    Returns True if an event was detected. Changelog and cache failures
    propagate to the caller, which skips only this modification.
    """
    releases = await client.fetch_changelog(modification)
    if not releases:
        logger.warning(f"{modification} has an empty changelog, skipping")
        return False

    latest_version = releases[-1]
    event = detector.process(modification, latest_version, versions.get(modification))
    if event is None:
        return False

    notifier.notify(modification, event, latest_version)
    return True


async def check_for_updates(
    settings: Settings,
    client: FlintClient,
    detector: UpdateDetector,
    notifier: Notifier,
) -> dict[str, Any]:
    """Run one full cycle over every watched modification, in configured order."""
    start_time = datetime.now(timezone.utc)
    mods = list(settings.watched_mods)

    logger.debug("Retrieving mod versions...")
    try:
        versions = await client.fetch_versions(mods)
    except VersionFetchError as e:
        logger.error(str(e))
        return {
            "status": "aborted",
            "mods_checked": 0,
            "notifications": 0,
            "errors": 1,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    notifications = 0
    errors = 0
    for mod in mods:
        try:
            if await process_mod(mod, versions, client, detector, notifier):
                notifications += 1
        except (ChangelogFetchError, CacheError) as e:
            errors += 1
            logger.error(str(e))

    end_time = datetime.now(timezone.utc)
    summary = {
        "status": "success",
        "mods_checked": len(mods),
        "notifications": notifications,
        "errors": errors,
        "duration_seconds": (end_time - start_time).total_seconds(),
        "timestamp": end_time.isoformat(),
    }
    logger.info("Update check complete.")
    logger.debug(f"Completed: {json.dumps(summary)}")
    return summary


async def serve(settings: Settings) -> None:
    """Run the update check on the configured cron schedule until cancelled."""
    tz = ZoneInfo(settings.timezone)
    client = FlintClient(
        settings.labymod_version,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
    )
    detector = UpdateDetector(CacheStore(settings.cache_dir))
    notifier = Notifier(
        settings.webhook_url,
        settings.webhook_content,
        timeout=settings.request_timeout,
    )

    scheduler = AsyncIOScheduler(timezone=tz)
    scheduler.add_job(
        check_for_updates,
        CronTrigger.from_crontab(settings.cron, timezone=tz),
        args=(settings, client, detector, notifier),
        id="check_for_updates",
        # A cycle still running blocks the next trigger
        max_instances=1,
        coalesce=True,
        misfire_grace_time=60,
        next_run_time=datetime.now(tz),
    )
    scheduler.start()
    logger.info(
        f"Watching {len(settings.watched_mods)} mods on '{settings.cron}' ({settings.timezone})"
    )

    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await notifier.close()
        await client.close()


def main() -> None:
    """Console entry point."""
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
