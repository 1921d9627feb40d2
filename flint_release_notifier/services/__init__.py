"""Services package for the Flint release notifier."""

from .fetcher import FlintClient, FlintAPIError, VersionFetchError, ChangelogFetchError
from .state import CacheRecord, CacheStore, CacheError
from .detector import NotificationType, UpdateDetector, evaluate
from .notifier import Notifier, build_payload

__all__ = [
    "FlintClient",
    "FlintAPIError",
    "VersionFetchError",
    "ChangelogFetchError",
    "CacheRecord",
    "CacheStore",
    "CacheError",
    "NotificationType",
    "UpdateDetector",
    "evaluate",
    "Notifier",
    "build_payload",
]
