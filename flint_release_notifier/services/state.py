"""JSON file cache of the last seen release per modification."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Raised when a cache file cannot be read or written."""


@dataclass
class CacheRecord:
    """Latest known version of a modification and whether it is released."""

    latest_version: str
    released: bool

    def to_dict(self) -> dict[str, Any]:
        return {"latestVersion": self.latest_version, "released": self.released}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheRecord":
        if not isinstance(data.get("latestVersion"), str) or not isinstance(data.get("released"), bool):
            raise ValueError(f"malformed cache record: {data!r}")
        return cls(latest_version=data["latestVersion"], released=data["released"])


class CacheStore:
    """Stores one ``<modification>.json`` file per tracked modification."""

    def __init__(self, cache_dir: str | Path = ".cache"):
        """
        Initialize cache store.

        Args:
            cache_dir: Directory holding the cache files, created on first write
        """
        self.cache_dir = Path(cache_dir)

    def path_for(self, modification: str) -> Path:
        return self.cache_dir / f"{modification}.json"

    def get(self, modification: str) -> CacheRecord | None:
        """
        Read the cached record of a modification.

        Returns:
            The record, or None if the modification was never cached

        Raises:
            CacheError: If the file exists but is unreadable or malformed
        """
        path = self.path_for(modification)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return CacheRecord.from_dict(data)
        except (OSError, ValueError) as e:
            raise CacheError(f"Failed to read cache of {modification}: {e}")

    def put(self, modification: str, record: CacheRecord) -> None:
        """
        Persist the record of a modification, replacing any previous one.

        Raises:
            CacheError: If the file cannot be written
        """
        path = self.path_for(modification)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            # The record file is only ever replaced whole
            tmp_path.write_text(json.dumps(record.to_dict()), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise CacheError(f"Failed to write cache of {modification}: {e}")
        logger.debug(f"Wrote cache of {modification}: {record.to_dict()}")
