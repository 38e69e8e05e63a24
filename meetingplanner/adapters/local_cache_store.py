"""
On-device cache of weekly state.

One JSON file per week named ``meeting-planner-{weekStart}.json``. The cache
is best effort: unreadable or corrupt entries read as empty and are logged.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..domain.exceptions import StoreError
from .validation import validate_key

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "meeting-planner-"


class LocalCacheStore:
    """
    State store keeping each week in its own file under ``cache_dir``.

    With ``per_meeting=True`` the meeting id is part of the file name, so
    several meetings can share one cache directory.
    """

    def __init__(self, cache_dir: Path, per_meeting: bool = False):
        self.cache_dir = Path(cache_dir)
        self.per_meeting = per_meeting

    def cache_key(self, meeting_id: str, week_start: str) -> str:
        if self.per_meeting:
            return f"{CACHE_KEY_PREFIX}{meeting_id}-{week_start}"
        return f"{CACHE_KEY_PREFIX}{week_start}"

    def _path_for(self, meeting_id: str, week_start: str) -> Path:
        return self.cache_dir / f"{self.cache_key(meeting_id, week_start)}.json"

    def read(self, meeting_id: str, week_start: str) -> Dict[str, Any]:
        validate_key(meeting_id, week_start)
        path = self._path_for(meeting_id, week_start)

        if not path.exists():
            return {}

        try:
            with open(path, "r", encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not load cached state %s: %s", path, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring cached state %s: not a JSON object", path)
            return {}
        return data

    def write(
        self,
        meeting_id: str,
        week_start: str,
        data: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Raises:
            StoreError: If the payload is not a JSON object or cannot be written
        """
        validate_key(meeting_id, week_start)

        if data is not None and not isinstance(data, dict):
            raise StoreError("State payload must be a JSON object")

        path = self._path_for(meeting_id, week_start)
        payload = data or {}

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as file_handle:
                json.dump(payload, file_handle)
        except OSError as exc:
            raise StoreError(f"Could not save cached state to {path}: {exc}") from exc

        return payload

    def clear(self) -> int:
        """Remove all cached weeks. Returns the number of files deleted."""
        if not self.cache_dir.exists():
            return 0

        removed = 0
        for path in self.cache_dir.glob(f"{CACHE_KEY_PREFIX}*.json"):
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Could not remove cached state %s: %s", path, exc)
        return removed
