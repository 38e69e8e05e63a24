"""
File-backed state store.

All meetings share one JSON document shaped as
``{meetingId: {weekStart: serializedState}}``. Each write rewrites the whole
document, so the last writer wins.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..domain.exceptions import StoreError
from .validation import validate_key

logger = logging.getLogger(__name__)


class JsonFileStateStore:
    """
    Persists weekly selection state in a single JSON file.

    The parent directory is created on first use; a missing file reads as
    an empty store.
    """

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)

    def read(self, meeting_id: str, week_start: str) -> Dict[str, Any]:
        """Return the stored state for a week, or an empty mapping."""
        validate_key(meeting_id, week_start)

        store = self._load()
        state = self._meeting_entry(store, meeting_id).get(week_start, {})
        if not isinstance(state, dict):
            raise StoreError(
                f"State of {meeting_id}/{week_start} in {self.data_file} must be a JSON object"
            )
        logger.debug("Read %d slot(s) for %s/%s", len(state), meeting_id, week_start)
        return state

    def write(
        self,
        meeting_id: str,
        week_start: str,
        data: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Overwrite the stored state for a week.

        Raises:
            StoreError: If the payload is not a JSON object or the file cannot be written
        """
        validate_key(meeting_id, week_start)

        if data is not None and not isinstance(data, dict):
            raise StoreError("State payload must be a JSON object")

        store = self._load()
        store[meeting_id] = self._meeting_entry(store, meeting_id)
        store[meeting_id][week_start] = data or {}
        self._save(store)

        logger.debug("Wrote %d slot(s) for %s/%s", len(data or {}), meeting_id, week_start)
        return store[meeting_id][week_start]

    def _load(self) -> Dict[str, Any]:
        self._ensure_data_dir()

        try:
            with open(self.data_file, "r", encoding="utf-8") as file_handle:
                store = json.load(file_handle)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Could not read state file {self.data_file}: {exc}") from exc

        if not isinstance(store, dict):
            raise StoreError(f"State file {self.data_file} must contain a JSON object")
        return store

    def _meeting_entry(self, store: Dict[str, Any], meeting_id: str) -> Dict[str, Any]:
        entry = store.get(meeting_id, {})
        if not isinstance(entry, dict):
            raise StoreError(
                f"Entry for meeting {meeting_id} in {self.data_file} must be a JSON object"
            )
        return entry

    def _save(self, store: Dict[str, Any]) -> None:
        self._ensure_data_dir()

        try:
            with open(self.data_file, "w", encoding="utf-8") as file_handle:
                json.dump(store, file_handle, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise StoreError(f"Could not write state file {self.data_file}: {exc}") from exc

    def _ensure_data_dir(self) -> None:
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Could not create data directory {self.data_file.parent}: {exc}") from exc
