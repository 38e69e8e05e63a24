"""
HTTP client for the meeting state REST endpoint.

Endpoint contract:
    GET /api/meetings/{meetingId}/state?weekStart={ts}  -> state object
    PUT /api/meetings/{meetingId}/state?weekStart={ts}  -> stored state object
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..domain.exceptions import StoreError
from .validation import validate_key

logger = logging.getLogger(__name__)


class HttpStateStore:
    """
    State store backed by a remote planner server.

    A ``requests.Session`` can be injected to share connections or to stub
    the transport in tests.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _state_url(self, meeting_id: str) -> str:
        return f"{self.base_url}/api/meetings/{meeting_id}/state"

    def read(self, meeting_id: str, week_start: str) -> Dict[str, Any]:
        """
        Fetch the state for a week.

        Raises:
            StoreError: If the request fails or the server answers with an error
        """
        validate_key(meeting_id, week_start)

        try:
            response = self.session.get(
                self._state_url(meeting_id),
                params={"weekStart": week_start},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise StoreError(f"Failed to load meeting state: {e}") from e
        except ValueError as e:
            raise StoreError(f"Server returned invalid JSON: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StoreError("Server returned a non-object state")

        logger.debug("Fetched %d slot(s) for %s/%s", len(data), meeting_id, week_start)
        return data

    def write(
        self,
        meeting_id: str,
        week_start: str,
        data: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Replace the state for a week on the server.

        Raises:
            StoreError: If the request fails or the server answers with an error
        """
        validate_key(meeting_id, week_start)

        try:
            response = self.session.put(
                self._state_url(meeting_id),
                params={"weekStart": week_start},
                json=data or {},
                timeout=self.timeout
            )
            response.raise_for_status()
            stored = response.json()
        except requests.exceptions.RequestException as e:
            raise StoreError(f"Failed to save meeting state: {e}") from e
        except ValueError as e:
            raise StoreError(f"Server returned invalid JSON: {e}") from e

        logger.debug("Saved %d slot(s) for %s/%s", len(data or {}), meeting_id, week_start)
        return stored if isinstance(stored, dict) else {}
