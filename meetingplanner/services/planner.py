"""
Application service for editing a meeting's weekly availability.

The service owns the load -> edit -> save cycle: it reads a week's state
through a store adapter, applies the pure engine functions from the domain
layer and writes the new snapshot back. Stores only need to satisfy the
small ``StateStoreProtocol``, so tests can pass an in-memory stub.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from pendulum import DateTime

from ..domain.calendar import week_label, week_start_timestamp
from ..domain.models import SelectionState, Slot
from ..domain.selection import deserialize, serialize, set_range, toggle
from ..domain.slot_catalog import DEFAULT_CATALOG, SlotCatalog

logger = logging.getLogger(__name__)


class StateStoreProtocol(Protocol):
    """Protocol describing the key-value store the service persists through."""

    def read(self, meeting_id: str, week_start: str) -> Dict[str, Any]:
        """Return the last written serialized state, or an empty mapping."""

    def write(
        self,
        meeting_id: str,
        week_start: str,
        data: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Overwrite the serialized state for the key."""


class MeetingPlannerService:
    """
    Orchestrates state persistence around the selection engine.

    Every edit produces a fresh SelectionState snapshot and overwrites the
    stored week with it (last write wins).
    """

    def __init__(
        self,
        store: StateStoreProtocol,
        catalog: Optional[SlotCatalog] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog or DEFAULT_CATALOG

    @property
    def catalog(self) -> SlotCatalog:
        return self._catalog

    @staticmethod
    def describe_week(week_start: DateTime) -> str:
        return week_label(week_start)

    def load_state(self, *, meeting_id: str, week_start: DateTime) -> SelectionState:
        """Read and decode the state of one week."""
        data = self._store.read(meeting_id, week_start_timestamp(week_start))
        return deserialize(data)

    def save_state(
        self,
        *,
        meeting_id: str,
        week_start: DateTime,
        state: SelectionState,
    ) -> SelectionState:
        """Overwrite the stored week with ``state`` and return it."""
        self._store.write(meeting_id, week_start_timestamp(week_start), serialize(state))
        logger.info(
            "Saved %d selected slot(s) for meeting %s, week of %s",
            len(state),
            meeting_id,
            week_start.to_date_string(),
        )
        return state

    def toggle_slot(
        self,
        *,
        meeting_id: str,
        week_start: DateTime,
        day: int,
        hour: int,
        participant: int,
    ) -> SelectionState:
        """
        Flip one participant's selection of one slot and persist the result.

        Raises:
            SlotIndexError: If (day, hour) is outside the operating hours
        """
        self._catalog.index_of(day, hour)

        state = self.load_state(meeting_id=meeting_id, week_start=week_start)
        updated = toggle(state, day, hour, participant)
        return self.save_state(meeting_id=meeting_id, week_start=week_start, state=updated)

    def paint_range(
        self,
        *,
        meeting_id: str,
        week_start: DateTime,
        participant: int,
        index_from: int,
        index_to: int,
        selected: bool,
    ) -> SelectionState:
        """
        Select or clear a participant on a run of catalog slots and persist.

        Raises:
            SlotIndexError: If either index is outside the catalog
        """
        state = self.load_state(meeting_id=meeting_id, week_start=week_start)
        updated = set_range(
            state,
            participant,
            index_from,
            index_to,
            selected,
            catalog=self._catalog,
        )
        return self.save_state(meeting_id=meeting_id, week_start=week_start, state=updated)

    def start_paint(
        self,
        *,
        meeting_id: str,
        week_start: DateTime,
        participant: int,
        slot: Slot,
    ) -> bool:
        """
        Paint value for a drag that starts on ``slot``.

        Starting on an unselected cell paints "selected", starting on a
        selected cell paints "cleared".
        """
        state = self.load_state(meeting_id=meeting_id, week_start=week_start)
        return participant not in state.members(slot)
