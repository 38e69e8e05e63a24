"""
Selection state engine.

Pure functions over SelectionState: membership queries, toggle and range
edits, JSON-safe (de)serialization and the density colour of a slot.
None of them mutate their input.
"""

import colorsys
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from .models import SelectionState, Slot
from .slot_catalog import DEFAULT_CATALOG, SlotCatalog

logger = logging.getLogger(__name__)

_SLOT_KEY_PATTERN = re.compile(r"([0-9]+)-([0-9]+)")

DENSITY_HUE = 120  # green


def slot_key(day: int, hour: int) -> str:
    """Wire key of a slot, e.g. slot_key(0, 10) == "0-10"."""
    return Slot(day=day, hour=hour).key


def parse_slot_key(key: str) -> Slot:
    """
    Inverse of slot_key.

    Raises:
        ValueError: If the key is not of the form "{day}-{hour}" or is out of range
    """
    match = _SLOT_KEY_PATTERN.fullmatch(key) if isinstance(key, str) else None
    if not match:
        raise ValueError(f"Malformed slot key: {key!r}")
    return Slot(day=int(match.group(1)), hour=int(match.group(2)))


def selection_count(state: SelectionState, day: int, hour: int) -> int:
    """Number of participants who selected the slot."""
    return len(state.members(Slot(day=day, hour=hour)))


def is_selected(state: SelectionState, day: int, hour: int, participant: int) -> bool:
    return participant in state.members(Slot(day=day, hour=hour))


def toggle(state: SelectionState, day: int, hour: int, participant: int) -> SelectionState:
    """Flip one participant's selection of one slot."""
    slot = Slot(day=day, hour=hour)
    members = state.members(slot)

    if participant in members:
        return state.with_members(slot, members - {participant})
    return state.with_members(slot, members | {participant})


def set_range(
    state: SelectionState,
    participant: int,
    index_from: int,
    index_to: int,
    selected: bool,
    catalog: Optional[SlotCatalog] = None
) -> SelectionState:
    """
    Select (or clear) a participant on every slot between two catalog indices.

    The indices are inclusive and may be given in either order. Both are
    checked against the catalog before anything is applied.

    Raises:
        SlotIndexError: If either index is outside the catalog
    """
    catalog = catalog or DEFAULT_CATALOG

    low, high = min(index_from, index_to), max(index_from, index_to)
    catalog.slot_at(low)
    catalog.slot_at(high)

    cells = dict(state)
    for slot in catalog.build_slots()[low:high + 1]:
        members = cells.get(slot, frozenset())
        cells[slot] = (members | {participant}) if selected else (members - {participant})

    return SelectionState(cells)


def serialize(state: SelectionState) -> Dict[str, List[int]]:
    """
    JSON-safe form: {"day-hour": [participant, ...]}.

    Keys follow catalog order and member lists are ascending, so the output
    is stable for a given state.
    """
    return {slot.key: sorted(state[slot]) for slot in state}


def deserialize(data: Optional[Mapping]) -> SelectionState:
    """
    Build a SelectionState from its serialized form.

    Missing input yields an empty state. Duplicate members collapse.
    Malformed keys and members are skipped with a warning instead of
    raising, so a damaged store entry never blocks loading a week.
    """
    if not data:
        return SelectionState.empty()

    if not isinstance(data, Mapping):
        logger.warning("Ignoring serialized state of type %s", type(data).__name__)
        return SelectionState.empty()

    cells: Dict[Slot, set] = {}

    for key, members in data.items():
        try:
            slot = parse_slot_key(key)
        except ValueError as exc:
            logger.warning("Skipping slot entry: %s", exc)
            continue

        if not isinstance(members, (list, tuple)):
            logger.warning("Skipping slot %s: expected a list, got %r", key, members)
            continue

        target = cells.setdefault(slot, set())
        for member in members:
            if _is_participant_index(member):
                target.add(member)
            else:
                logger.warning("Skipping invalid participant %r in slot %s", member, key)

    return SelectionState(cells)


def _is_participant_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _density_components(count: int):
    saturation = 40 + 12 * count
    lightness = max(25, 95 - 12 * count)
    return saturation, lightness


def density_color(count: int) -> Optional[str]:
    """
    CSS colour for a slot selected by ``count`` participants.

    More participants give a more saturated, darker green. Returns None when
    nobody selected the slot.
    """
    if count <= 0:
        return None

    saturation, lightness = _density_components(count)
    return f"hsl({DENSITY_HUE}, {saturation}%, {lightness}%)"


def density_rgb(count: int) -> Optional[str]:
    """Same colour as density_color, as "#rrggbb" for terminal output."""
    if count <= 0:
        return None

    saturation, lightness = _density_components(count)
    # CSS clamps saturation to 100%
    red, green, blue = colorsys.hls_to_rgb(
        DENSITY_HUE / 360,
        lightness / 100,
        min(saturation, 100) / 100
    )
    return "#{:02x}{:02x}{:02x}".format(
        round(red * 255),
        round(green * 255),
        round(blue * 255)
    )
