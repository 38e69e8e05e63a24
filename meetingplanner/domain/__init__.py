"""
Domain layer - Pure availability-state engine without external I/O.
"""

from .calendar import (
    current_week_start,
    format_date,
    iso_week_number,
    resolve_week_start,
    week_label,
    week_start_timestamp,
)
from .models import DayHours, SelectionState, Slot
from .selection import (
    density_color,
    density_rgb,
    deserialize,
    is_selected,
    parse_slot_key,
    selection_count,
    serialize,
    set_range,
    slot_key,
    toggle,
)
from .slot_catalog import (
    DEFAULT_CATALOG,
    SlotCatalog,
    build_slots,
    day_slot_count,
    is_first_hour_of_day,
)

__all__ = [
    "DayHours",
    "SelectionState",
    "Slot",
    "SlotCatalog",
    "DEFAULT_CATALOG",
    "build_slots",
    "current_week_start",
    "day_slot_count",
    "density_color",
    "density_rgb",
    "deserialize",
    "format_date",
    "is_first_hour_of_day",
    "is_selected",
    "iso_week_number",
    "parse_slot_key",
    "resolve_week_start",
    "selection_count",
    "serialize",
    "set_range",
    "slot_key",
    "toggle",
    "week_label",
    "week_start_timestamp",
]
